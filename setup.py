from setuptools import setup, find_namespace_packages

setup(
    name="os2grzmeta",
    version="0.1.0",
    description="Export GRZ metadata templates from the Onkostar database",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["os2grzmeta*"]),
    package_data={"os2grzmeta.profiles": ["profiles.json"]},
    include_package_data=True,
    install_requires=[
        "pandas>=2.1.0",
        "sqlalchemy>=2.0.19",
        "pymysql>=1.1.0",
        "pydantic>=2.5.0",
        "pydantic-core>=2.14.0",
        "click>=8.1.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=8.0.0"],
    },
    entry_points={
        "console_scripts": [
            "os2grzmeta=os2grzmeta.scripts.run_export:main",
            "os2grzmeta-check-db=os2grzmeta.scripts.check_db:main",
            "os2grzmeta-profiles=os2grzmeta.scripts.list_profiles:main",
        ],
    },
    python_requires=">=3.10",
)
