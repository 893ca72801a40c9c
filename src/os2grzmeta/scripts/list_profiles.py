"""
List clinics and profiles of the profile catalog.
Run with: os2grzmeta-profiles [--profiles-file site_profiles.json]
"""
import click
from os2grzmeta.core.errors import Os2GrzMetaError
from os2grzmeta.profiles.catalog import load_catalog

@click.command(name="os2grzmeta-profiles")
@click.option("--profiles-file", type=click.Path(exists=True, dir_okay=False), default=None,
              envvar="PROFILES_FILE", help="Profile catalog JSON (default: bundled catalog)")
def main(profiles_file):
    try:
        catalog = load_catalog(profiles_file)
    except Os2GrzMetaError as e:
        raise click.ClickException(str(e)) from e

    if not catalog.clinics:
        click.echo("No clinics in profile catalog")
        return

    for clinic in catalog.clinics:
        click.echo(f"{clinic.ik}: {clinic.name or '-'}")
        click.echo(f"  GRZ: {', '.join(clinic.grz) or '-'}")
        click.echo(f"  KDK: {', '.join(clinic.kdk) or '-'}")
        for profile in clinic.profiles:
            click.echo(f"  - {profile.name}")

if __name__ == "__main__":
    main()
