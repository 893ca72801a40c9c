"""
Runtime settings: .env / environment, optional JSON config file, CLI overrides.
"""

from __future__ import annotations
import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from dotenv import load_dotenv
from sqlalchemy.engine import URL
from os2grzmeta.core.errors import ConfigError

load_dotenv()

# defaults
DEFAULT_CONFIG_FILE = Path.home() / ".osdb-config.json"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306
DEFAULT_DATABASE = "onkostar"
DEFAULT_SSL = "false"
SSL_MODES = ("true", "false", "skip-verify", "preferred")

# settings field -> environment variable
ENV_VARS = {
    "user": "DB_USER",
    "password": "DB_PASSWORD",
    "host": "DB_HOST",
    "port": "DB_PORT",
    "ssl": "DB_SSL",
    "database": "DB_NAME",
    "profiles_file": "PROFILES_FILE",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
}


@dataclass
class Settings:
    user: str | None = None
    password: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ssl: str = DEFAULT_SSL
    database: str = DEFAULT_DATABASE
    sample_id: str | None = None
    filename: str | None = None
    case_id: str | None = None
    ik: str | None = None
    profile: str | None = None
    grz: str | None = None
    kdk: str | None = None
    profiles_file: str | None = None
    interactive: bool = True
    log_level: str = "INFO"
    log_file: str | None = None
    extra: dict = field(default_factory=dict, repr=False)

    def database_url(self) -> URL:
        if not self.user:
            raise ConfigError("Missing database user (--user or DB_USER)")
        return URL.create(
            "mysql+pymysql",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def connect_args(self) -> dict:
        return ssl_connect_args(self.ssl)


def ssl_connect_args(mode: str) -> dict:
    """Translate an SSL mode into PyMySQL connect arguments."""
    mode = (mode or DEFAULT_SSL).strip().lower()
    if mode == "false":
        return {}
    if mode == "true":
        return {"ssl_verify_cert": True, "ssl_verify_identity": True}
    if mode in ("skip-verify", "preferred"):
        # encrypted, certificate not checked
        return {"ssl": {"verify_mode": "none"}}
    raise ConfigError(f"Unknown SSL mode '{mode}', expected one of: {', '.join(SSL_MODES)}")


def read_config_file(path: Path | str | None) -> dict:
    """Read the JSON config file; a missing default file yields no values."""
    if path is None:
        path = DEFAULT_CONFIG_FILE
        if not path.exists():
            return {}
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    # camelCase keys as written by existing osdb config files
    aliases = {"sampleId": "sample_id", "profilesFile": "profiles_file"}
    return {aliases.get(k, k).lower(): v for k, v in data.items()}


TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")

def _to_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in TRUE_VALUES:
        return True
    if s in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid value for {name}: {value!r}, expected true or false")


def _from_env() -> dict:
    out = {}
    for name, var in ENV_VARS.items():
        value = os.getenv(var)
        if value not in (None, ""):
            out[name] = value
    return out


def load_settings(overrides: dict | None = None, config_file: Path | str | None = None) -> Settings:
    """
    Merge settings sources. Precedence: overrides (CLI) > environment > config file > defaults.
    None values in overrides mean "not given".
    """
    known = {f.name for f in fields(Settings)} - {"extra"}
    merged: dict = {}
    extra: dict = {}

    for source in (read_config_file(config_file), _from_env(), overrides or {}):
        for key, value in source.items():
            if value is None:
                continue
            if key in known:
                merged[key] = value
            else:
                extra[key] = value

    if "port" in merged:
        try:
            merged["port"] = int(merged["port"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid database port: {merged['port']!r}") from e
    if "interactive" in merged:
        merged["interactive"] = _to_bool("interactive", merged["interactive"])
    if "ssl" in merged:
        merged["ssl"] = str(merged["ssl"]).strip().lower()
        if merged["ssl"] not in SSL_MODES:
            raise ConfigError(f"Unknown SSL mode '{merged['ssl']}', expected one of: {', '.join(SSL_MODES)}")

    return Settings(**merged, extra=extra)
