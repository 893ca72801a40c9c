import logging
from contextlib import contextmanager
from collections.abc import Iterator
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from os2grzmeta.core.config import Settings
from os2grzmeta.core.errors import DatabaseConnectionError

log = logging.getLogger(__name__)

# Onkostar tables read by the export queries
REQUIRED_TABLES = (
    "dk_molekulargenetik",
    "prozedur",
    "patient",
    "organisationunit",
    "property_catalogue_version_entry",
    "dk_dnpm_kpa",
    "dk_dnpm_therapieplan",
    "dk_dnpm_consentmv",
    "dk_dnpm_uf_consentmvverlauf",
    "dk_dnpm_uf_rebiopsie",
    "dk_dnpm_uf_reevaluation",
    "dk_dnpm_uf_einzelempfehlung",
)

SSL_STATUS_QUERY = text("SHOW SESSION STATUS LIKE 'Ssl_cipher'")

def get_engine(settings: Settings) -> Engine:
    try:
        return create_engine(
            settings.database_url(),
            connect_args=settings.connect_args(),
            pool_pre_ping=True,
            echo=False,
            future=True,
        )
    except SQLAlchemyError as e:
        log.error("Failed to create engine: %s", e)
        raise DatabaseConnectionError(settings.host, str(e)) from e

def ssl_in_use(conn: Connection) -> bool:
    """True if the session negotiated TLS (non-empty Ssl_cipher)."""
    row = conn.execute(SSL_STATUS_QUERY).first()
    return bool(row and row[1])

@contextmanager
def open_connection(engine: Engine, host: str | None = None, require_ssl: bool = False) -> Iterator[Connection]:
    """
    One read connection for the whole run; closed and disposed on every exit path.
    PyMySQL falls back to plaintext when the server offers no TLS, so with
    `require_ssl` such a session is refused before any query runs.
    """
    try:
        conn = engine.connect()
    except SQLAlchemyError as e:
        engine.dispose()
        log.error("Cannot connect to database: %s", e)
        raise DatabaseConnectionError(host, str(e)) from e

    try:
        if require_ssl:
            try:
                encrypted = ssl_in_use(conn)
            except SQLAlchemyError as e:
                raise DatabaseConnectionError(host, f"cannot verify TLS: {e}") from e
            if not encrypted:
                log.error("Server at %s did not negotiate TLS", host)
                raise DatabaseConnectionError(host, "server did not negotiate TLS (--ssl true)")
        yield conn
    finally:
        try:
            conn.close()
        except SQLAlchemyError as e:
            log.warning("Cannot close database connection: %s", e)
        engine.dispose()

def missing_tables(conn: Connection) -> list[str]:
    """Required Onkostar tables not present in the connected schema."""
    existing = set(inspect(conn).get_table_names())
    return [t for t in REQUIRED_TABLES if t not in existing]
