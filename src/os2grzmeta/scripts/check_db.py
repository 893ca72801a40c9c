"""
Check the database connection and the Onkostar tables the export reads.
Run with: os2grzmeta-check-db --user onkostar
"""
import click
from os2grzmeta.core.config import load_settings
from os2grzmeta.core.db import REQUIRED_TABLES, get_engine, missing_tables, open_connection
from os2grzmeta.core.errors import Os2GrzMetaError

@click.command(name="os2grzmeta-check-db")
@click.option("-U", "--user", default=None, help="Database username (env: DB_USER)")
@click.option("-P", "--password", default=None, help="Database password (env: DB_PASSWORD)")
@click.option("-H", "--host", default=None, help="Database host")
@click.option("--port", type=int, default=None, help="Database port")
@click.option("-D", "--database", default=None, help="Database name")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None, help="JSON config file")
def main(config_file, **options):
    try:
        settings = load_settings(options, config_file)
        engine = get_engine(settings)
        with open_connection(engine, settings.host, require_ssl=settings.ssl == "true") as conn:
            missing = missing_tables(conn)
    except Os2GrzMetaError as e:
        click.echo("Database Connection: FAILED")
        raise click.ClickException(str(e)) from e

    click.echo("Database Connection: SUCCESS\n")
    click.echo("Onkostar tables:")
    for table in REQUIRED_TABLES:
        click.echo(f"  - {table}: {'missing' if table in missing else 'ok'}")

    if missing:
        raise click.ClickException(f"{len(missing)} required table(s) missing")

if __name__ == "__main__":
    main()
