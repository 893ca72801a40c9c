"""
CLI for exporting a GRZ metadata template from Onkostar.
Run with:
    os2grzmeta --user onkostar --sample-id E2024-001 --filename metadata.json
Or:
    python -m os2grzmeta.scripts.run_export ...
"""

from __future__ import annotations
import logging
import click
from os2grzmeta.core.config import SSL_MODES, Settings, load_settings
from os2grzmeta.core.db import get_engine, open_connection
from os2grzmeta.core.errors import Os2GrzMetaError
from os2grzmeta.core.logging_setup import setup_logging
from os2grzmeta.load.write_json import write_metadata
from os2grzmeta.profiles.catalog import load_catalog
from os2grzmeta.services.export import run_export

log = logging.getLogger(__name__)


class ClickPrompter:
    """Operator prompts on the terminal."""

    def choose(self, title: str, options: list[str], default: str | None = None) -> str:
        return click.prompt(title, type=click.Choice(options), default=default, show_choices=True)

    def ask(self, title: str, default: str | None = None) -> str | None:
        value = click.prompt(title, default=default or "", show_default=bool(default))
        return value.strip() or None


def _ask_password(settings: Settings) -> None:
    if settings.password is None and settings.interactive:
        settings.password = click.prompt("Passwort", hide_input=True, default="", show_default=False)


@click.command(name="os2grzmeta")
@click.option("-U", "--user", default=None, help="Database username (env: DB_USER)")
@click.option("-P", "--password", default=None, help="Database password (env: DB_PASSWORD, prompted if missing)")
@click.option("-H", "--host", default=None, help="Database host (default: localhost)")
@click.option("--port", type=int, default=None, help="Database port (default: 3306)")
@click.option("--ssl", type=click.Choice(SSL_MODES), default=None, help="SSL connection mode (default: false)")
@click.option("-D", "--database", default=None, help="Database name (default: onkostar)")
@click.option("--sample-id", default=None, help="Einsendenummer of the sample")
@click.option("--filename", type=click.Path(dir_okay=False), default=None, help="Output file")
@click.option("--case-id", default=None, help="Fallnummer MV, skips the case selection")
@click.option("--ik", default=None, help="Clinic IK used for profile lookup")
@click.option("--profile", default=None, help="Profile name, or 'none'")
@click.option("--grz", default=None, help="Genomic data center id")
@click.option("--kdk", default=None, help="Clinical data node id")
@click.option("--profiles-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Profile catalog JSON (env: PROFILES_FILE, default: bundled catalog)")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None,
              help="JSON config file (default: ~/.osdb-config.json if present)")
@click.option("--no-input", is_flag=True, help="Never prompt; missing selections stay unset, ambiguous cases fail")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(config_file, no_input, verbose, **options):
    """Export a GRZ metadata template for one sample from the Onkostar database."""
    try:
        overrides = dict(options)
        if no_input:
            overrides["interactive"] = False
        if verbose:
            overrides["log_level"] = "DEBUG"
        settings = load_settings(overrides, config_file)
        setup_logging(settings.log_level, settings.log_file)

        if not settings.sample_id:
            raise click.UsageError("Missing option '--sample-id'.")
        if not settings.filename:
            raise click.UsageError("Missing option '--filename'.")

        catalog = load_catalog(settings.profiles_file)
        _ask_password(settings)
        prompter = ClickPrompter() if settings.interactive else None

        engine = get_engine(settings)
        with open_connection(engine, settings.host, require_ssl=settings.ssl == "true") as conn:
            metadata = run_export(conn, settings, catalog, prompter)

        target = write_metadata(metadata, settings.filename)
    except Os2GrzMetaError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Metadata written to {target}")


if __name__ == "__main__":
    main()
