"""Exceptions that end an export run."""

from __future__ import annotations


class Os2GrzMetaError(RuntimeError):
    """Base class for fatal export errors."""


class ConfigError(Os2GrzMetaError):
    """Missing or invalid settings, or an unreadable profile catalog."""


class DatabaseConnectionError(Os2GrzMetaError):
    """Raised when the Onkostar database cannot be reached or authentication fails."""

    def __init__(self, host: str | None = None, reason: str | None = None) -> None:
        base = "Cannot connect to database"
        if host is not None:
            base = f"{base} at {host}"
        if reason:
            base = f"{base}: {reason}"
        super().__init__(base)


class FetchError(Os2GrzMetaError):
    """A query failed or returned rows that could not be read."""


class SelectionError(Os2GrzMetaError):
    """A required operator selection is missing in non-interactive mode."""


class OutputError(Os2GrzMetaError):
    """The metadata file could not be written."""
