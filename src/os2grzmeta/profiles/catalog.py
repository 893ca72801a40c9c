"""
Profile catalog: clinics (by IK) with their GRZ/KDK ids and named default profiles.
Loaded once per run from the bundled profiles.json or a site-specific file.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from pydantic import TypeAdapter, ValidationError
from os2grzmeta.core.errors import ConfigError
from os2grzmeta.models.profiles import Clinic, Profile

log = logging.getLogger(__name__)

BUNDLED_PROFILES = Path(__file__).resolve().parent / "profiles.json"
NO_PROFILE = "none"

_clinics_adapter = TypeAdapter(tuple[Clinic, ...])


@dataclass(frozen=True)
class ProfileCatalog:
    clinics: tuple[Clinic, ...] = ()

    def find_clinic(self, ik: str | None) -> Clinic | None:
        for clinic in self.clinics:
            if clinic.ik == ik:
                return clinic
        return None

    def find_profile(self, ik: str | None, profile_name: str | None) -> Profile | None:
        """Exact (ik, name) match; no fallback profile."""
        if not profile_name or profile_name == NO_PROFILE:
            return None
        clinic = self.find_clinic(ik)
        if clinic is None:
            return None
        for profile in clinic.profiles:
            if profile.name == profile_name:
                return profile
        return None

    def profile_names(self, ik: str | None) -> list[str]:
        clinic = self.find_clinic(ik)
        return [p.name for p in clinic.profiles] if clinic else []


def parse_catalog(data) -> ProfileCatalog:
    try:
        return ProfileCatalog(clinics=_clinics_adapter.validate_python(data))
    except ValidationError as e:
        raise ConfigError(f"Invalid profile catalog: {e}") from e


def load_catalog(path: Path | str | None = None) -> ProfileCatalog:
    """Read and validate the catalog file (bundled one if no path is given)."""
    path = Path(path) if path else BUNDLED_PROFILES
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read profile catalog {path}: {e}") from e

    catalog = parse_catalog(data)
    log.info(
        "Loaded profile catalog %s (%d clinics, %d profiles)",
        path.name, len(catalog.clinics), sum(len(c.profiles) for c in catalog.clinics),
    )
    return catalog
