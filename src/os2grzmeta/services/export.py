"""
Export service - runs one sample through case lookup, consent, fetch and assembly
"""

from __future__ import annotations
import logging
from typing import Protocol
from sqlalchemy.engine import Connection
from os2grzmeta.core.config import Settings
from os2grzmeta.core.errors import SelectionError
from os2grzmeta.extract.extract_cases import list_candidate_cases, resolve_case_id
from os2grzmeta.models.metadata import Metadata
from os2grzmeta.models.profiles import Clinic, Profile
from os2grzmeta.profiles.catalog import NO_PROFILE, ProfileCatalog
from os2grzmeta.services.assemble import Selection, assemble
from os2grzmeta.transforms.transform_consent import resolve_consent
from os2grzmeta.transforms.transform_samples import fetch_metadata

log = logging.getLogger(__name__)


class Prompter(Protocol):
    def choose(self, title: str, options: list[str], default: str | None = None) -> str: ...

    def ask(self, title: str, default: str | None = None) -> str | None: ...


def _choose_case(settings: Settings, candidates: list[str], prompter: Prompter | None) -> str | None:
    if settings.case_id:
        if candidates and settings.case_id not in candidates:
            log.warning("Case %s is not among the cases linked to sample %s", settings.case_id, settings.sample_id)
        return settings.case_id
    choose = (lambda options: prompter.choose("Fallnummer", options)) if prompter else None
    return resolve_case_id(candidates, choose)

def _choose_clinic(settings: Settings, catalog: ProfileCatalog, prompter: Prompter | None) -> Clinic | None:
    ik = settings.ik
    if ik is None and prompter and catalog.clinics:
        ik = prompter.choose("Klinik (IK)", [c.ik for c in catalog.clinics])
    if ik is None:
        return None
    clinic = catalog.find_clinic(ik)
    if clinic is None:
        log.warning("IK %s not found in profile catalog", ik)
        return Clinic(ik=ik)
    return clinic

def _choose_profile(settings: Settings, clinic: Clinic | None, catalog: ProfileCatalog,
                    prompter: Prompter | None) -> str:
    if settings.profile:
        return settings.profile
    names = catalog.profile_names(clinic.ik) if clinic else []
    if prompter and names:
        return prompter.choose("Profil", [NO_PROFILE, *names], default=NO_PROFILE)
    return NO_PROFILE

def _choose_id(title: str, given: str | None, options: tuple[str, ...], default: str | None,
               prompter: Prompter | None) -> str | None:
    """GRZ/KDK id: explicit value, else operator choice, else the profile default."""
    if given:
        return given
    if prompter is None:
        return default
    if options:
        return prompter.choose(title, list(options), default=default if default in options else options[0])
    return prompter.ask(title, default=default)

def select(settings: Settings, candidates: list[str], catalog: ProfileCatalog,
           prompter: Prompter | None) -> Selection:
    case_id = _choose_case(settings, candidates, prompter)
    clinic = _choose_clinic(settings, catalog, prompter)
    profile_name = _choose_profile(settings, clinic, catalog, prompter)

    profile: Profile | None = catalog.find_profile(clinic.ik if clinic else None, profile_name)
    grz = _choose_id("GRZ", settings.grz, clinic.grz if clinic else (),
                     profile.genomic_data_center_id if profile else None, prompter)
    kdk = _choose_id("KDK", settings.kdk, clinic.kdk if clinic else (),
                     profile.clinical_data_node_id if profile else None, prompter)

    return Selection(
        case_id=case_id,
        ik=clinic.ik if clinic else None,
        profile_name=profile_name,
        grz=grz,
        kdk=kdk,
    )

def run_export(conn: Connection, settings: Settings, catalog: ProfileCatalog,
               prompter: Prompter | None = None) -> Metadata:
    """
    Execute one export. Without a prompter the run is non-interactive: unless a case id
    is given, case lookup failures and ambiguous cases are fatal.
    """
    if not settings.sample_id:
        raise SelectionError("Missing sample id (--sample-id)")

    try:
        log.info("Looking up cases for sample %s", settings.sample_id)
        strict = prompter is None and not settings.case_id
        candidates = list_candidate_cases(conn, settings.sample_id, strict=strict)
        selection = select(settings, candidates, catalog, prompter)
        log.info("Selection: %s", selection)

        consent = resolve_consent(conn, selection.case_id)
        draft = fetch_metadata(conn, settings.sample_id)
        if consent is not None:
            draft.donors[0].mv_consent = consent

        return assemble(draft, selection, catalog)

    except Exception as e:
        log.error("Export of sample %s failed: %s", settings.sample_id, e)
        raise
