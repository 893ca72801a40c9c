"""
Transform the latest consent history row into the MV consent block.
"""

from __future__ import annotations
import logging
from sqlalchemy.engine import Connection
from os2grzmeta.extract.extract_consent import read_latest_consent
from os2grzmeta.models.metadata import MvConsent, MvConsentScope, MvConsentScopeDomain
from os2grzmeta.transforms.codes import clean_text, standardize_date

log = logging.getLogger(__name__)

# consent column -> scope domain, in output order
SCOPE_COLUMNS = [
    ("sequencing", MvConsentScopeDomain.mv_sequencing),
    ("reidentification", MvConsentScopeDomain.re_identification),
    ("caseidentification", MvConsentScopeDomain.case_identification),
]

def build_consent(row: dict) -> MvConsent:
    consent_date = standardize_date(row.get("date"))
    return MvConsent(
        presentation_date=consent_date,
        version=clean_text(row.get("version")),
        scope=[
            MvConsentScope(type_=clean_text(row.get(column)), date=consent_date, domain=domain)
            for column, domain in SCOPE_COLUMNS
        ],
    )

def resolve_consent(conn: Connection, case_id: str | None) -> MvConsent | None:
    """Latest MV consent of the case; None if there is no case or no consent."""
    if not case_id:
        log.info("No case id, skipping MV consent lookup")
        return None
    row = read_latest_consent(conn, case_id)
    return build_consent(row) if row is not None else None
