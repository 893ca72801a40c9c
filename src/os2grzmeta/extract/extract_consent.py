"""
Extract the latest MV consent history entry (ConsentMV Verlauf) of a case.
"""

from __future__ import annotations
import logging
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from os2grzmeta.core.errors import FetchError

log = logging.getLogger(__name__)

CONSENT_QUERY = text("""
    SELECT
        dk_dnpm_uf_consentmvverlauf.date AS date,
        dk_dnpm_uf_consentmvverlauf.version AS version,
        dk_dnpm_uf_consentmvverlauf.sequencing AS sequencing,
        dk_dnpm_uf_consentmvverlauf.caseidentification AS caseidentification,
        dk_dnpm_uf_consentmvverlauf.reidentification AS reidentification
    FROM dk_dnpm_uf_consentmvverlauf
    JOIN prozedur ON (prozedur.id = dk_dnpm_uf_consentmvverlauf.id)
    WHERE prozedur.hauptprozedur_id IN (
        SELECT dk_dnpm_consentmv.id
        FROM dk_dnpm_kpa
        JOIN dk_dnpm_consentmv ON (dk_dnpm_consentmv.id = dk_dnpm_kpa.consentmv64e)
        WHERE dk_dnpm_kpa.fallnummermv = :case_id
    )
    ORDER BY dk_dnpm_uf_consentmvverlauf.date DESC
    LIMIT 1
""")

def read_latest_consent(conn: Connection, case_id: str) -> dict | None:
    """Latest consent row as a plain dict, or None if the case has none."""
    try:
        row = conn.execute(CONSENT_QUERY, {"case_id": case_id}).mappings().first()
    except SQLAlchemyError as e:
        log.error("Consent query failed for case %s: %s", case_id, e, exc_info=True)
        raise FetchError(f"Cannot fetch consent for case {case_id}: {e}") from e

    if row is None:
        log.info("No MV consent found for case %s", case_id)
        return None
    return dict(row)
