"""
Extract candidate case ids (Fallnummer MV) for a sample id.

A sample is traced through the therapy plan subforms that reference its
Molekulargenetik procedure (re-biopsy, re-evaluation, single recommendation)
to the therapy plan, and from there to the KPA holding the case id.
"""

from __future__ import annotations
import logging
from collections.abc import Callable
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from os2grzmeta.core.errors import FetchError, SelectionError

log = logging.getLogger(__name__)

CASES_QUERY = text("""
    SELECT DISTINCT dk_dnpm_kpa.fallnummermv AS case_id
    FROM dk_dnpm_kpa
    JOIN dk_dnpm_therapieplan ON (dk_dnpm_therapieplan.ref_dnpm_klinikanamnese = dk_dnpm_kpa.id)
    WHERE dk_dnpm_therapieplan.id IN (
        SELECT prozedur.hauptprozedur_id FROM dk_molekulargenetik
        JOIN dk_dnpm_uf_rebiopsie ON (dk_dnpm_uf_rebiopsie.ref_molekulargenetik = dk_molekulargenetik.id)
        JOIN prozedur ON (prozedur.id = dk_dnpm_uf_rebiopsie.id)
        WHERE dk_molekulargenetik.einsendenummer = :sample_id
        UNION
        SELECT prozedur.hauptprozedur_id FROM dk_molekulargenetik
        JOIN dk_dnpm_uf_reevaluation ON (dk_dnpm_uf_reevaluation.ref_molekulargenetik = dk_molekulargenetik.id)
        JOIN prozedur ON (prozedur.id = dk_dnpm_uf_reevaluation.id)
        WHERE dk_molekulargenetik.einsendenummer = :sample_id
        UNION
        SELECT prozedur.hauptprozedur_id FROM dk_molekulargenetik
        JOIN dk_dnpm_uf_einzelempfehlung ON (dk_dnpm_uf_einzelempfehlung.ref_molekulargenetik = dk_molekulargenetik.id)
        JOIN prozedur ON (prozedur.id = dk_dnpm_uf_einzelempfehlung.id)
        WHERE dk_molekulargenetik.einsendenummer = :sample_id
    )
""")

def read_candidate_cases(conn: Connection, sample_id: str) -> list[str]:
    """Distinct, sorted case ids linked to the sample; empty list if none."""
    try:
        ids = conn.execute(CASES_QUERY, {"sample_id": sample_id}).scalars().all()
    except SQLAlchemyError as e:
        log.error("Case lookup failed for sample %s: %s", sample_id, e, exc_info=True)
        raise FetchError(f"Cannot look up cases for sample {sample_id}: {e}") from e

    cases = sorted({str(i).strip() for i in ids if i is not None and str(i).strip()})
    log.info("Found %d candidate case(s) for sample %s", len(cases), sample_id)
    return cases

def list_candidate_cases(conn: Connection, sample_id: str, strict: bool = False) -> list[str]:
    """
    Interactive runs degrade a failed lookup to "no candidates";
    strict (non-interactive) runs need an unambiguous case and let the error through.
    """
    try:
        return read_candidate_cases(conn, sample_id)
    except FetchError:
        if strict:
            raise
        conn.rollback()
        log.warning("Continuing without case candidates for sample %s", sample_id)
        return []

def resolve_case_id(candidates: list[str], choose: Callable[[list[str]], str] | None = None) -> str | None:
    """0 candidates -> None, 1 -> that id, more -> ask `choose`."""
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    if choose is None:
        raise SelectionError(
            f"Sample maps to {len(candidates)} cases ({', '.join(candidates)}); choose one with --case-id"
        )
    return choose(candidates)
