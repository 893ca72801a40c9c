"""
Extract molecular pathology procedures (Molekulargenetik) for one sample id, raw DataFrame.
"""

from __future__ import annotations
import logging
import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from os2grzmeta.core.errors import FetchError

log = logging.getLogger(__name__)

# one row per sequencing procedure of the sample
SAMPLE_QUERY = text("""
    SELECT
        organisationunit.identifier AS lab_name,
        patient.kostentraegertyp AS payer_type,
        patient.patienten_id AS pseudonym,
        patient.geschlecht AS sex,
        prop_probenmaterial.shortdesc AS material_desc,
        prop_nukleinsaeure.shortdesc AS nucleic_acid_desc,
        dk_molekulargenetik.entnahmedatum AS sample_date,
        dk_molekulargenetik.materialfixierung AS fixation,
        dk_molekulargenetik.artdersequenzierung AS sequencing_technique,
        dk_molekulargenetik.tumorzellgehalt AS tumor_cell_count,
        dk_molekulargenetik.referenzgenom AS reference_genome,
        dk_molekulargenetik.panel AS panel
    FROM dk_molekulargenetik
    JOIN prozedur ON (prozedur.id = dk_molekulargenetik.id)
    JOIN patient ON (patient.id = prozedur.patient_id)
    LEFT JOIN organisationunit ON (organisationunit.id = dk_molekulargenetik.durchfuehrendeoe_fachabteilung)
    LEFT JOIN property_catalogue_version_entry AS prop_nukleinsaeure ON (
        prop_nukleinsaeure.property_version_id = dk_molekulargenetik.nukleinsaeure_propcat_version
        AND prop_nukleinsaeure.code = dk_molekulargenetik.nukleinsaeure)
    LEFT JOIN property_catalogue_version_entry AS prop_probenmaterial ON (
        prop_probenmaterial.property_version_id = dk_molekulargenetik.probenmaterial_propcat_version
        AND prop_probenmaterial.code = dk_molekulargenetik.probenmaterial)
    WHERE dk_molekulargenetik.einsendenummer = :sample_id
    ORDER BY dk_molekulargenetik.id
""")

HEADERS = [
    "lab_name", "payer_type", "pseudonym", "sex",
    "material_desc", "nucleic_acid_desc", "sample_date", "fixation",
    "sequencing_technique", "tumor_cell_count", "reference_genome", "panel",
]

def read_sample_rows(conn: Connection, sample_id: str) -> pd.DataFrame:
    """Run the sample query; exact match on the Einsendenummer, no wildcards."""
    try:
        df = pd.read_sql(SAMPLE_QUERY, conn, params={"sample_id": sample_id})
    except (SQLAlchemyError, pd.errors.DatabaseError) as e:
        # pandas >= 2.2 re-raises driver errors from read_sql as its own DatabaseError
        log.error("Sample query failed for %s: %s", sample_id, e, exc_info=True)
        raise FetchError(f"Cannot fetch sample {sample_id}: {e}") from e

    missing = [c for c in HEADERS if c not in df.columns]
    if missing:
        raise FetchError(f"Sample query returned unexpected columns, missing: {missing}")

    log.info("Extracted sample %s (%d rows)", sample_id, len(df))
    return df[HEADERS]
