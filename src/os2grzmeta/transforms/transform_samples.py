"""
Transform sample rows into a metadata draft.

The first row provides the submission and index donor shell, every row adds
one lab datum. No rows still give a complete (empty) shell.
"""

from __future__ import annotations
import logging
import pandas as pd
from sqlalchemy.engine import Connection
from os2grzmeta.extract.extract_samples import read_sample_rows
from os2grzmeta.models.metadata import (
    Donor,
    LabDatum,
    Metadata,
    SequenceData,
    Submission,
    TumorCellCount,
    TumorCellCountMethod,
)
from os2grzmeta.transforms.codes import (
    clean_text,
    lab_data_name,
    map_coverage_type,
    map_gender,
    map_library_type,
    map_reference_genome,
    map_sample_conservation,
    map_sequence_type,
    parse_tumor_cell_count,
    standardize_date,
)

log = logging.getLogger(__name__)

BARCODE_PLACEHOLDER = "NA"

def _records(df: pd.DataFrame) -> list[dict]:
    """DataFrame rows as dicts with NaN/NaT replaced by None."""
    out = []
    for rec in df.to_dict("records"):
        out.append({k: (None if not isinstance(v, str) and pd.isna(v) else v) for k, v in rec.items()})
    return out

def build_shell(rec: dict | None = None) -> Metadata:
    """Submission + index donor from the first row, or an empty shell."""
    if rec is None:
        return Metadata(submission=Submission(), donors=[Donor()])
    return Metadata(
        submission=Submission(
            coverage_type=map_coverage_type(rec.get("payer_type")),
            lab_name=clean_text(rec.get("lab_name")),
        ),
        donors=[
            Donor(
                donor_pseudonym=clean_text(rec.get("pseudonym")),
                gender=map_gender(rec.get("sex")),
            )
        ],
    )

def build_lab_datum(rec: dict) -> LabDatum:
    return LabDatum(
        barcode=BARCODE_PLACEHOLDER,
        lab_data_name=lab_data_name(rec.get("material_desc"), rec.get("nucleic_acid_desc")),
        sample_date=standardize_date(rec.get("sample_date")),
        sample_conservation=map_sample_conservation(rec.get("fixation")),
        sequence_type=map_sequence_type(rec.get("nucleic_acid_desc")),
        library_type=map_library_type(rec.get("sequencing_technique")),
        tumor_cell_count=[
            TumorCellCount(
                count=parse_tumor_cell_count(rec.get("tumor_cell_count")),
                method=TumorCellCountMethod.pathology,
            )
        ],
        sequence_data=SequenceData(
            reference_genome=map_reference_genome(rec.get("reference_genome")),
        ),
    )

def fold_rows(records: list[dict]) -> Metadata:
    shell = None
    lab_data = []
    for rec in records:
        if shell is None:
            shell = build_shell(rec)
        lab_data.append(build_lab_datum(rec))

    if shell is None:
        shell = build_shell()
    shell.donors[0].lab_data = lab_data
    return shell

def fetch_metadata(conn: Connection, sample_id: str) -> Metadata:
    """Draft metadata for one sample; query failures raise FetchError."""
    df = read_sample_rows(conn, sample_id)
    if df.empty:
        log.warning("No Molekulargenetik procedure found for sample %s; template will be empty", sample_id)

    draft = fold_rows(_records(df))
    log.info("Mapped sample %s: %d lab data entries", sample_id, len(draft.donors[0].lab_data))
    return draft
