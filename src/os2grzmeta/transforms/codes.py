"""
Onkostar code -> GRZ value translation.

Every mapping is total: unknown or missing codes fall back to a fixed value
(UNK / other) and never raise. The reference genome is the exception and
yields None for codes it does not know.
"""

from __future__ import annotations
from datetime import date, datetime
import pandas as pd
from os2grzmeta.models.metadata import (
    CoverageType,
    Gender,
    LibraryType,
    ReferenceGenome,
    SampleConservation,
)

# constants
COVERAGE_TYPES = {"GKV": CoverageType.GKV, "PKV": CoverageType.PKV}
GENDERS = {"m": Gender.male, "w": Gender.female, "u": Gender.unknown}
FIXATIONS = {"2": SampleConservation.cryo_frozen, "3": SampleConservation.ffpe, "9": SampleConservation.unknown}
SEQUENCING_TECHNIQUES = {
    "WES": LibraryType.wes,
    "WGS": LibraryType.wgs,
    "PanelKit": LibraryType.panel,
    "X": LibraryType.unknown,
}
REFERENCE_GENOMES = {"HG19": ReferenceGenome.GRCh37, "HG38": ReferenceGenome.GRCh38}

DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%d.%m.%Y")

# helpers
def clean_text(x) -> str | None:
    """None for NULL/NaN, otherwise the value as string."""
    if x is None:
        return None
    if not isinstance(x, str) and pd.isna(x):
        return None
    return str(x)

def _code(x) -> str | None:
    """
    Code in comparison form, matching Onkostar's *_ci collation: trimmed and case-folded.
    Integral numbers lose their float noise (3.0 -> '3').
    """
    if isinstance(x, float) and not pd.isna(x) and x.is_integer():
        return str(int(x))
    s = clean_text(x)
    return s.strip().casefold() if s is not None else None

def _lookup(table: dict, code, default=None):
    key = _code(code)
    for stored, value in table.items():
        if stored.casefold() == key:
            return value
    return default

# mappings
def map_coverage_type(code) -> CoverageType:
    return _lookup(COVERAGE_TYPES, code, CoverageType.UNK)

def map_gender(code) -> Gender:
    return _lookup(GENDERS, code, Gender.other)

def map_sample_conservation(code) -> SampleConservation:
    return _lookup(FIXATIONS, code, SampleConservation.other)

def map_library_type(code) -> LibraryType:
    return _lookup(SEQUENCING_TECHNIQUES, code, LibraryType.other)

def map_reference_genome(code) -> ReferenceGenome | None:
    return _lookup(REFERENCE_GENOMES, code)

def map_sequence_type(description) -> str | None:
    s = clean_text(description)
    return s.lower() if s is not None else None

def lab_data_name(material, nucleic_acid) -> str | None:
    """'<material> <nucleic acid>'; unset if either description is missing."""
    m, n = clean_text(material), clean_text(nucleic_acid)
    if m is None or n is None:
        return None
    return f"{m} {n}"

def parse_tumor_cell_count(x) -> float:
    """Best effort: NULL or non-numeric values count as 0."""
    if x is None:
        return 0.0
    v = pd.to_numeric(x, errors="coerce")
    if pd.isna(v):
        return 0.0
    return float(v)

def standardize_date(x) -> str | None:
    if x is None:
        return None
    if isinstance(x, (datetime, pd.Timestamp)):
        return x.strftime("%Y-%m-%d") if not pd.isna(x) else None
    if isinstance(x, date):
        return x.isoformat()
    s = clean_text(x)
    if s is None:
        return None
    s = s.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    # keep what Onkostar has rather than dropping it
    return s or None
