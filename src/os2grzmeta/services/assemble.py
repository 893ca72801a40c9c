"""
Metadata assembly: operator selections and the optional site profile on top of the fetched draft.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from os2grzmeta.models.metadata import CallerUsedItem, LabDatum, Metadata, SequenceData
from os2grzmeta.models.profiles import Profile
from os2grzmeta.profiles.catalog import NO_PROFILE, ProfileCatalog

log = logging.getLogger(__name__)

# fields a profile overwrites; profile and target share the field name
SUBMISSION_FIELDS = ("genomic_study_type", "genomic_study_subtype", "lab_name")
LAB_DATUM_FIELDS = (
    "lab_data_name",
    "tissue_type_name",
    "sequence_type",
    "sequence_subtype",
    "fragmentation_method",
    "library_type",
    "library_prep_kit",
    "library_prep_kit_manufacturer",
    "sequencer_model",
    "sequencer_manufacturer",
    "kit_name",
    "kit_manufacturer",
    "enrichment_kit_manufacturer",
    "enrichment_kit_description",
    "sequencing_layout",
)
SEQUENCE_DATA_FIELDS = ("bioinformatics_pipeline_name", "bioinformatics_pipeline_version")


@dataclass(frozen=True)
class Selection:
    """Operator choices that cannot be derived from Onkostar."""

    case_id: str | None = None
    ik: str | None = None
    profile_name: str | None = None
    grz: str | None = None
    kdk: str | None = None


def apply_profile(metadata: Metadata, profile: Profile) -> None:
    """
    Overwrite the profile's field set in place. Profile values always win, unset ones included:
    a profile replaces those fields, it is not merged into them. Only the first lab datum is touched.
    """
    for name in SUBMISSION_FIELDS:
        setattr(metadata.submission, name, getattr(profile, name))

    donor = metadata.index_donor
    if donor is None or not donor.lab_data:
        log.warning("Profile '%s' has no lab datum to fill; only submission fields applied", profile.name)
        return

    lab_datum: LabDatum = donor.lab_data[0]
    for name in LAB_DATUM_FIELDS:
        setattr(lab_datum, name, getattr(profile, name))

    for entry in lab_datum.tumor_cell_count:
        entry.method = profile.tumor_cell_count_method

    if lab_datum.sequence_data is None:
        lab_datum.sequence_data = SequenceData()
    for name in SEQUENCE_DATA_FIELDS:
        setattr(lab_datum.sequence_data, name, getattr(profile, name))
    lab_datum.sequence_data.caller_used = [
        *lab_datum.sequence_data.caller_used,
        CallerUsedItem(name=profile.caller_used_name, version=profile.caller_used_version),
    ]

def assemble(draft: Metadata, selection: Selection, catalog: ProfileCatalog) -> Metadata:
    """Final document; the draft itself is left unchanged."""
    metadata = draft.model_copy(deep=True)

    metadata.submission.local_case_id = selection.case_id
    metadata.submission.genomic_data_center_id = selection.grz
    metadata.submission.clinical_data_node_id = selection.kdk

    if not selection.profile_name or selection.profile_name == NO_PROFILE:
        log.info("No profile selected")
        return metadata

    profile = catalog.find_profile(selection.ik, selection.profile_name)
    if profile is None:
        log.warning("Profile '%s' not found for IK %s; using fetched values", selection.profile_name, selection.ik)
        return metadata

    log.info("Applying profile '%s' of IK %s", profile.name, selection.ik)
    apply_profile(metadata, profile)
    return metadata
