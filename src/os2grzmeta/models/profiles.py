"""
Site profiles: default values for fields Onkostar does not hold, grouped by clinic (IK).
"""

from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from os2grzmeta.models.metadata import (
    EnrichmentKitManufacturer,
    FragmentationMethod,
    GenomicStudySubtype,
    GenomicStudyType,
    LibraryType,
    SequenceSubtype,
    SequencingLayout,
    TumorCellCountMethod,
)


class CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Profile(CatalogModel):
    name: str
    genomic_data_center_id: str | None = None
    clinical_data_node_id: str | None = None
    genomic_study_type: GenomicStudyType | None = None
    genomic_study_subtype: GenomicStudySubtype | None = None
    lab_name: str | None = None
    lab_data_name: str | None = None
    tissue_type_name: str | None = None
    sequence_type: str | None = None
    sequence_subtype: SequenceSubtype | None = None
    fragmentation_method: FragmentationMethod | None = None
    library_type: LibraryType | None = None
    library_prep_kit: str | None = None
    library_prep_kit_manufacturer: str | None = None
    sequencer_model: str | None = None
    sequencer_manufacturer: str | None = None
    kit_name: str | None = None
    kit_manufacturer: str | None = None
    enrichment_kit_manufacturer: EnrichmentKitManufacturer | None = None
    enrichment_kit_description: str | None = None
    sequencing_layout: SequencingLayout | None = None
    tumor_cell_count_method: TumorCellCountMethod | None = None
    bioinformatics_pipeline_name: str | None = None
    bioinformatics_pipeline_version: str | None = None
    caller_used_name: str | None = None
    caller_used_version: str | None = None


class Clinic(CatalogModel):
    ik: str
    name: str | None = None
    grz: tuple[str, ...] = ()
    kdk: tuple[str, ...] = ()
    profiles: tuple[Profile, ...] = Field(default_factory=tuple)
