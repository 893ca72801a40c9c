"""
GRZ submission metadata template (Modellvorhaben Genomsequenzierung).

Field names and nesting follow the GRZ metadata schema; keys are serialized in camelCase.
Unlike a validated submission, a template may leave fields unset (None -> null) for the
operator to fill in later.
"""

from __future__ import annotations
from enum import Enum
from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TemplateModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SubmissionType(str, Enum):
    initial = "initial"
    followup = "followup"
    addition = "addition"
    correction = "correction"


class CoverageType(str, Enum):
    """Health insurance provider"""

    GKV = "GKV"
    PKV = "PKV"
    BG = "BG"
    SEL = "SEL"
    SOZ = "SOZ"
    GPV = "GPV"
    PPV = "PPV"
    BEI = "BEI"
    SKT = "SKT"
    UNK = "UNK"


class DiseaseType(str, Enum):
    oncological = "oncological"
    rare = "rare"
    hereditary = "hereditary"


class GenomicStudyType(str, Enum):
    """whether additional persons are tested as well"""

    single = "single"
    duo = "duo"
    trio = "trio"


class GenomicStudySubtype(str, Enum):
    """whether tumor and/or germ-line are tested"""

    tumor_only = "tumor-only"
    tumor_germline = "tumor+germline"
    germline_only = "germline-only"


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"
    unknown = "unknown"


class Relation(str, Enum):
    mother = "mother"
    father = "father"
    brother = "brother"
    sister = "sister"
    child = "child"
    index_ = "index"
    other = "other"


class MvConsentScopeDomain(str, Enum):
    mv_sequencing = "mvSequencing"
    re_identification = "reIdentification"
    case_identification = "caseIdentification"


class SampleConservation(str, Enum):
    fresh_tissue = "fresh-tissue"
    cryo_frozen = "cryo-frozen"
    ffpe = "ffpe"
    other = "other"
    unknown = "unknown"


class SequenceSubtype(str, Enum):
    germline = "germline"
    somatic = "somatic"
    other = "other"
    unknown = "unknown"


class FragmentationMethod(str, Enum):
    sonication = "sonication"
    enzymatic = "enzymatic"
    none = "none"
    other = "other"
    unknown = "unknown"


class LibraryType(str, Enum):
    panel = "panel"
    panel_lr = "panel_lr"
    wes = "wes"
    wes_lr = "wes_lr"
    wgs = "wgs"
    wgs_lr = "wgs_lr"
    wxs = "wxs"
    wxs_lr = "wxs_lr"
    other = "other"
    unknown = "unknown"


class EnrichmentKitManufacturer(str, Enum):
    illumina = "Illumina"
    agilent = "Agilent"
    twist = "Twist"
    neb = "NEB"
    other = "other"
    unknown = "unknown"
    none = "none"


class SequencingLayout(str, Enum):
    single_end = "single-end"
    paired_end = "paired-end"
    reverse = "reverse"
    other = "other"


class TumorCellCountMethod(str, Enum):
    pathology = "pathology"
    bioinformatics = "bioinformatics"
    other = "other"
    unknown = "unknown"


class ReferenceGenome(str, Enum):
    GRCh37 = "GRCh37"
    GRCh38 = "GRCh38"


class Submission(TemplateModel):
    submission_date: str | None = None
    submission_type: SubmissionType = SubmissionType.initial
    tan_g: str | None = None
    local_case_id: str | None = None
    coverage_type: CoverageType | None = None
    submitter_id: str | None = None
    genomic_data_center_id: str | None = None
    clinical_data_node_id: str | None = None
    disease_type: DiseaseType = DiseaseType.oncological
    genomic_study_type: GenomicStudyType | None = None
    genomic_study_subtype: GenomicStudySubtype | None = None
    lab_name: str | None = None


class MvConsentScope(TemplateModel):
    # permit / deny as recorded in Onkostar
    type_: Annotated[str | None, Field(alias="type")] = None
    date: str | None = None
    domain: MvConsentScopeDomain


class MvConsent(TemplateModel):
    presentation_date: str | None = None
    version: str | None = None
    scope: list[MvConsentScope] = Field(default_factory=list)


class TissueOntology(TemplateModel):
    name: str | None = None
    version: str | None = None


class TumorCellCount(TemplateModel):
    """Tumor cell count in % and how it was determined."""

    count: float = 0.0
    method: TumorCellCountMethod | None = TumorCellCountMethod.pathology


class CallerUsedItem(TemplateModel):
    name: str | None = None
    version: str | None = None


class PercentBasesAboveQualityThreshold(TemplateModel):
    minimum_quality: float | None = None
    percent: float | None = None


class SequenceData(TemplateModel):
    bioinformatics_pipeline_name: str | None = None
    bioinformatics_pipeline_version: str | None = None
    reference_genome: ReferenceGenome | None = None
    percent_bases_above_quality_threshold: PercentBasesAboveQualityThreshold | None = None
    mean_depth_of_coverage: float | None = None
    min_coverage: float | None = None
    targeted_regions_above_min_coverage: float | None = None
    non_coding_variants: bool | None = None
    caller_used: list[CallerUsedItem] = Field(default_factory=list)
    # file entries are added after sequencing, never from Onkostar
    files: list[dict] = Field(default_factory=list)


class LabDatum(TemplateModel):
    lab_data_name: str | None = None
    tissue_ontology: TissueOntology | None = None
    tissue_type_id: str | None = None
    tissue_type_name: str | None = None
    sample_date: str | None = None
    sample_conservation: SampleConservation | None = None
    # lower-cased nucleic acid description from Onkostar, usually dna or rna
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
    barcode: str = "NA"
    sequencing_layout: SequencingLayout | None = None
    tumor_cell_count: list[TumorCellCount] = Field(default_factory=list)
    sequence_data: SequenceData | None = None


class Donor(TemplateModel):
    donor_pseudonym: str | None = None
    gender: Gender | None = None
    # Onkostar only holds index patient data
    relation: Relation = Relation.index_
    mv_consent: MvConsent | None = None
    research_consents: list[dict] = Field(default_factory=list)
    lab_data: list[LabDatum] = Field(default_factory=list)


class Metadata(TemplateModel):
    """Top-level GRZ metadata document: one submission, one index donor."""

    submission: Submission = Field(default_factory=Submission)
    donors: list[Donor] = Field(default_factory=list)

    @property
    def index_donor(self) -> Donor | None:
        return self.donors[0] if self.donors else None
