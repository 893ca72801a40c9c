"""Shared fixtures: a minimal Onkostar schema in in-memory SQLite and a profile catalog."""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from os2grzmeta.profiles.catalog import parse_catalog


ONKOSTAR_DDL = [
    """CREATE TABLE patient (
        id INTEGER PRIMARY KEY, patienten_id TEXT, geschlecht TEXT, kostentraegertyp TEXT)""",
    """CREATE TABLE prozedur (
        id INTEGER PRIMARY KEY, patient_id INTEGER, hauptprozedur_id INTEGER)""",
    """CREATE TABLE organisationunit (id INTEGER PRIMARY KEY, identifier TEXT)""",
    """CREATE TABLE property_catalogue_version_entry (
        id INTEGER PRIMARY KEY, property_version_id INTEGER, code TEXT, shortdesc TEXT)""",
    """CREATE TABLE dk_molekulargenetik (
        id INTEGER PRIMARY KEY, einsendenummer TEXT, entnahmedatum TEXT,
        materialfixierung INTEGER, artdersequenzierung TEXT, tumorzellgehalt TEXT,
        referenzgenom TEXT, panel TEXT, durchfuehrendeoe_fachabteilung INTEGER,
        nukleinsaeure TEXT, nukleinsaeure_propcat_version INTEGER,
        probenmaterial TEXT, probenmaterial_propcat_version INTEGER)""",
    """CREATE TABLE dk_dnpm_kpa (id INTEGER PRIMARY KEY, fallnummermv TEXT, consentmv64e INTEGER)""",
    """CREATE TABLE dk_dnpm_therapieplan (id INTEGER PRIMARY KEY, ref_dnpm_klinikanamnese INTEGER)""",
    """CREATE TABLE dk_dnpm_consentmv (id INTEGER PRIMARY KEY)""",
    """CREATE TABLE dk_dnpm_uf_consentmvverlauf (
        id INTEGER PRIMARY KEY, date TEXT, version TEXT,
        sequencing TEXT, caseidentification TEXT, reidentification TEXT)""",
    """CREATE TABLE dk_dnpm_uf_rebiopsie (id INTEGER PRIMARY KEY, ref_molekulargenetik INTEGER)""",
    """CREATE TABLE dk_dnpm_uf_reevaluation (id INTEGER PRIMARY KEY, ref_molekulargenetik INTEGER)""",
    """CREATE TABLE dk_dnpm_uf_einzelempfehlung (id INTEGER PRIMARY KEY, ref_molekulargenetik INTEGER)""",
]

NUCLEIC_ACID_VERSION = 10
MATERIAL_VERSION = 20


class OnkostarDb:
    """Seeds Onkostar rows; ids are handed out sequentially across all procedure tables."""

    def __init__(self, engine):
        self.engine = engine
        self._next_id = 1000

    def _id(self):
        self._next_id += 1
        return self._next_id

    def _insert(self, table, **values):
        cols = ", ".join(values)
        binds = ", ".join(f":{c}" for c in values)
        with self.engine.begin() as c:
            c.execute(text(f"INSERT INTO {table} ({cols}) VALUES ({binds})"), values)

    def connect(self):
        return self.engine.connect()

    def add_patient(self, pseudonym="P-0001", sex="w", payer="GKV"):
        pid = self._id()
        self._insert("patient", id=pid, patienten_id=pseudonym, geschlecht=sex, kostentraegertyp=payer)
        return pid

    def add_sample(self, patient_id, sample_id="E2024-001", sample_date="2024-03-01", fixation=3,
                   technique="WGS", tumor_cell_count="45.5", reference_genome="HG38",
                   material="T", nucleic_acid="D", lab="Pathologie", panel=None):
        mid = self._id()
        self._insert("prozedur", id=mid, patient_id=patient_id, hauptprozedur_id=None)
        org_id = None
        if lab is not None:
            org_id = self._id()
            self._insert("organisationunit", id=org_id, identifier=lab)
        self._insert(
            "dk_molekulargenetik",
            id=mid,
            einsendenummer=sample_id,
            entnahmedatum=sample_date,
            materialfixierung=fixation,
            artdersequenzierung=technique,
            tumorzellgehalt=tumor_cell_count,
            referenzgenom=reference_genome,
            panel=panel,
            durchfuehrendeoe_fachabteilung=org_id,
            nukleinsaeure=nucleic_acid,
            nukleinsaeure_propcat_version=NUCLEIC_ACID_VERSION,
            probenmaterial=material,
            probenmaterial_propcat_version=MATERIAL_VERSION,
        )
        return mid

    def add_case(self, case_id, patient_id):
        """KPA with a consent anchor and a therapy plan; returns (kpa, consent, plan) ids."""
        consent_id = self._id()
        self._insert("prozedur", id=consent_id, patient_id=patient_id, hauptprozedur_id=None)
        self._insert("dk_dnpm_consentmv", id=consent_id)
        kpa_id = self._id()
        self._insert("prozedur", id=kpa_id, patient_id=patient_id, hauptprozedur_id=None)
        self._insert("dk_dnpm_kpa", id=kpa_id, fallnummermv=case_id, consentmv64e=consent_id)
        plan_id = self._id()
        self._insert("prozedur", id=plan_id, patient_id=patient_id, hauptprozedur_id=None)
        self._insert("dk_dnpm_therapieplan", id=plan_id, ref_dnpm_klinikanamnese=kpa_id)
        return kpa_id, consent_id, plan_id

    def link_sample(self, plan_id, molekulargenetik_id, subform="dk_dnpm_uf_rebiopsie"):
        sub_id = self._id()
        self._insert("prozedur", id=sub_id, patient_id=None, hauptprozedur_id=plan_id)
        self._insert(subform, id=sub_id, ref_molekulargenetik=molekulargenetik_id)
        return sub_id

    def add_consent_entry(self, consent_id, date, version="v1", sequencing="permit",
                          caseidentification="permit", reidentification="deny"):
        entry_id = self._id()
        self._insert("prozedur", id=entry_id, patient_id=None, hauptprozedur_id=consent_id)
        self._insert(
            "dk_dnpm_uf_consentmvverlauf",
            id=entry_id,
            date=date,
            version=version,
            sequencing=sequencing,
            caseidentification=caseidentification,
            reidentification=reidentification,
        )
        return entry_id


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    with eng.begin() as c:
        for ddl in ONKOSTAR_DDL:
            c.execute(text(ddl))
        c.execute(
            text("INSERT INTO property_catalogue_version_entry (property_version_id, code, shortdesc) VALUES (:v, :c, :d)"),
            [
                {"v": NUCLEIC_ACID_VERSION, "c": "D", "d": "DNA"},
                {"v": NUCLEIC_ACID_VERSION, "c": "R", "d": "RNA"},
                {"v": MATERIAL_VERSION, "c": "T", "d": "Tumorgewebe"},
                {"v": MATERIAL_VERSION, "c": "B", "d": "Blut"},
            ],
        )
    yield eng
    eng.dispose()


@pytest.fixture
def onkostar(engine):
    return OnkostarDb(engine)


@pytest.fixture
def catalog_data():
    return [
        {
            "ik": "IK123",
            "name": "Universitätsklinikum",
            "grz": ["GRZABC001", "GRZABC002"],
            "kdk": ["KDKABC001"],
            "profiles": [
                {
                    "name": "UKW-Standard-WGS",
                    "genomicDataCenterId": "GRZABC002",
                    "clinicalDataNodeId": "KDKABC001",
                    "genomicStudyType": "single",
                    "genomicStudySubtype": "tumor+germline",
                    "labName": "Pathologie UKW",
                    "labDataName": "Tumor DNA",
                    "tissueTypeName": "Tumor",
                    "sequenceType": "dna",
                    "sequenceSubtype": "somatic",
                    "fragmentationMethod": "enzymatic",
                    "libraryType": "wgs",
                    "libraryPrepKit": "Illumina DNA PCR-Free Prep",
                    "libraryPrepKitManufacturer": "Illumina",
                    "sequencerModel": "NovaSeq X Plus",
                    "sequencerManufacturer": "Illumina",
                    "kitName": "NovaSeq X Series 25B",
                    "kitManufacturer": "Illumina",
                    "enrichmentKitManufacturer": "none",
                    "enrichmentKitDescription": "none",
                    "sequencingLayout": "paired-end",
                    "tumorCellCountMethod": "bioinformatics",
                    "bioinformaticsPipelineName": "nf-core/sarek",
                    "bioinformaticsPipelineVersion": "3.5.1",
                    "callerUsedName": "Strelka",
                    "callerUsedVersion": "2.9.10",
                },
                {"name": "Minimal"},
            ],
        },
        {"ik": "IK999", "name": "Andere Klinik", "grz": [], "kdk": [], "profiles": []},
    ]


@pytest.fixture
def catalog(catalog_data):
    return parse_catalog(catalog_data)
