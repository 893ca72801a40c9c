"""
Tests for the MV consent lookup
"""
from os2grzmeta.transforms.transform_consent import build_consent, resolve_consent


def test_latest_consent_entry_wins(onkostar):
    pid = onkostar.add_patient()
    _, consent_id, _ = onkostar.add_case("F-100", pid)
    onkostar.add_consent_entry(consent_id, "2024-01-10", version="v1", sequencing="deny")
    onkostar.add_consent_entry(consent_id, "2024-05-02", version="v2", sequencing="permit")
    onkostar.add_consent_entry(consent_id, "2023-12-24", version="v0", sequencing="deny")

    with onkostar.connect() as conn:
        consent = resolve_consent(conn, "F-100")

    assert consent is not None
    assert consent.version == "v2"
    assert consent.presentation_date == "2024-05-02"
    assert [s.domain for s in consent.scope] == ["mvSequencing", "reIdentification", "caseIdentification"]
    assert all(s.date == "2024-05-02" for s in consent.scope)
    assert consent.scope[0].type_ == "permit"


def test_consent_of_other_case_is_ignored(onkostar):
    pid = onkostar.add_patient()
    _, consent_a, _ = onkostar.add_case("F-A", pid)
    _, consent_b, _ = onkostar.add_case("F-B", pid)
    onkostar.add_consent_entry(consent_a, "2024-01-01", version="a")
    onkostar.add_consent_entry(consent_b, "2025-01-01", version="b")

    with onkostar.connect() as conn:
        assert resolve_consent(conn, "F-A").version == "a"


def test_no_consent_is_absent_not_an_error(onkostar):
    pid = onkostar.add_patient()
    onkostar.add_case("F-200", pid)

    with onkostar.connect() as conn:
        assert resolve_consent(conn, "F-200") is None
        assert resolve_consent(conn, "UNKNOWN") is None


def test_no_case_id_skips_lookup():
    """Without a case there is nothing to look up; no connection is touched"""
    assert resolve_consent(None, None) is None
    assert resolve_consent(None, "") is None


def test_build_consent_scope_types():
    consent = build_consent({
        "date": "2024-02-03",
        "version": "Patienteninformation MV GenomSeq v1",
        "sequencing": "permit",
        "caseidentification": "deny",
        "reidentification": None,
    })
    types = {s.domain: s.type_ for s in consent.scope}
    assert types == {"mvSequencing": "permit", "reIdentification": None, "caseIdentification": "deny"}

    dumped = consent.model_dump(by_alias=True)
    assert dumped["presentationDate"] == "2024-02-03"
    assert dumped["scope"][0]["type"] == "permit"
