from cedula_scan.confidence import ConfidenceScore
from cedula_scan.models.findings import FindingCode


def test_starts_at_base():
    score = ConfidenceScore()
    assert score.value == 100
    assert score.findings == ()
    assert int(ConfidenceScore(85)) == 85


def test_each_finding_deducts_ten():
    score = ConfidenceScore()
    score.penalize(
        FindingCode.COUNTRY_CODE_MISMATCH,
        "Unexpected issuing country",
        expected="COL",
        actual="VEN",
    )
    score.penalize(FindingCode.LOCATION_NOT_FOUND, "Location not found")

    assert score.value == 80
    assert [finding.code for finding in score.findings] == [
        FindingCode.COUNTRY_CODE_MISMATCH,
        FindingCode.LOCATION_NOT_FOUND,
    ]
    assert score.findings[0].expected_value == "COL"
    assert score.findings[0].actual_value == "VEN"


def test_require_only_penalizes_failures():
    score = ConfidenceScore()
    assert score.require(True, FindingCode.BIRTH_DATE_CHECKSUM, "ok") is True
    assert score.require(False, FindingCode.EXPIRY_DATE_CHECKSUM, "bad") is False
    assert score.value == 90
    assert len(score.findings) == 1


def test_value_is_floored_at_zero():
    score = ConfidenceScore()
    for _ in range(12):
        score.penalize(FindingCode.DOCUMENT_NUMBER_CHECKSUM, "bad")
    assert score.value == 0


def test_custom_penalty():
    score = ConfidenceScore()
    score.penalize(FindingCode.DOCUMENT_TYPE_MISMATCH, "bad", penalty=25)
    assert score.value == 75
    assert "DOCUMENT_TYPE_MISMATCH" in repr(score)
