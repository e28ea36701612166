"""Finding, PageResult and ScanSummary models."""

import pytest
from pydantic import ValidationError

from pagescan.core.scoring import ComplianceTier
from pagescan.models.schemas import Finding, PageResult, ScanRequest, ScanSummary, ScanTarget
from pagescan.models.taxonomy import Category, Severity


def _finding(rule_id: str = "1.1.1", **kwargs) -> Finding:
    fields = dict(
        rule_id=rule_id,
        category=Category.IMAGES,
        issue_type="missing-alt",
        message="Missing alt attribute",
        remedy="Add alt text.",
    )
    fields.update(kwargs)
    return Finding(**fields)


def test_severity_is_derived_from_rule_id() -> None:
    assert _finding("1.1.1").severity is Severity.SERIOUS
    assert _finding("1.4.8").severity is Severity.MINOR
    assert _finding("unknown-rule").severity is Severity.MODERATE


def test_severity_cannot_be_supplied_by_caller() -> None:
    finding = _finding("1.1.1", severity="minor")
    assert finding.severity is Severity.SERIOUS


def test_finding_is_immutable() -> None:
    finding = _finding()
    with pytest.raises(ValidationError):
        finding.rule_id = "1.4.3"


def test_finding_dump_includes_severity() -> None:
    data = _finding().model_dump(mode="json")
    assert data["severity"] == "serious"
    assert data["category"] == "images"
    assert data["location_hint"] == "Document"


def test_page_result_counts_match_findings() -> None:
    findings = [_finding("1.1.1"), _finding("1.1.1"), _finding("1.4.8"), _finding("SCAN_ERROR")]
    result = PageResult(page_id="home", findings=findings)

    assert result.severity_counts == {
        Severity.CRITICAL: 1,
        Severity.SERIOUS: 2,
        Severity.MODERATE: 0,
        Severity.MINOR: 1,
    }
    assert sum(result.severity_counts.values()) == len(findings)
    assert result.score == 100 - 25 - 30 - 3


def test_empty_summary_is_non_compliant() -> None:
    summary = ScanSummary()

    assert summary.overall_score == 0.0
    assert summary.compliance_tier is ComplianceTier.NON_COMPLIANT
    assert summary.summary.total_violations == 0
    assert summary.summary.compliance_tier is ComplianceTier.NON_COMPLIANT


def test_summary_totals_sum_pages() -> None:
    pages = {
        "a": PageResult(page_id="a", findings=[_finding("1.1.1")]),
        "b": PageResult(page_id="b", findings=[_finding("1.4.8"), _finding("2.4.6")]),
    }
    summary = ScanSummary(pages=pages)
    totals = summary.summary

    assert (totals.critical, totals.serious, totals.moderate, totals.minor) == (0, 1, 1, 1)
    assert totals.total_violations == 3
    assert totals.compliance_score == round((85 + 89) / 2, 2)
    assert totals.compliance_tier is ComplianceTier.MOSTLY_COMPLIANT


def test_scan_target_page_id() -> None:
    assert ScanTarget(location=" https://example.test/ ").page_id == "https://example.test/"
    assert ScanTarget(name="home", location="index.html").page_id == "home"


@pytest.mark.parametrize(
    "payload",
    [
        {"targets": []},
        {"targets": [{"location": "   "}]},
        {"targets": [{"location": "a.html"}, {"location": "a.html"}]},
        {"targets": [{"location": "a.html"}], "mode": "telepathy"},
    ],
)
def test_scan_request_rejects_bad_payloads(payload: dict) -> None:
    with pytest.raises(ValidationError):
        ScanRequest.model_validate(payload)


def test_scan_request_accepts_named_targets() -> None:
    req = ScanRequest.model_validate(
        {"targets": [{"name": "a", "location": "x.html"}, {"name": "b", "location": "x.html"}], "mode": "static"}
    )
    assert [t.page_id for t in req.targets] == ["a", "b"]
    assert req.mode == "static"
