"""Per-page scoring and compliance tiers."""

import pytest

from pagescan.core.scoring import (
    SEVERITY_WEIGHTS,
    ComplianceTier,
    compliance_tier,
    mean_score,
    score_from,
)
from pagescan.models.taxonomy import Severity


def test_no_findings_scores_100() -> None:
    assert score_from({}) == 100
    assert score_from({sev: 0 for sev in Severity}) == 100


def test_weights_are_deducted_per_finding() -> None:
    assert SEVERITY_WEIGHTS == {
        Severity.CRITICAL: 25,
        Severity.SERIOUS: 15,
        Severity.MODERATE: 8,
        Severity.MINOR: 3,
    }
    assert score_from({Severity.SERIOUS: 1}) == 85
    assert score_from({Severity.MODERATE: 1, Severity.MINOR: 4}) == 80
    assert score_from({Severity.CRITICAL: 1, Severity.MINOR: 2}) == 69


def test_score_is_clamped_at_zero() -> None:
    assert score_from({Severity.CRITICAL: 5}) == 0
    assert score_from({Severity.SERIOUS: 50}) == 0


def test_score_is_monotone_in_findings() -> None:
    counts = {sev: 0 for sev in Severity}
    previous = score_from(counts)
    for sev in [Severity.MINOR, Severity.SERIOUS, Severity.MODERATE, Severity.CRITICAL] * 3:
        counts[sev] += 1
        current = score_from(counts)
        assert 0 <= current <= previous
        previous = current


def test_mean_score() -> None:
    assert mean_score([]) == 0.0
    assert mean_score([100, 80, 40]) == pytest.approx(73.333, abs=1e-3)


@pytest.mark.parametrize(
    ("score", "criticals", "tier"),
    [
        (100, 0, ComplianceTier.FULLY_COMPLIANT),
        (95, 0, ComplianceTier.FULLY_COMPLIANT),
        (94.99, 0, ComplianceTier.MOSTLY_COMPLIANT),
        (80, 0, ComplianceTier.MOSTLY_COMPLIANT),
        (73.33, 0, ComplianceTier.PARTIALLY_COMPLIANT),
        (60, 0, ComplianceTier.PARTIALLY_COMPLIANT),
        (59.9, 0, ComplianceTier.NON_COMPLIANT),
        (0, 0, ComplianceTier.NON_COMPLIANT),
    ],
)
def test_tier_thresholds(score: float, criticals: int, tier: ComplianceTier) -> None:
    assert compliance_tier(score, criticals) is tier


def test_critical_finding_blocks_top_tiers() -> None:
    assert compliance_tier(99, 1) is ComplianceTier.PARTIALLY_COMPLIANT
    assert compliance_tier(85, 2) is ComplianceTier.PARTIALLY_COMPLIANT
    assert compliance_tier(50, 1) is ComplianceTier.NON_COMPLIANT


def test_tier_labels() -> None:
    assert ComplianceTier.FULLY_COMPLIANT.value == "fully compliant"
    assert ComplianceTier.NON_COMPLIANT.value == "non-compliant"
