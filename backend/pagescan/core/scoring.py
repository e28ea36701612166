from enum import Enum
from typing import Mapping, Sequence

from pagescan.models.taxonomy import Severity

SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 25,
    Severity.SERIOUS: 15,
    Severity.MODERATE: 8,
    Severity.MINOR: 3,
}


class ComplianceTier(str, Enum):
    FULLY_COMPLIANT = "fully compliant"
    MOSTLY_COMPLIANT = "mostly compliant"
    PARTIALLY_COMPLIANT = "partially compliant"
    NON_COMPLIANT = "non-compliant"


def score_from(severity_counts: Mapping[Severity, int]) -> int:
    deductions = sum(count * SEVERITY_WEIGHTS[sev] for sev, count in severity_counts.items())
    return max(100 - deductions, 0)


def mean_score(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def compliance_tier(overall_score: float, critical_count: int) -> ComplianceTier:
    # a critical issue caps the tier no matter how high the score is
    if overall_score >= 95 and critical_count == 0:
        return ComplianceTier.FULLY_COMPLIANT
    if overall_score >= 80 and critical_count == 0:
        return ComplianceTier.MOSTLY_COMPLIANT
    if overall_score >= 60:
        return ComplianceTier.PARTIALLY_COMPLIANT
    return ComplianceTier.NON_COMPLIANT
