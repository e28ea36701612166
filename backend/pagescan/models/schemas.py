import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from pagescan.core.scoring import ComplianceTier, compliance_tier, mean_score, score_from
from pagescan.models.taxonomy import Category, Severity, classify_severity

SnapshotMode = Literal["static", "browser"]


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str
    category: Category
    issue_type: str
    message: str
    location_hint: str = "Document"
    remedy: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    @computed_field
    @property
    def severity(self) -> Severity:
        return classify_severity(self.rule_id)


def _count_by_severity(findings: List[Finding]) -> Dict[Severity, int]:
    counts = {sev: 0 for sev in Severity}
    for f in findings:
        counts[f.severity] += 1
    return counts


class PageResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_id: str
    findings: List[Finding] = Field(default_factory=list)

    @computed_field
    @property
    def severity_counts(self) -> Dict[Severity, int]:
        return _count_by_severity(self.findings)

    @computed_field
    @property
    def score(self) -> int:
        return score_from(self.severity_counts)


class ScanTotals(BaseModel):
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0
    total_violations: int = 0
    compliance_score: float = 0.0
    compliance_tier: ComplianceTier = ComplianceTier.NON_COMPLIANT


class ScanSummary(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    pages: Dict[str, PageResult] = Field(default_factory=dict)

    @property
    def total_severity_counts(self) -> Dict[Severity, int]:
        totals = {sev: 0 for sev in Severity}
        for page in self.pages.values():
            for sev, count in page.severity_counts.items():
                totals[sev] += count
        return totals

    @property
    def overall_score(self) -> float:
        return mean_score([page.score for page in self.pages.values()])

    @property
    def compliance_tier(self) -> ComplianceTier:
        return compliance_tier(self.overall_score, self.total_severity_counts[Severity.CRITICAL])

    @computed_field
    @property
    def summary(self) -> ScanTotals:
        totals = self.total_severity_counts
        return ScanTotals(
            critical=totals[Severity.CRITICAL],
            serious=totals[Severity.SERIOUS],
            moderate=totals[Severity.MODERATE],
            minor=totals[Severity.MINOR],
            total_violations=sum(totals.values()),
            compliance_score=round(self.overall_score, 2),
            compliance_tier=self.compliance_tier,
        )


class ScanTarget(BaseModel):
    name: Optional[str] = None
    location: str

    @field_validator("location")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("location must not be blank")
        return v.strip()

    @property
    def page_id(self) -> str:
        return self.name or self.location


class ScanRequest(BaseModel):
    targets: List[ScanTarget] = Field(min_length=1)
    mode: Optional[SnapshotMode] = None

    @field_validator("targets")
    @classmethod
    def _unique_page_ids(cls, v: List[ScanTarget]) -> List[ScanTarget]:
        seen = set()
        for target in v:
            if target.page_id in seen:
                raise ValueError(f"duplicate target: {target.page_id}")
            seen.add(target.page_id)
        return v


class RuleInfo(BaseModel):
    rule_id: str
    name: str
    level: Optional[str] = None
    severity: Severity
