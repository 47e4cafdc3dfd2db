"""
Domain records for the aggregation engine.

Plain dataclasses; validation happens once at ingestion (see ingest.py) and the
wire shape is handled by the pydantic schemas.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class FactorStatus(str, Enum):
    """Outcome of one factor check."""
    PRIORITY_OFI = "PriorityOFI"
    OFI = "OFI"
    OK = "OK"
    NOT_APPLICABLE = "NotApplicable"

    @property
    def severity(self) -> int:
        """Rank used for ordering issues, higher is worse."""
        return _SEVERITY[self]

    @property
    def is_issue(self) -> bool:
        return self in (FactorStatus.PRIORITY_OFI, FactorStatus.OFI)


_SEVERITY = {
    FactorStatus.PRIORITY_OFI: 3,
    FactorStatus.OFI: 2,
    FactorStatus.OK: 1,
    FactorStatus.NOT_APPLICABLE: 0,
}


class Importance(str, Enum):
    """How much a factor matters, independent of its status."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return {"High": 3, "Medium": 2, "Low": 1}[self.value]


DetailValue = Union[str, int, float, bool]


@dataclass(frozen=True)
class AnalysisDetails:
    """Supporting data from the factor check."""
    actual: Optional[DetailValue] = None
    expected: Optional[DetailValue] = None
    metrics: Optional[dict[str, DetailValue]] = None
    recommendations: tuple[str, ...] = ()
    difficulty: Optional[str] = None  # easy, medium, hard
    estimated_impact: Optional[str] = None  # low, medium, high
    priority: Optional[float] = None


@dataclass(frozen=True)
class FactorItem:
    """One evaluated SEO factor, optionally scoped to a page."""
    name: str
    description: str
    status: FactorStatus
    importance: Importance
    notes: str
    category: str
    score: Optional[float] = None
    page_url: Optional[str] = None
    page_title: Optional[str] = None
    page_type: Optional[str] = None
    analysis_details: Optional[AnalysisDetails] = None

    @property
    def identity(self) -> tuple[str, str, Optional[str]]:
        """Key used to match the same factor across audit versions."""
        return (self.category, self.name, self.page_url)


@dataclass
class CategorySection:
    """Aggregation result for one category."""
    items: list[FactorItem] = field(default_factory=list)
    score: Optional[float] = None
    completion_rate: Optional[float] = None
    category_scores: dict[str, float] = field(default_factory=dict)
    insights: list[str] = field(default_factory=list)


@dataclass
class TopIssue:
    """Slim view of a factor item for page rankings."""
    name: str
    status: FactorStatus
    importance: Importance
    category: str


@dataclass
class PageIssueSummary:
    """Aggregation result for one page."""
    page_url: str
    page_title: str
    page_type: str
    priority_ofi_count: int = 0
    ofi_count: int = 0
    ok_count: int = 0
    na_count: int = 0
    total_issues: int = 0
    priority: Optional[int] = None
    priority_weight: Optional[float] = None
    score: Optional[float] = None
    weighted_score: Optional[float] = None
    top_issues: list[TopIssue] = field(default_factory=list)


@dataclass
class BucketScores:
    """The four summary buckets shown on the dashboard."""
    content_quality: Optional[float] = None
    technical_seo: Optional[float] = None
    local_seo: Optional[float] = None
    ux_performance: Optional[float] = None


@dataclass
class CrawlMetadata:
    """Crawl facts copied verbatim from the crawl tracker."""
    pages_analyzed: int
    max_pages_reached: Optional[bool] = None
    crawl_duration: Optional[float] = None
    errors: list[str] = field(default_factory=list)


@dataclass
class ActionPlan:
    """Outstanding factor names grouped by how to tackle them.

    A factor can sit in more than one group.
    """
    quick_wins: list[str] = field(default_factory=list)
    priority_ofis: list[str] = field(default_factory=list)
    high_impact_ofis: list[str] = field(default_factory=list)
    medium_impact_ofis: list[str] = field(default_factory=list)
    long_term_improvements: list[str] = field(default_factory=list)


@dataclass
class IssueSeverity:
    """Penalty-based severity of the outstanding issues."""
    score: int = 100
    severity: str = "low"  # low, medium, high, critical
    priority_ofis: int = 0
    high_impact_ofis: int = 0
    total_ofis: int = 0


@dataclass
class Summary:
    """Audit-level roll-up."""
    total_factors: int = 0
    priority_ofi_count: int = 0
    ofi_count: int = 0
    ok_count: int = 0
    na_count: int = 0
    overall_score: Optional[float] = None
    category_scores: BucketScores = field(default_factory=BucketScores)
    recommendations: list[str] = field(default_factory=list)
    estimated_fix_time: Optional[str] = None
    action_plan: Optional[ActionPlan] = None
    issue_severity: Optional[IssueSeverity] = None


@dataclass
class AuditSummary:
    """Immutable snapshot of one audit run."""
    summary: Summary
    sections: dict[str, CategorySection] = field(default_factory=dict)
    page_analysis: Optional[list[PageIssueSummary]] = None
    competitor_comparison: Optional[dict[str, Any]] = None
    crawl_metadata: Optional[CrawlMetadata] = None
    ai_insights: Optional[dict[str, Any]] = None
    scoring_version: str = ""
    category_map_version: str = ""

    def all_items(self) -> list[FactorItem]:
        """Every factor item, section by section in input order."""
        return [item for section in self.sections.values() for item in section.items]


@dataclass
class AuditChanges:
    """Difference between two consecutive audit versions."""
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    score_change: float = 0.0
    score_trend: str = "indeterminate"  # increased, decreased, unchanged, indeterminate
