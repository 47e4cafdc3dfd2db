"""
Pydantic schemas for audit responses.

This is the persisted/wire shape (camelCase). Conversion to and from the engine
dataclasses lives here so the round-trip is exercised in one place.
"""

from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from seo_audit.services.history import AuditHistoryEntry
from seo_audit.services.scoring.models import (
    ActionPlan,
    AnalysisDetails,
    AuditChanges,
    AuditSummary,
    BucketScores,
    CategorySection,
    CrawlMetadata,
    FactorItem,
    FactorStatus,
    Importance,
    IssueSeverity,
    PageIssueSummary,
    Summary,
    TopIssue,
)
from seo_audit.services.scoring.weights import CATEGORY_KEYS

StatusValue = Literal["PriorityOFI", "OFI", "OK", "NotApplicable"]
ImportanceValue = Literal["High", "Medium", "Low"]
DetailValue = Union[bool, int, float, str]


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AnalysisDetailsSchema(WireModel):
    actual: Optional[DetailValue] = None
    expected: Optional[DetailValue] = None
    metrics: Optional[dict[str, DetailValue]] = None
    recommendations: Optional[list[str]] = None
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    estimated_impact: Optional[Literal["low", "medium", "high"]] = None
    priority: Optional[float] = Field(None, ge=1, le=10)


class FactorItemSchema(WireModel):
    """Individual factor result."""
    name: str
    description: str
    status: StatusValue
    importance: ImportanceValue
    notes: str
    category: str
    score: Optional[float] = Field(None, ge=0, le=100)
    page_url: Optional[str] = None
    page_title: Optional[str] = None
    page_type: Optional[str] = None
    analysis_details: Optional[AnalysisDetailsSchema] = None

    @classmethod
    def from_domain(cls, item: FactorItem) -> "FactorItemSchema":
        details = item.analysis_details
        return cls(
            name=item.name,
            description=item.description,
            status=item.status.value,
            importance=item.importance.value,
            notes=item.notes,
            category=item.category,
            score=item.score,
            page_url=item.page_url,
            page_title=item.page_title,
            page_type=item.page_type,
            analysis_details=AnalysisDetailsSchema(
                actual=details.actual,
                expected=details.expected,
                metrics=details.metrics,
                recommendations=list(details.recommendations) if details.recommendations else None,
                difficulty=details.difficulty,
                estimated_impact=details.estimated_impact,
                priority=details.priority,
            ) if details else None,
        )

    def to_domain(self) -> FactorItem:
        details = self.analysis_details
        return FactorItem(
            name=self.name,
            description=self.description,
            status=FactorStatus(self.status),
            importance=Importance(self.importance),
            notes=self.notes,
            category=self.category,
            score=self.score,
            page_url=self.page_url,
            page_title=self.page_title,
            page_type=self.page_type,
            analysis_details=AnalysisDetails(
                actual=details.actual,
                expected=details.expected,
                metrics=details.metrics,
                recommendations=tuple(details.recommendations or ()),
                difficulty=details.difficulty,
                estimated_impact=details.estimated_impact,
                priority=details.priority,
            ) if details else None,
        )


class CategorySectionSchema(WireModel):
    items: list[FactorItemSchema] = []
    score: Optional[float] = Field(None, ge=0, le=100)
    completion_rate: Optional[float] = Field(None, ge=0, le=1)
    category_scores: dict[str, float] = {}
    insights: list[str] = []

    @classmethod
    def from_domain(cls, section: CategorySection) -> "CategorySectionSchema":
        return cls(
            items=[FactorItemSchema.from_domain(i) for i in section.items],
            score=section.score,
            completion_rate=section.completion_rate,
            category_scores=dict(section.category_scores),
            insights=list(section.insights),
        )

    def to_domain(self) -> CategorySection:
        return CategorySection(
            items=[i.to_domain() for i in self.items],
            score=self.score,
            completion_rate=self.completion_rate,
            category_scores=dict(self.category_scores),
            insights=list(self.insights),
        )


class TopIssueSchema(WireModel):
    name: str
    status: StatusValue
    importance: ImportanceValue
    category: str


class PageIssueSummarySchema(WireModel):
    page_url: str
    page_title: str
    page_type: str
    priority: Optional[int] = Field(None, ge=1, le=3)
    priority_weight: Optional[float] = None
    priority_ofi_count: int
    ofi_count: int
    ok_count: int
    na_count: int
    total_issues: int
    score: Optional[float] = Field(None, ge=0, le=100)
    weighted_score: Optional[float] = None
    top_issues: list[TopIssueSchema] = []

    @classmethod
    def from_domain(cls, page: PageIssueSummary) -> "PageIssueSummarySchema":
        return cls(
            page_url=page.page_url,
            page_title=page.page_title,
            page_type=page.page_type,
            priority=page.priority,
            priority_weight=page.priority_weight,
            priority_ofi_count=page.priority_ofi_count,
            ofi_count=page.ofi_count,
            ok_count=page.ok_count,
            na_count=page.na_count,
            total_issues=page.total_issues,
            score=page.score,
            weighted_score=page.weighted_score,
            top_issues=[
                TopIssueSchema(name=t.name, status=t.status.value, importance=t.importance.value, category=t.category)
                for t in page.top_issues
            ],
        )

    def to_domain(self) -> PageIssueSummary:
        return PageIssueSummary(
            page_url=self.page_url,
            page_title=self.page_title,
            page_type=self.page_type,
            priority_ofi_count=self.priority_ofi_count,
            ofi_count=self.ofi_count,
            ok_count=self.ok_count,
            na_count=self.na_count,
            total_issues=self.total_issues,
            priority=self.priority,
            priority_weight=self.priority_weight,
            score=self.score,
            weighted_score=self.weighted_score,
            top_issues=[
                TopIssue(name=t.name, status=FactorStatus(t.status), importance=Importance(t.importance), category=t.category)
                for t in self.top_issues
            ],
        )


class BucketScoresSchema(WireModel):
    """Score breakdown."""
    content_quality: Optional[float] = Field(None, ge=0, le=100)
    technical_seo: Optional[float] = Field(None, ge=0, le=100, alias="technicalSEO")
    local_seo: Optional[float] = Field(None, ge=0, le=100, alias="localSEO")
    ux_performance: Optional[float] = Field(None, ge=0, le=100)


class ActionPlanSchema(WireModel):
    quick_wins: list[str] = []
    priority_ofis: list[str] = Field(default_factory=list, alias="priorityOFIs")
    high_impact_ofis: list[str] = Field(default_factory=list, alias="highImpactOFIs")
    medium_impact_ofis: list[str] = Field(default_factory=list, alias="mediumImpactOFIs")
    long_term_improvements: list[str] = []

    @classmethod
    def from_domain(cls, plan: ActionPlan) -> "ActionPlanSchema":
        return cls(
            quick_wins=list(plan.quick_wins),
            priority_ofis=list(plan.priority_ofis),
            high_impact_ofis=list(plan.high_impact_ofis),
            medium_impact_ofis=list(plan.medium_impact_ofis),
            long_term_improvements=list(plan.long_term_improvements),
        )

    def to_domain(self) -> ActionPlan:
        return ActionPlan(
            quick_wins=list(self.quick_wins),
            priority_ofis=list(self.priority_ofis),
            high_impact_ofis=list(self.high_impact_ofis),
            medium_impact_ofis=list(self.medium_impact_ofis),
            long_term_improvements=list(self.long_term_improvements),
        )


class IssueSeveritySchema(WireModel):
    score: int = Field(100, ge=0, le=100)
    severity: Literal["low", "medium", "high", "critical"] = "low"
    priority_ofis: int = Field(0, alias="priorityOFIs")
    high_impact_ofis: int = Field(0, alias="highImpactOFIs")
    total_ofis: int = Field(0, alias="totalOFIs")

    @classmethod
    def from_domain(cls, severity: IssueSeverity) -> "IssueSeveritySchema":
        return cls(
            score=severity.score,
            severity=severity.severity,
            priority_ofis=severity.priority_ofis,
            high_impact_ofis=severity.high_impact_ofis,
            total_ofis=severity.total_ofis,
        )

    def to_domain(self) -> IssueSeverity:
        return IssueSeverity(
            score=self.score,
            severity=self.severity,
            priority_ofis=self.priority_ofis,
            high_impact_ofis=self.high_impact_ofis,
            total_ofis=self.total_ofis,
        )


class SummarySchema(WireModel):
    total_factors: int
    priority_ofi_count: int
    ofi_count: int
    ok_count: int
    na_count: int
    overall_score: Optional[float] = Field(None, ge=0, le=100)
    category_scores: BucketScoresSchema = Field(default_factory=BucketScoresSchema)
    recommendations: list[str] = []
    estimated_fix_time: Optional[str] = None
    action_plan: Optional[ActionPlanSchema] = None
    issue_severity: Optional[IssueSeveritySchema] = None

    @classmethod
    def from_domain(cls, summary: Summary) -> "SummarySchema":
        buckets = summary.category_scores
        plan, severity = summary.action_plan, summary.issue_severity
        return cls(
            total_factors=summary.total_factors,
            priority_ofi_count=summary.priority_ofi_count,
            ofi_count=summary.ofi_count,
            ok_count=summary.ok_count,
            na_count=summary.na_count,
            overall_score=summary.overall_score,
            category_scores=BucketScoresSchema(
                content_quality=buckets.content_quality,
                technical_seo=buckets.technical_seo,
                local_seo=buckets.local_seo,
                ux_performance=buckets.ux_performance,
            ),
            recommendations=list(summary.recommendations),
            estimated_fix_time=summary.estimated_fix_time,
            action_plan=ActionPlanSchema.from_domain(plan) if plan is not None else None,
            issue_severity=IssueSeveritySchema.from_domain(severity) if severity is not None else None,
        )

    def to_domain(self) -> Summary:
        buckets = self.category_scores
        return Summary(
            total_factors=self.total_factors,
            priority_ofi_count=self.priority_ofi_count,
            ofi_count=self.ofi_count,
            ok_count=self.ok_count,
            na_count=self.na_count,
            overall_score=self.overall_score,
            category_scores=BucketScores(
                content_quality=buckets.content_quality,
                technical_seo=buckets.technical_seo,
                local_seo=buckets.local_seo,
                ux_performance=buckets.ux_performance,
            ),
            recommendations=list(self.recommendations),
            estimated_fix_time=self.estimated_fix_time,
            action_plan=self.action_plan.to_domain() if self.action_plan is not None else None,
            issue_severity=self.issue_severity.to_domain() if self.issue_severity is not None else None,
        )


class CrawlMetadataSchema(WireModel):
    pages_analyzed: int
    max_pages_reached: Optional[bool] = None
    crawl_duration: Optional[float] = None
    errors: list[str] = []


class AuditSummarySchema(WireModel):
    """Complete audit snapshot."""
    summary: SummarySchema

    on_page: CategorySectionSchema = Field(default_factory=CategorySectionSchema)
    structure_navigation: CategorySectionSchema = Field(default_factory=CategorySectionSchema)
    contact_page: CategorySectionSchema = Field(default_factory=CategorySectionSchema)
    service_pages: CategorySectionSchema = Field(default_factory=CategorySectionSchema)
    location_pages: CategorySectionSchema = Field(default_factory=CategorySectionSchema)
    service_area_pages: Optional[CategorySectionSchema] = None
    content_quality: CategorySectionSchema = Field(default_factory=CategorySectionSchema)
    technical_seo: CategorySectionSchema = Field(default_factory=CategorySectionSchema, alias="technicalSEO")
    local_seo: CategorySectionSchema = Field(default_factory=CategorySectionSchema, alias="localSEO")
    ux_performance: CategorySectionSchema = Field(default_factory=CategorySectionSchema)

    page_analysis: Optional[list[PageIssueSummarySchema]] = None
    competitor_comparison: Optional[dict[str, Any]] = None
    crawl_metadata: Optional[CrawlMetadataSchema] = None
    ai_insights: Optional[dict[str, Any]] = None

    scoring_version: str = ""
    category_map_version: str = ""

    @classmethod
    def from_domain(cls, audit: AuditSummary) -> "AuditSummarySchema":
        sections = {
            _SECTION_FIELDS[key]: CategorySectionSchema.from_domain(section)
            for key, section in audit.sections.items()
        }
        crawl = audit.crawl_metadata
        return cls(
            summary=SummarySchema.from_domain(audit.summary),
            page_analysis=[PageIssueSummarySchema.from_domain(p) for p in audit.page_analysis]
            if audit.page_analysis is not None else None,
            competitor_comparison=audit.competitor_comparison,
            crawl_metadata=CrawlMetadataSchema(
                pages_analyzed=crawl.pages_analyzed,
                max_pages_reached=crawl.max_pages_reached,
                crawl_duration=crawl.crawl_duration,
                errors=list(crawl.errors),
            ) if crawl else None,
            ai_insights=audit.ai_insights,
            scoring_version=audit.scoring_version,
            category_map_version=audit.category_map_version,
            **sections,
        )

    def to_domain(self) -> AuditSummary:
        sections = {}
        for key in CATEGORY_KEYS:
            section = getattr(self, _SECTION_FIELDS[key])
            if section is not None:
                sections[key] = section.to_domain()
        crawl = self.crawl_metadata
        return AuditSummary(
            summary=self.summary.to_domain(),
            sections=sections,
            page_analysis=[p.to_domain() for p in self.page_analysis] if self.page_analysis is not None else None,
            competitor_comparison=self.competitor_comparison,
            crawl_metadata=CrawlMetadata(
                pages_analyzed=crawl.pages_analyzed,
                max_pages_reached=crawl.max_pages_reached,
                crawl_duration=crawl.crawl_duration,
                errors=list(crawl.errors),
            ) if crawl else None,
            ai_insights=self.ai_insights,
            scoring_version=self.scoring_version,
            category_map_version=self.category_map_version,
        )


# Section key on the wire -> schema attribute
_SECTION_FIELDS = {
    "onPage": "on_page",
    "structureNavigation": "structure_navigation",
    "contactPage": "contact_page",
    "servicePages": "service_pages",
    "locationPages": "location_pages",
    "serviceAreaPages": "service_area_pages",
    "contentQuality": "content_quality",
    "technicalSEO": "technical_seo",
    "localSEO": "local_seo",
    "uxPerformance": "ux_performance",
}


class AuditChangesSchema(WireModel):
    added: list[str] = []
    removed: list[str] = []
    modified: list[str] = []
    score_change: float = 0
    score_trend: Literal["increased", "decreased", "unchanged", "indeterminate"] = "indeterminate"

    @classmethod
    def from_domain(cls, changes: AuditChanges) -> "AuditChangesSchema":
        return cls(
            added=list(changes.added),
            removed=list(changes.removed),
            modified=list(changes.modified),
            score_change=changes.score_change,
            score_trend=changes.score_trend,
        )


class AuditHistoryEntrySchema(WireModel):
    """One stored audit version."""
    audit_id: str
    version: int
    results: AuditSummarySchema
    changes: AuditChangesSchema
    created_at: datetime

    @classmethod
    def from_domain(cls, entry: AuditHistoryEntry) -> "AuditHistoryEntrySchema":
        return cls(
            audit_id=entry.audit_id,
            version=entry.version,
            results=AuditSummarySchema.from_domain(entry.results),
            changes=AuditChangesSchema.from_domain(entry.changes),
            created_at=entry.created_at,
        )


class AuditHistoryItemSchema(WireModel):
    """History listing row (no full results)."""
    version: int
    overall_score: Optional[float] = None
    total_factors: int
    changes: AuditChangesSchema
    created_at: datetime

    @classmethod
    def from_domain(cls, entry: AuditHistoryEntry) -> "AuditHistoryItemSchema":
        return cls(
            version=entry.version,
            overall_score=entry.results.summary.overall_score,
            total_factors=entry.results.summary.total_factors,
            changes=AuditChangesSchema.from_domain(entry.changes),
            created_at=entry.created_at,
        )


def dump_audit_summary(audit: AuditSummary) -> dict:
    """Engine snapshot -> persisted JSON shape."""
    return AuditSummarySchema.from_domain(audit).to_wire()


def load_audit_summary(data: dict) -> AuditSummary:
    """Persisted JSON shape -> engine snapshot."""
    return AuditSummarySchema.model_validate(data).to_domain()
