"""
Scoring Engine - Main orchestrator that composes the audit summary.

Coordinates:
- Category aggregation (one per category)
- Page summaries (one per page)
- Overall and bucket scores
- Recommendations, fix-time estimate and action plan

Category and page aggregation only read their own slice of the batch, so they
are independent; compose() runs once all of them are done.
"""

from typing import Any, Optional, Sequence

from seo_audit.services.scoring.action_plan import ActionPlanner
from seo_audit.services.scoring.category_aggregator import CategoryAggregator, round_score
from seo_audit.services.scoring.fix_time import FixTimeEstimator
from seo_audit.services.scoring.models import (
    AuditSummary,
    BucketScores,
    CategorySection,
    CrawlMetadata,
    FactorItem,
    FactorStatus,
    PageIssueSummary,
    Summary,
)
from seo_audit.services.scoring.page_summarizer import PageSummarizer, group_by_page
from seo_audit.services.scoring.recommendations import RecommendationRanker
from seo_audit.services.scoring.weights import (
    CATEGORY_BUCKETS,
    CATEGORY_KEYS,
    CATEGORY_MAP_VERSION,
    DEFAULT_POLICY,
    OPTIONAL_CATEGORY_KEYS,
    SCORING_VERSION,
    ScoringPolicy,
)
from seo_audit.logger import logger

_BUCKET_FIELDS = {
    "contentQuality": "content_quality",
    "technicalSEO": "technical_seo",
    "localSEO": "local_seo",
    "uxPerformance": "ux_performance",
}


def _page_sort_key(page: PageIssueSummary):
    # Worst page first: heaviest issue weight, then lowest weighted score
    unscored = page.weighted_score is None
    return (
        -(page.priority_weight or 0.0),
        unscored,
        page.weighted_score if not unscored else 0.0,
        page.page_url,
    )


class ScoringEngine:
    """Main scoring orchestrator."""

    def __init__(
        self,
        policy: ScoringPolicy = DEFAULT_POLICY,
        top_issues_limit: Optional[int] = None,
        insights_limit: Optional[int] = None,
        recommendations_limit: Optional[int] = None,
    ):
        self.policy = policy
        self.category_aggregator = CategoryAggregator(policy, insights_limit=insights_limit)
        self.page_summarizer = PageSummarizer(policy, top_issues_limit=top_issues_limit)
        self.recommendation_ranker = RecommendationRanker(limit=recommendations_limit)
        self.fix_time_estimator = FixTimeEstimator(policy)
        self.action_planner = ActionPlanner(policy)

    def aggregate_categories(self, items: Sequence[FactorItem]) -> dict[str, CategorySection]:
        """One CategorySection per category, in CATEGORY_KEYS order.

        Optional categories are only present when they have items.
        """
        by_category: dict[str, list[FactorItem]] = {key: [] for key in CATEGORY_KEYS}
        for item in items:
            by_category[item.category].append(item)

        sections = {}
        for key in CATEGORY_KEYS:
            if key in OPTIONAL_CATEGORY_KEYS and not by_category[key]:
                continue
            sections[key] = self.category_aggregator.aggregate(by_category[key])
        return sections

    def summarize_pages(self, items: Sequence[FactorItem]) -> list[PageIssueSummary]:
        """One PageIssueSummary per page URL, in first-seen order."""
        return [
            self.page_summarizer.summarize(page_url, page_items)
            for page_url, page_items in group_by_page(items).items()
        ]

    def compose(
        self,
        sections: dict[str, CategorySection],
        pages: Sequence[PageIssueSummary],
        crawl_metadata: Optional[CrawlMetadata] = None,
        competitor_comparison: Optional[dict[str, Any]] = None,
        ai_insights: Optional[dict[str, Any]] = None,
    ) -> AuditSummary:
        """Merge category and page results into the audit snapshot."""
        all_items = [item for section in sections.values() for item in section.items]

        counts = {status: 0 for status in FactorStatus}
        for item in all_items:
            counts[item.status] += 1

        buckets = BucketScores()
        for bucket, members in CATEGORY_BUCKETS.items():
            setattr(buckets, _BUCKET_FIELDS[bucket], self._weighted_category_mean(sections, members))

        fix_time = self.fix_time_estimator.estimate(all_items)

        summary = Summary(
            total_factors=len(all_items),
            priority_ofi_count=counts[FactorStatus.PRIORITY_OFI],
            ofi_count=counts[FactorStatus.OFI],
            ok_count=counts[FactorStatus.OK],
            na_count=counts[FactorStatus.NOT_APPLICABLE],
            overall_score=self._weighted_category_mean(sections, CATEGORY_KEYS),
            category_scores=buckets,
            recommendations=self.recommendation_ranker.rank(all_items),
            estimated_fix_time=fix_time.label,
            action_plan=self.action_planner.plan(all_items),
            issue_severity=self.action_planner.severity(all_items),
        )

        logger.info(
            f"Composed audit: factors={summary.total_factors}, overall={summary.overall_score}, "
            f"pages={len(pages)}, fix_time={fix_time.label} ({fix_time.hours}h)"
        )

        return AuditSummary(
            summary=summary,
            sections=dict(sections),
            page_analysis=sorted(pages, key=_page_sort_key),
            competitor_comparison=competitor_comparison,
            crawl_metadata=crawl_metadata,
            ai_insights=ai_insights,
            scoring_version=SCORING_VERSION,
            category_map_version=CATEGORY_MAP_VERSION,
        )

    def score(
        self,
        items: Sequence[FactorItem],
        crawl_metadata: Optional[CrawlMetadata] = None,
        competitor_comparison: Optional[dict[str, Any]] = None,
        ai_insights: Optional[dict[str, Any]] = None,
    ) -> AuditSummary:
        """Run all aggregators over a validated batch and compose the result.

        Returns:
            AuditSummary with sections, page analysis and summary
        """
        logger.info(f"Running scoring engine on {len(items)} factors...")
        sections = self.aggregate_categories(items)
        pages = self.summarize_pages(items)
        return self.compose(sections, pages, crawl_metadata, competitor_comparison, ai_insights)

    def _weighted_category_mean(self, sections: dict[str, CategorySection], members: Sequence[str]) -> Optional[float]:
        """Category-weighted mean of the present scores; None if none are present."""
        total = 0.0
        total_weight = 0.0
        for key in members:
            section = sections.get(key)
            if section is None or section.score is None:
                continue
            weight = self.policy.categories.for_category(key)
            total += section.score * weight
            total_weight += weight
        if total_weight == 0:
            return None
        return round_score(total / total_weight)
