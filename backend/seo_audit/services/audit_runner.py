"""
Audit Runner - Main orchestrator for one audit run.

Coordinates ingestion, scoring and the history store. Upstream failures (crawl
errors, AI insight errors) arrive as data and never stop the run.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from seo_audit.logger import logger
from seo_audit.services.crawl_state import CrawlStateTracker
from seo_audit.services.history import AuditHistoryEntry, AuditHistoryStore, get_history_store
from seo_audit.services.scoring.engine import ScoringEngine
from seo_audit.services.scoring.ingest import parse_factor_items
from seo_audit.services.scoring.models import AuditSummary, CrawlMetadata, PageIssueSummary


@dataclass
class PriorityDistribution:
    """How the audited pages spread over the priority tiers."""
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0
    total_weight: float = 0.0


@dataclass
class RunResult:
    """Outcome of a run: the snapshot and, when persisted, its history entry."""
    summary: AuditSummary
    entry: Optional[AuditHistoryEntry] = None
    distribution: PriorityDistribution = field(default_factory=PriorityDistribution)


def priority_distribution(pages: Iterable[PageIssueSummary], engine: ScoringEngine) -> PriorityDistribution:
    distribution = PriorityDistribution()
    for page in pages:
        if page.priority == 1:
            distribution.high_priority += 1
        elif page.priority == 2:
            distribution.medium_priority += 1
        else:
            distribution.low_priority += 1
        if page.priority is not None:
            distribution.total_weight += engine.policy.page_tiers.for_tier(page.priority)
    return distribution


class AuditRunner:
    """Orchestrates the aggregation of one audit batch."""

    def __init__(self, engine: Optional[ScoringEngine] = None, store: Optional[AuditHistoryStore] = None):
        self.engine = engine or ScoringEngine()
        self.store = store or get_history_store()

    def aggregate(
        self,
        raw_items: Iterable[Any],
        crawl_metadata: Optional[CrawlMetadata] = None,
        competitor_comparison: Optional[dict[str, Any]] = None,
        ai_insights: Optional[dict[str, Any]] = None,
    ) -> RunResult:
        """Validate and score a batch without persisting it.

        Raises:
            MalformedInputError: if any item is invalid
        """
        items = parse_factor_items(raw_items)

        if crawl_metadata and crawl_metadata.errors:
            logger.warning(f"Aggregating with {len(crawl_metadata.errors)} crawl error(s)")
        if ai_insights and ai_insights.get("error"):
            logger.warning(f"AI insights unavailable: {ai_insights['error']}")

        summary = self.engine.score(items, crawl_metadata, competitor_comparison, ai_insights)
        return RunResult(
            summary=summary,
            distribution=priority_distribution(summary.page_analysis or [], self.engine),
        )

    def run(
        self,
        audit_id: str,
        raw_items: Iterable[Any],
        crawl_metadata: Optional[CrawlMetadata] = None,
        competitor_comparison: Optional[dict[str, Any]] = None,
        ai_insights: Optional[dict[str, Any]] = None,
    ) -> RunResult:
        """Score a batch and persist it as the next version of the audit.

        Args:
            audit_id: The audited subject; versions accumulate under it
            raw_items: Factor items, as mappings or FactorItem records
            crawl_metadata: Crawl facts, passed through
            competitor_comparison: Passed through
            ai_insights: Passed through

        Returns:
            RunResult with the snapshot and its history entry
        """
        logger.info(f"Starting audit run for {audit_id}")
        result = self.aggregate(raw_items, crawl_metadata, competitor_comparison, ai_insights)
        result.entry = self.store.save(audit_id, result.summary)
        logger.info(f"Completed audit run for {audit_id} (version={result.entry.version})")
        return result

    def run_with_tracker(
        self,
        audit_id: str,
        raw_items: Iterable[Any],
        tracker: CrawlStateTracker,
        competitor_comparison: Optional[dict[str, Any]] = None,
        ai_insights: Optional[dict[str, Any]] = None,
    ) -> RunResult:
        """Run using the tracker's crawl metadata; works for failed crawls too."""
        return self.run(audit_id, raw_items, tracker.crawl_metadata(), competitor_comparison, ai_insights)
