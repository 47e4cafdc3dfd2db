"""
Category Aggregator - Reduces one category's factor items to a CategorySection.

Scoring rule (shared with the page summarizer):
- NotApplicable items are never scored
- An explicit item score is used as-is, otherwise the status implies one
  (OK=100, OFI=50, Priority OFI=0)
- Contributions are averaged weighted by importance (High=3, Medium=2, Low=1)
- No scorable items -> no score at all, never 0
"""
from collections import OrderedDict
from typing import Iterable, Optional, Sequence

from seo_audit.config import settings
from seo_audit.services.scoring.models import CategorySection, FactorItem, FactorStatus
from seo_audit.services.scoring.weights import DEFAULT_POLICY, ScoringPolicy

SITEWIDE = "sitewide"


def round_score(value: float) -> float:
    return round(value, 1)


def item_contribution(item: FactorItem, policy: ScoringPolicy = DEFAULT_POLICY) -> Optional[float]:
    """0-100 contribution of one item, or None if it is not scorable."""
    if item.status == FactorStatus.NOT_APPLICABLE:
        return None
    if item.score is not None:
        return float(item.score)
    return {
        FactorStatus.OK: policy.status.ok,
        FactorStatus.OFI: policy.status.ofi,
        FactorStatus.PRIORITY_OFI: policy.status.priority_ofi,
    }[item.status]


def weighted_score(items: Iterable[FactorItem], policy: ScoringPolicy = DEFAULT_POLICY) -> Optional[float]:
    """Importance-weighted mean of item contributions, unrounded."""
    total = 0.0
    total_weight = 0.0
    for item in items:
        contribution = item_contribution(item, policy)
        if contribution is None:
            continue
        weight = policy.importance.for_importance(item.importance.value)
        total += contribution * weight
        total_weight += weight
    if total_weight == 0:
        return None
    return total / total_weight


def completion_rate(items: Sequence[FactorItem]) -> Optional[float]:
    """Share of items that were applicable; None for an empty list."""
    if not items:
        return None
    considered = sum(1 for item in items if item.status != FactorStatus.NOT_APPLICABLE)
    return round(considered / len(items), 4)


class CategoryAggregator:
    """Builds the CategorySection for one category."""

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY, insights_limit: Optional[int] = None):
        self.policy = policy
        self.insights_limit = settings.INSIGHTS_LIMIT if insights_limit is None else insights_limit

    def aggregate(self, items: Sequence[FactorItem]) -> CategorySection:
        """Aggregate the items of a single category.

        Args:
            items: Every item of the category, site-wide, in input order

        Returns:
            CategorySection; score and completion rate are None when undefined
        """
        items = list(items)
        score = weighted_score(items, self.policy)

        return CategorySection(
            items=items,
            score=round_score(score) if score is not None else None,
            completion_rate=completion_rate(items),
            category_scores=self._page_type_scores(items),
            insights=self._insights(items),
        )

    def _page_type_scores(self, items: list[FactorItem]) -> dict[str, float]:
        groups: "OrderedDict[str, list[FactorItem]]" = OrderedDict()
        for item in items:
            groups.setdefault(item.page_type or SITEWIDE, []).append(item)

        scores = {}
        for page_type, group in groups.items():
            score = weighted_score(group, self.policy)
            if score is not None:
                scores[page_type] = round_score(score)
        return scores

    def _insights(self, items: list[FactorItem]) -> list[str]:
        """One line per distinct failing factor, worst first."""
        lines = []
        for status, label in ((FactorStatus.PRIORITY_OFI, "Priority OFI"), (FactorStatus.OFI, "OFI")):
            matching = [item for item in items if item.status == status]
            # sorted() is stable, so equal importance keeps input order
            matching = sorted(matching, key=lambda item: -item.importance.rank)

            affected: "OrderedDict[str, tuple[FactorItem, set]]" = OrderedDict()
            for item in matching:
                first, pages = affected.setdefault(item.name, (item, set()))
                if item.page_url:
                    pages.add(item.page_url)

            for name, (first, pages) in affected.items():
                if len(lines) >= self.insights_limit:
                    return lines
                line = f"{label}: {name} ({first.importance.value} importance"
                if len(pages) > 1:
                    line += f", {len(pages)} pages"
                elif len(pages) == 1:
                    line += f", {next(iter(pages))}"
                lines.append(line + ")")
        return lines
