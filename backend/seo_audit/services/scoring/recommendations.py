"""
Recommendation ranking for the audit summary.

Texts come from analysisDetails.recommendations of outstanding issues and are
ranked by estimated impact (high first), then difficulty (easy first).
"""
from typing import Optional, Sequence

from seo_audit.config import settings
from seo_audit.services.scoring.models import FactorItem, FactorStatus, Importance

IMPACT_RANK = {"high": 0, "medium": 1, "low": 2}
DIFFICULTY_RANK = {"easy": 0, "medium": 1, "hard": 2}


def effective_difficulty(item: FactorItem) -> str:
    """The check's difficulty tag, or one inferred from status and importance."""
    details = item.analysis_details
    if details and details.difficulty:
        return details.difficulty
    if item.importance == Importance.HIGH and item.status == FactorStatus.PRIORITY_OFI:
        return "hard"
    if item.importance == Importance.MEDIUM:
        return "medium"
    return "easy"


def effective_impact(item: FactorItem) -> str:
    """The check's impact tag, or the item's importance."""
    details = item.analysis_details
    if details and details.estimated_impact:
        return details.estimated_impact
    return item.importance.value.lower()


class RecommendationRanker:
    """Deduplicates and ranks recommendation texts."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = settings.RECOMMENDATIONS_LIMIT if limit is None else limit

    def rank(self, items: Sequence[FactorItem]) -> list[str]:
        best: dict[str, tuple[int, int, int]] = {}
        position = 0
        for item in items:
            if not item.status.is_issue or not item.analysis_details:
                continue
            impact = IMPACT_RANK[effective_impact(item)]
            difficulty = DIFFICULTY_RANK[effective_difficulty(item)]
            for text in item.analysis_details.recommendations:
                text = text.strip()
                if not text:
                    continue
                key = (impact, difficulty, position)
                position += 1
                if text not in best or key < best[text]:
                    best[text] = key

        ranked = sorted(best, key=lambda text: best[text])
        return ranked[:self.limit]
