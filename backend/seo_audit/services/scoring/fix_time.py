"""
Fix Time Estimator - Coarse effort estimate for the outstanding issues.

Hours per issue by difficulty (Priority OFIs weigh 1.5x), summed and bucketed:
- 0h: No fixes needed
- <=8h: a few hours
- <=16h: 1-2 days
- <=40h: 3-5 days
- <=80h: 1-2 weeks
- more: 2+ weeks
"""

from dataclasses import dataclass, field
from typing import Sequence

from seo_audit.services.scoring.models import FactorItem, FactorStatus
from seo_audit.services.scoring.recommendations import effective_difficulty
from seo_audit.services.scoring.weights import DEFAULT_POLICY, ScoringPolicy


@dataclass
class FixTimeResult:
    """Fix time estimate."""
    label: str
    hours: float
    by_difficulty: dict[str, int] = field(default_factory=dict)


class FixTimeEstimator:
    """Estimate fix time from the count and difficulty of open issues."""

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY):
        self.hours = policy.fix_time

    def estimate(self, items: Sequence[FactorItem]) -> FixTimeResult:
        """Estimate the effort for every Priority OFI and OFI item.

        Args:
            items: All factor items of the audit

        Returns:
            FixTimeResult with the bucket label and the raw hour total
        """
        total = 0.0
        by_difficulty = {"easy": 0, "medium": 0, "hard": 0}

        for item in items:
            if not item.status.is_issue:
                continue
            difficulty = effective_difficulty(item)
            by_difficulty[difficulty] += 1
            hours = self.hours.for_difficulty(difficulty)
            if item.status == FactorStatus.PRIORITY_OFI:
                hours *= self.hours.priority_multiplier
            total += hours

        return FixTimeResult(label=self.label_for(total), hours=round(total, 1), by_difficulty=by_difficulty)

    def label_for(self, hours: float) -> str:
        if hours <= 0:
            return self.hours.none_label
        for bound, label in self.hours.buckets:
            if hours <= bound:
                return label
        return self.hours.overflow_label
