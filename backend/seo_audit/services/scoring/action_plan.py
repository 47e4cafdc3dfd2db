"""
Action Plan - Audit-level roll-ups over the outstanding issues.

Groups:
- quick wins: any outstanding issue whose difficulty is easy
- Priority OFIs
- high / medium impact OFIs
- long-term improvements: OFIs whose difficulty is hard

Severity: 100 - 15 per Priority OFI - 8 per high impact OFI - 3 per issue,
floored at 0 and banded critical / high / medium / low.
"""
from typing import Sequence

from seo_audit.services.scoring.models import ActionPlan, FactorItem, FactorStatus, IssueSeverity
from seo_audit.services.scoring.recommendations import effective_difficulty, effective_impact
from seo_audit.services.scoring.weights import DEFAULT_POLICY, ScoringPolicy


def _add(group: list[str], name: str):
    if name not in group:
        group.append(name)


class ActionPlanner:
    """Builds the action plan and issue severity for an audit."""

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY):
        self.weights = policy.issue_severity

    def plan(self, items: Sequence[FactorItem]) -> ActionPlan:
        """Group outstanding factor names, deduplicated in first-seen order."""
        plan = ActionPlan()
        for item in items:
            if not item.status.is_issue:
                continue
            difficulty = effective_difficulty(item)
            if difficulty == "easy":
                _add(plan.quick_wins, item.name)
            if item.status == FactorStatus.PRIORITY_OFI:
                _add(plan.priority_ofis, item.name)
                continue

            impact = effective_impact(item)
            if impact == "high":
                _add(plan.high_impact_ofis, item.name)
            elif impact == "medium":
                _add(plan.medium_impact_ofis, item.name)
            if difficulty == "hard":
                _add(plan.long_term_improvements, item.name)
        return plan

    def severity(self, items: Sequence[FactorItem]) -> IssueSeverity:
        """Severity from per-item counts (a factor on three pages counts three times)."""
        priority_ofis = sum(1 for i in items if i.status == FactorStatus.PRIORITY_OFI)
        high_impact_ofis = sum(
            1 for i in items if i.status == FactorStatus.OFI and effective_impact(i) == "high"
        )
        total_ofis = sum(1 for i in items if i.status.is_issue)

        w = self.weights
        score = max(
            0.0,
            100.0
            - priority_ofis * w.priority_ofi_penalty
            - high_impact_ofis * w.high_impact_ofi_penalty
            - total_ofis * w.issue_penalty,
        )

        band = w.default_band
        for label, min_priority, min_issues, below in w.bands:
            if (
                (min_priority is not None and priority_ofis >= min_priority)
                or (min_issues is not None and total_ofis >= min_issues)
                or score < below
            ):
                band = label
                break

        return IssueSeverity(
            score=int(round(score)),
            severity=band,
            priority_ofis=priority_ofis,
            high_impact_ofis=high_impact_ofis,
            total_ofis=total_ofis,
        )
