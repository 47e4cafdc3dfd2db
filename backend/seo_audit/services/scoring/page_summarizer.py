"""
Page Summarizer - Reduces the factor items of one page to a PageIssueSummary.

Page tiers:
- Tier 1 (x3): home, contact/quote/booking, main service and location hubs
- Tier 2 (x2): individual service, location, service-area, about, gallery
- Tier 3 (x1): everything else
"""
import re
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import urlparse

from seo_audit.config import settings
from seo_audit.services.scoring.category_aggregator import round_score, weighted_score
from seo_audit.services.scoring.models import FactorItem, FactorStatus, PageIssueSummary, TopIssue
from seo_audit.services.scoring.weights import DEFAULT_POLICY, ScoringPolicy

TIER_1_TYPES = frozenset({"homepage", "home", "main-service", "contact", "primary-location"})
TIER_2_TYPES = frozenset({"service", "location", "service-area", "about", "gallery"})

TIER_1_PATTERNS = (
    re.compile(r"^/$|^/index|^/home$", re.I),
    re.compile(r"/services?/?$", re.I),
    re.compile(r"/contact|/quote|/estimate|/booking", re.I),
    re.compile(r"/locations?/?$", re.I),
)
TIER_2_PATTERNS = (
    re.compile(r"/service/", re.I),
    re.compile(r"/location/", re.I),
    re.compile(r"/area/", re.I),
    re.compile(r"/about|/company|/team", re.I),
    re.compile(r"/gallery|/portfolio|/work", re.I),
)

TIER_EXPLANATIONS = {
    1: "High Priority: This page directly impacts business conversion and should be optimized first.",
    2: "Medium Priority: This page supports business goals and should be optimized after high-priority pages.",
    3: "Standard Priority: This page provides general value and can be optimized as resources allow.",
}


@dataclass(frozen=True)
class PagePriority:
    """Tier and multiplier for one page."""
    tier: int
    weight: float

    @property
    def explanation(self) -> str:
        return TIER_EXPLANATIONS[self.tier]


def _url_path(url: str) -> str:
    path = urlparse(url).path if "://" in url else url
    return path or "/"


def page_tier(page_url: str, page_type: Optional[str]) -> int:
    """Tier 1-3 from the page type, falling back to URL path patterns."""
    page_type = (page_type or "").lower()
    path = _url_path(page_url)
    if page_type in TIER_1_TYPES or any(p.search(path) for p in TIER_1_PATTERNS):
        return 1
    if page_type in TIER_2_TYPES or any(p.search(path) for p in TIER_2_PATTERNS):
        return 2
    return 3


def page_priority(page_url: str, page_type: Optional[str], policy: ScoringPolicy = DEFAULT_POLICY) -> PagePriority:
    tier = page_tier(page_url, page_type)
    return PagePriority(tier=tier, weight=policy.page_tiers.for_tier(tier))


def priority_explanation(tier: int) -> str:
    return TIER_EXPLANATIONS.get(tier, "Priority assessment needed.")


def rank_issues(items: Sequence[FactorItem]) -> list[FactorItem]:
    """Worst first: status severity, then importance; stable on input order."""
    return sorted(items, key=lambda item: (-item.status.severity, -item.importance.rank))


def group_by_page(items: Sequence[FactorItem]) -> "OrderedDict[str, list[FactorItem]]":
    """Page-scoped items keyed by URL in first-seen order. Site-wide items are skipped."""
    pages: "OrderedDict[str, list[FactorItem]]" = OrderedDict()
    for item in items:
        if item.page_url:
            pages.setdefault(item.page_url, []).append(item)
    return pages


class PageSummarizer:
    """Builds the PageIssueSummary for one page."""

    def __init__(self, policy: ScoringPolicy = DEFAULT_POLICY, top_issues_limit: Optional[int] = None):
        self.policy = policy
        self.top_issues_limit = settings.TOP_ISSUES_LIMIT if top_issues_limit is None else top_issues_limit

    def summarize(self, page_url: str, items: Sequence[FactorItem]) -> PageIssueSummary:
        """Summarize all items sharing one page URL.

        Title and type come from the first item that carries them.
        """
        counts = {status: 0 for status in FactorStatus}
        for item in items:
            counts[item.status] += 1

        page_title = next((i.page_title for i in items if i.page_title), "")
        page_type = next((i.page_type for i in items if i.page_type), "")
        priority = page_priority(page_url, page_type, self.policy)

        severity = self.policy.severity
        priority_weight = priority.weight * (
            severity.priority_ofi * counts[FactorStatus.PRIORITY_OFI]
            + severity.ofi * counts[FactorStatus.OFI]
        )

        score = weighted_score(items, self.policy)
        weighted = round_score(score * priority.weight) if score is not None else None

        return PageIssueSummary(
            page_url=page_url,
            page_title=page_title,
            page_type=page_type,
            priority_ofi_count=counts[FactorStatus.PRIORITY_OFI],
            ofi_count=counts[FactorStatus.OFI],
            ok_count=counts[FactorStatus.OK],
            na_count=counts[FactorStatus.NOT_APPLICABLE],
            total_issues=counts[FactorStatus.PRIORITY_OFI] + counts[FactorStatus.OFI],
            priority=priority.tier,
            priority_weight=priority_weight,
            score=round_score(score) if score is not None else None,
            weighted_score=weighted,
            top_issues=[
                TopIssue(name=i.name, status=i.status, importance=i.importance, category=i.category)
                for i in rank_issues(items)[:self.top_issues_limit]
            ],
        )
