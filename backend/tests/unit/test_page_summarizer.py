"""
Unit tests for page summaries and page priority tiers.
"""
import pytest

from seo_audit.services.scoring.models import FactorStatus
from seo_audit.services.scoring.page_summarizer import (
    PageSummarizer,
    group_by_page,
    page_tier,
    priority_explanation,
)

HOME = "https://example.com/"
BLOG = "https://example.com/blog/post-1"


@pytest.fixture
def summarizer():
    return PageSummarizer(top_issues_limit=5)


class TestPageTier:
    """Tier from page type first, then URL path."""

    @pytest.mark.parametrize("url,page_type,expected", [
        ("https://example.com/", "", 1),
        ("https://example.com/contact-us", "", 1),
        ("https://example.com/services", "", 1),
        ("https://example.com/blog/x", "homepage", 1),
        ("https://example.com/service/drain-cleaning", "", 2),
        ("https://example.com/about", "", 2),
        ("https://example.com/blog/x", "location", 2),
        ("https://example.com/blog/x", "", 3),
        ("https://example.com/blog/x", None, 3),
    ])
    def test_tiers(self, url, page_type, expected):
        assert page_tier(url, page_type) == expected

    def test_explanation(self):
        assert priority_explanation(1).startswith("High Priority")
        assert priority_explanation(7) == "Priority assessment needed."


class TestCounts:
    """Exact tallies per status."""

    def test_counts(self, summarizer, make_item):
        items = [
            make_item(name="A", status="PriorityOFI", page_url=BLOG),
            make_item(name="B", status="OFI", page_url=BLOG),
            make_item(name="C", status="OFI", page_url=BLOG),
            make_item(name="D", status="OK", page_url=BLOG),
            make_item(name="E", status="NotApplicable", page_url=BLOG),
        ]

        page = summarizer.summarize(BLOG, items)

        assert page.priority_ofi_count == 1
        assert page.ofi_count == 2
        assert page.ok_count == 1
        assert page.na_count == 1
        assert page.total_issues == 3

    def test_title_and_type_from_items(self, summarizer, make_item):
        items = [
            make_item(name="A", page_url=HOME),
            make_item(name="B", page_url=HOME, page_title="Example Plumbing", page_type="homepage"),
        ]

        page = summarizer.summarize(HOME, items)

        assert page.page_title == "Example Plumbing"
        assert page.page_type == "homepage"


class TestPriorityWeight:
    """One Priority OFI outweighs several OFIs, scaled by tier."""

    def test_priority_ofi_counts_three_times(self, summarizer, make_item):
        one_priority = summarizer.summarize(BLOG, [make_item(name="A", status="PriorityOFI", page_url=BLOG)])
        two_ofis = summarizer.summarize(BLOG, [
            make_item(name="A", status="OFI", page_url=BLOG),
            make_item(name="B", status="OFI", page_url=BLOG),
        ])

        assert one_priority.priority_weight == 3.0
        assert two_ofis.priority_weight == 2.0
        assert one_priority.priority_weight > two_ofis.priority_weight

    def test_tier_multiplier(self, summarizer, make_item):
        page = summarizer.summarize(HOME, [
            make_item(name="A", status="PriorityOFI", page_url=HOME),
            make_item(name="B", status="OFI", page_url=HOME),
        ])

        assert page.priority == 1
        assert page.priority_weight == 3.0 * (3 + 1)

    def test_clean_page_has_zero_weight(self, summarizer, make_item):
        page = summarizer.summarize(HOME, [make_item(name="A", status="OK", page_url=HOME)])

        assert page.priority_weight == 0.0


class TestPageScore:
    """Same formula as categories; weighted score is for ranking only."""

    def test_weighted_score(self, summarizer, make_item):
        page = summarizer.summarize(HOME, [
            make_item(name="A", status="OK", page_url=HOME),
            make_item(name="B", status="OFI", page_url=HOME),
        ])

        assert page.score == 75.0
        assert page.weighted_score == 225.0

    def test_unscorable_page(self, summarizer, make_item):
        page = summarizer.summarize(BLOG, [make_item(name="A", status="NotApplicable", page_url=BLOG)])

        assert page.score is None
        assert page.weighted_score is None


class TestTopIssues:
    """Severity, then importance, stable on input order."""

    def test_priority_ofi_always_first(self, summarizer, make_item):
        items = [
            make_item(name="ok", status="OK", importance="High", page_url=BLOG),
            make_item(name="ofi", status="OFI", importance="High", page_url=BLOG),
            make_item(name="na", status="NotApplicable", importance="High", page_url=BLOG),
            make_item(name="priority", status="PriorityOFI", importance="Low", page_url=BLOG),
        ]

        names = [t.name for t in summarizer.summarize(BLOG, items).top_issues]

        assert names == ["priority", "ofi", "ok", "na"]

    def test_importance_breaks_ties(self, summarizer, make_item):
        items = [
            make_item(name="low", status="OFI", importance="Low", page_url=BLOG),
            make_item(name="high", status="OFI", importance="High", page_url=BLOG),
            make_item(name="medium", status="OFI", importance="Medium", page_url=BLOG),
        ]

        names = [t.name for t in summarizer.summarize(BLOG, items).top_issues]

        assert names == ["high", "medium", "low"]

    def test_stable_for_equal_keys(self, summarizer, make_item):
        items = [make_item(name=f"F{i}", status="OFI", page_url=BLOG) for i in range(3)]

        names = [t.name for t in summarizer.summarize(BLOG, items).top_issues]

        assert names == ["F0", "F1", "F2"]

    def test_truncated(self, make_item):
        summarizer = PageSummarizer(top_issues_limit=2)
        items = [make_item(name=f"F{i}", status="OFI", page_url=BLOG) for i in range(6)]

        top = summarizer.summarize(BLOG, items).top_issues

        assert len(top) == 2
        assert top[0].status == FactorStatus.OFI


class TestGroupByPage:
    """Page-scoped items only, first-seen order."""

    def test_grouping(self, make_item):
        items = [
            make_item(name="A", page_url=BLOG),
            make_item(name="B"),
            make_item(name="C", page_url=HOME),
            make_item(name="D", page_url=BLOG),
        ]

        pages = group_by_page(items)

        assert list(pages) == [BLOG, HOME]
        assert [i.name for i in pages[BLOG]] == ["A", "D"]
