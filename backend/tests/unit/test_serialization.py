"""
Unit tests for the persisted audit shape.
"""
import json

import pytest

from seo_audit.schemas.audit_result import dump_audit_summary, load_audit_summary
from seo_audit.services.scoring.engine import ScoringEngine
from seo_audit.services.scoring.models import CrawlMetadata


@pytest.fixture
def audit(make_item):
    items = [
        make_item(
            name="Title Tag",
            status="PriorityOFI",
            page_url="https://example.com/",
            page_title="Example Plumbing",
            page_type="homepage",
            analysis_details={
                "actual": "12 characters",
                "expected": "50-60 characters",
                "metrics": {"length": 12, "hasKeyword": False},
                "recommendations": ["Lengthen the title"],
                "difficulty": "easy",
                "estimated_impact": "high",
                "priority": 9,
            },
        ),
        make_item(name="Robots.txt", status="OK", category="technicalSEO"),
        make_item(name="GBP Link", status="NotApplicable", category="localSEO"),
        make_item(name="Readability", status="OFI", category="contentQuality", score=62.5),
        make_item(name="Area Page", status="OFI", category="serviceAreaPages", page_url="https://example.com/areas/x"),
    ]
    return ScoringEngine().score(
        items,
        crawl_metadata=CrawlMetadata(pages_analyzed=2, max_pages_reached=False, crawl_duration=3.25, errors=[]),
        competitor_comparison={"competitors": []},
        ai_insights={"error": "timeout"},
    )


class TestRoundTrip:
    """dump then load gives back an equal snapshot."""

    def test_equal_after_round_trip(self, audit):
        assert load_audit_summary(dump_audit_summary(audit)) == audit

    def test_survives_json_text(self, audit):
        text = json.dumps(dump_audit_summary(audit))

        assert load_audit_summary(json.loads(text)) == audit

    def test_optional_section_absent_when_unused(self, make_item):
        audit = ScoringEngine().score([make_item()])

        data = dump_audit_summary(audit)

        assert "serviceAreaPages" not in data
        assert load_audit_summary(data) == audit


class TestWireShape:
    """camelCase keys, with the acronym-cased sections."""

    def test_top_level_keys(self, audit):
        data = dump_audit_summary(audit)

        for key in ("summary", "onPage", "structureNavigation", "technicalSEO", "localSEO",
                    "uxPerformance", "serviceAreaPages", "pageAnalysis", "crawlMetadata",
                    "aiInsights", "competitorComparison", "scoringVersion", "categoryMapVersion"):
            assert key in data

    def test_summary_keys(self, audit):
        summary = dump_audit_summary(audit)["summary"]

        assert summary["priorityOfiCount"] == 1
        assert summary["ofiCount"] == 2
        assert summary["naCount"] == 1
        assert set(summary["categoryScores"]) == {"contentQuality", "technicalSEO", "localSEO"}

    def test_item_keys(self, audit):
        item = dump_audit_summary(audit)["onPage"]["items"][0]

        assert item["pageUrl"] == "https://example.com/"
        assert item["analysisDetails"]["estimatedImpact"] == "high"
        assert item["analysisDetails"]["recommendations"] == ["Lengthen the title"]

    def test_unscored_section_omits_score(self, audit):
        local = dump_audit_summary(audit)["localSEO"]

        assert "score" not in local
        assert local["completionRate"] == 0.0

    def test_action_plan_keys(self, audit):
        summary = dump_audit_summary(audit)["summary"]

        assert summary["actionPlan"]["quickWins"] == ["Title Tag", "Readability", "Area Page"]
        assert summary["actionPlan"]["priorityOFIs"] == ["Title Tag"]
        assert summary["actionPlan"]["highImpactOFIs"] == ["Readability", "Area Page"]
        assert summary["actionPlan"]["longTermImprovements"] == []
        assert summary["issueSeverity"] == {
            "score": 60,
            "severity": "medium",
            "priorityOFIs": 1,
            "highImpactOFIs": 2,
            "totalOFIs": 3,
        }
