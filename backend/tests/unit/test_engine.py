"""
Unit tests for the audit composer.

Tests the composition logic used in:
- Overall and bucket score calculation
- Status counts
- Recommendation ranking
- Fix-time estimation
- Page ranking
"""
import json

import pytest

from seo_audit.schemas.audit_result import dump_audit_summary
from seo_audit.services.scoring.engine import ScoringEngine
from seo_audit.services.scoring.fix_time import FixTimeEstimator
from seo_audit.services.scoring.models import CrawlMetadata
from seo_audit.services.scoring.recommendations import RecommendationRanker
from seo_audit.services.scoring.weights import CATEGORY_MAP_VERSION, SCORING_VERSION


@pytest.fixture
def engine():
    return ScoringEngine(top_issues_limit=5, insights_limit=5, recommendations_limit=10)


def _category_batch(make_item, category):
    return [
        make_item(name=f"{category} ok 1", status="OK", category=category),
        make_item(name=f"{category} ok 2", status="OK", category=category),
        make_item(name=f"{category} urgent", status="PriorityOFI", category=category),
    ]


class TestOverallScore:
    """Weighted mean over present category scores."""

    def test_four_equal_categories(self, engine, make_item):
        items = []
        for category in ("onPage", "technicalSEO", "localSEO", "uxPerformance"):
            items += _category_batch(make_item, category)

        audit = engine.score(items)

        for category in ("onPage", "technicalSEO", "localSEO", "uxPerformance"):
            assert audit.sections[category].score == 66.7
        assert audit.summary.overall_score == 66.7

    def test_missing_categories_do_not_penalize(self, engine, make_item):
        items = [
            make_item(name="A", status="OK", category="onPage"),
            make_item(name="B", status="OFI", category="technicalSEO"),
            make_item(name="C", status="NotApplicable", category="localSEO"),
        ]

        audit = engine.score(items)

        assert audit.sections["localSEO"].score is None
        assert audit.sections["contactPage"].score is None
        assert audit.summary.overall_score == 75.0

    def test_no_scorable_items(self, engine, make_item):
        audit = engine.score([make_item(name="A", status="NotApplicable")])

        assert audit.summary.overall_score is None
        assert audit.summary.total_factors == 1
        assert audit.summary.na_count == 1

    def test_empty_batch(self, engine):
        audit = engine.score([])

        assert audit.summary.total_factors == 0
        assert audit.summary.overall_score is None
        assert audit.page_analysis == []
        assert audit.summary.estimated_fix_time == "No fixes needed"


class TestBucketScores:
    """Fixed mapping from detailed categories to the four buckets."""

    def test_bucket_mapping(self, engine, make_item):
        items = [
            make_item(name="A", status="OK", category="onPage"),
            make_item(name="B", status="OFI", category="contentQuality"),
            make_item(name="C", status="OFI", category="structureNavigation"),
            make_item(name="D", status="PriorityOFI", category="contactPage"),
            make_item(name="E", status="OK", category="servicePages"),
        ]

        buckets = engine.score(items).summary.category_scores

        assert buckets.content_quality == 75.0
        assert buckets.technical_seo == 50.0
        assert buckets.local_seo == 50.0
        assert buckets.ux_performance is None

    def test_versions_stamped(self, engine, make_item):
        audit = engine.score([make_item()])

        assert audit.scoring_version == SCORING_VERSION
        assert audit.category_map_version == CATEGORY_MAP_VERSION


class TestSections:
    """Every required section exists; optional ones only with items."""

    def test_required_sections_always_present(self, engine, make_item):
        audit = engine.score([make_item(category="onPage")])

        assert set(audit.sections) == {
            "onPage", "structureNavigation", "contactPage", "servicePages", "locationPages",
            "contentQuality", "technicalSEO", "localSEO", "uxPerformance",
        }

    def test_service_area_pages_when_used(self, engine, make_item):
        audit = engine.score([make_item(category="serviceAreaPages")])

        assert "serviceAreaPages" in audit.sections
        assert audit.summary.category_scores.local_seo == 100.0


class TestCounts:
    """Counts are the union of all section items."""

    def test_status_counts(self, engine, make_item):
        items = [
            make_item(name="A", status="PriorityOFI", category="onPage"),
            make_item(name="B", status="OFI", category="technicalSEO"),
            make_item(name="C", status="OFI", category="localSEO"),
            make_item(name="D", status="OK", category="uxPerformance"),
            make_item(name="E", status="NotApplicable", category="contactPage"),
        ]

        summary = engine.score(items).summary

        assert summary.total_factors == 5
        assert summary.priority_ofi_count == 1
        assert summary.ofi_count == 2
        assert summary.ok_count == 1
        assert summary.na_count == 1


class TestRecommendations:
    """Ranked by impact, then difficulty; deduplicated."""

    def test_ranking(self, make_item):
        items = [
            make_item(name="A", status="OFI", analysis_details={
                "recommendations": ["low impact"], "estimated_impact": "low", "difficulty": "easy"}),
            make_item(name="B", status="PriorityOFI", analysis_details={
                "recommendations": ["high hard"], "estimated_impact": "high", "difficulty": "hard"}),
            make_item(name="C", status="OFI", analysis_details={
                "recommendations": ["high easy"], "estimated_impact": "high", "difficulty": "easy"}),
            make_item(name="D", status="OK", analysis_details={
                "recommendations": ["from passing item"], "estimated_impact": "high", "difficulty": "easy"}),
        ]

        assert RecommendationRanker(limit=10).rank(items) == ["high easy", "high hard", "low impact"]

    def test_duplicates_keep_best_rank(self, make_item):
        items = [
            make_item(name="A", status="OFI", analysis_details={
                "recommendations": ["shared", "other"], "estimated_impact": "low", "difficulty": "easy"}),
            make_item(name="B", status="OFI", analysis_details={
                "recommendations": ["shared"], "estimated_impact": "high", "difficulty": "easy"}),
        ]

        assert RecommendationRanker(limit=10).rank(items) == ["shared", "other"]

    def test_impact_falls_back_to_importance(self, make_item):
        items = [
            make_item(name="A", status="OFI", importance="Low", analysis_details={"recommendations": ["minor"]}),
            make_item(name="B", status="OFI", importance="High", analysis_details={"recommendations": ["major"]}),
        ]

        assert RecommendationRanker(limit=10).rank(items) == ["major", "minor"]

    def test_capped(self, make_item):
        items = [
            make_item(name=f"F{i}", status="OFI", analysis_details={"recommendations": [f"fix {i}"]})
            for i in range(15)
        ]

        assert len(RecommendationRanker(limit=10).rank(items)) == 10


class TestFixTime:
    """Bucketed from counts and difficulty only."""

    def test_no_issues(self, make_item):
        result = FixTimeEstimator().estimate([make_item(status="OK")])

        assert result.label == "No fixes needed"
        assert result.hours == 0

    def test_single_easy_issue(self, make_item):
        result = FixTimeEstimator().estimate([make_item(status="OFI", importance="Low")])

        assert result.hours == 1.5
        assert result.label == "a few hours"

    def test_hard_priority_issue(self, make_item):
        # High importance Priority OFI without a difficulty tag is treated as hard
        result = FixTimeEstimator().estimate([make_item(status="PriorityOFI", importance="High")])

        assert result.hours == 24.0
        assert result.label == "3-5 days"
        assert result.by_difficulty == {"easy": 0, "medium": 0, "hard": 1}

    @pytest.mark.parametrize("hours,label", [
        (8.0, "a few hours"),
        (8.5, "1-2 days"),
        (40.0, "3-5 days"),
        (80.0, "1-2 weeks"),
        (200.0, "2+ weeks"),
    ])
    def test_buckets(self, hours, label):
        assert FixTimeEstimator().label_for(hours) == label


class TestPageAnalysis:
    """Worst page first."""

    def test_sorted_worst_first(self, engine, make_item):
        items = [
            make_item(name="A", status="OFI", page_url="https://example.com/blog/a"),
            make_item(name="B", status="PriorityOFI", page_url="https://example.com/", page_type="homepage"),
            make_item(name="C", status="OK", page_url="https://example.com/blog/c"),
        ]

        pages = engine.score(items).page_analysis

        assert [p.page_url for p in pages] == [
            "https://example.com/",
            "https://example.com/blog/a",
            "https://example.com/blog/c",
        ]

    def test_site_wide_items_not_paged(self, engine, make_item):
        audit = engine.score([make_item(name="Sitemap")])

        assert audit.page_analysis == []
        assert audit.summary.total_factors == 1


class TestPassThrough:
    """Crawl metadata and opaque collaborator data are copied verbatim."""

    def test_crawl_and_ai(self, engine, make_item):
        crawl = CrawlMetadata(pages_analyzed=5, max_pages_reached=False, crawl_duration=12.5, errors=["timeout"])
        ai = {"error": "model unavailable"}

        audit = engine.score([make_item()], crawl_metadata=crawl, ai_insights=ai)

        assert audit.crawl_metadata == crawl
        assert audit.ai_insights == ai


class TestDeterminism:
    """Same batch, byte-identical output."""

    def test_idempotent(self, engine, make_item):
        items = [
            make_item(name="A", status="OFI", page_url="https://example.com/", analysis_details={
                "recommendations": ["fix a"]}),
            make_item(name="B", status="PriorityOFI", category="technicalSEO", page_url="https://example.com/x"),
            make_item(name="C", status="NotApplicable", category="localSEO"),
            make_item(name="D", status="OK", category="uxPerformance", score=88),
        ]

        first = json.dumps(dump_audit_summary(engine.score(items)), sort_keys=True)
        second = json.dumps(dump_audit_summary(ScoringEngine().score(list(items))), sort_keys=True)

        assert first == second


class TestActionPlanSummary:
    """The summary carries the action plan and issue severity."""

    def test_attached_to_summary(self, engine, make_item):
        items = [
            make_item(name="HTTPS", status="PriorityOFI", category="technicalSEO"),
            make_item(name="Schema", status="OFI", importance="Medium", category="localSEO"),
            make_item(name="Title", status="OK"),
        ]

        summary = engine.score(items).summary

        assert summary.action_plan.priority_ofis == ["HTTPS"]
        assert summary.action_plan.medium_impact_ofis == ["Schema"]
        assert summary.issue_severity.score == 79
        assert summary.issue_severity.severity == "medium"

    def test_clean_audit(self, engine, make_item):
        summary = engine.score([make_item(status="OK")]).summary

        assert summary.action_plan.quick_wins == []
        assert summary.issue_severity.score == 100
        assert summary.issue_severity.severity == "low"
