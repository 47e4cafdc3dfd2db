"""
Pydantic schemas for audit requests.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from seo_audit.schemas.audit_result import CrawlMetadataSchema, WireModel


class AuditRunRequest(WireModel):
    """A batch of classified factor items to aggregate.

    Items stay raw here; the ingestion layer validates them so that a rejected
    batch reports the offending item index and category.
    """
    items: list[Any] = Field(..., description="Factor items produced by the factor checks")
    crawl_metadata: Optional[CrawlMetadataSchema] = Field(None, description="Crawl facts from the crawl tracker")
    competitor_comparison: Optional[dict[str, Any]] = None
    ai_insights: Optional[dict[str, Any]] = Field(None, description="Passed through without inspection")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [
                    {
                        "name": "Meta Tags Optimization",
                        "description": "Title and meta description are present and sized",
                        "status": "PriorityOFI",
                        "importance": "High",
                        "notes": "How: Add a 50-60 character title",
                        "category": "onPage",
                        "pageUrl": "https://example.com/",
                        "pageType": "homepage",
                        "analysisDetails": {
                            "recommendations": ["Add a 50-60 character title"],
                            "difficulty": "easy",
                            "estimatedImpact": "high"
                        }
                    }
                ],
                "crawlMetadata": {"pagesAnalyzed": 1, "errors": []}
            }
        },
    )


class AuditDiffRequest(BaseModel):
    """Which two stored versions to compare."""
    from_version: int = Field(..., ge=1, description="Previous version")
    to_version: int = Field(..., ge=1, description="Current version")
