"""
Health check endpoint.
"""

from fastapi import APIRouter

from seo_audit.services.scoring.weights import CATEGORY_MAP_VERSION, SCORING_VERSION

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/detailed")
async def detailed_health():
    """Health check with the active scoring policy versions."""
    return {
        "status": "ok",
        "scoring_version": SCORING_VERSION,
        "category_map_version": CATEGORY_MAP_VERSION,
    }
