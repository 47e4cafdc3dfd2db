"""
SEO Audit Engine - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seo_audit.config import settings
from seo_audit.api.v1.endpoints import audit, health
from seo_audit.logger import logger
from seo_audit.services.scoring.weights import SCORING_VERSION

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Aggregates classified SEO factor checks into category, page and audit scores with version history",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(audit.router, prefix="/api/v1/audit")

logger.info(f"{settings.APP_NAME} ready (scoring v{SCORING_VERSION})")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }
