"""
Audit API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from seo_audit.core.exceptions import MalformedBatchError, NotFoundError
from seo_audit.logger import logger
from seo_audit.schemas.audit_request import AuditDiffRequest, AuditRunRequest
from seo_audit.schemas.audit_result import (
    AuditChangesSchema,
    AuditHistoryEntrySchema,
    AuditHistoryItemSchema,
    AuditSummarySchema,
    CrawlMetadataSchema,
)
from seo_audit.services.audit_runner import AuditRunner
from seo_audit.services.history import HistoryDifferencer, get_history_store
from seo_audit.services.scoring.errors import MalformedInputError
from seo_audit.services.scoring.models import CrawlMetadata

router = APIRouter(tags=["Audit"])


def get_runner() -> AuditRunner:
    return AuditRunner(store=get_history_store())


def _crawl_metadata(schema: Optional[CrawlMetadataSchema]) -> Optional[CrawlMetadata]:
    if schema is None:
        return None
    return CrawlMetadata(
        pages_analyzed=schema.pages_analyzed,
        max_pages_reached=schema.max_pages_reached,
        crawl_duration=schema.crawl_duration,
        errors=list(schema.errors),
    )


@router.post("/aggregate")
def aggregate_audit(request: AuditRunRequest, runner: AuditRunner = Depends(get_runner)):
    """Aggregate a factor batch without storing it."""
    try:
        result = runner.aggregate(
            request.items,
            _crawl_metadata(request.crawl_metadata),
            request.competitor_comparison,
            request.ai_insights,
        )
    except MalformedInputError as e:
        raise MalformedBatchError(e)

    return AuditSummarySchema.from_domain(result.summary).to_wire()


@router.post("/{audit_id}/runs", status_code=201)
def create_audit_run(audit_id: str, request: AuditRunRequest, runner: AuditRunner = Depends(get_runner)):
    """Aggregate a factor batch and store it as the next version."""
    try:
        result = runner.run(
            audit_id,
            request.items,
            _crawl_metadata(request.crawl_metadata),
            request.competitor_comparison,
            request.ai_insights,
        )
    except MalformedInputError as e:
        logger.warning(f"Rejected run for audit {audit_id}: {e}")
        raise MalformedBatchError(e)

    return AuditHistoryEntrySchema.from_domain(result.entry).to_wire()


@router.get("/{audit_id}/history")
def list_audit_history(audit_id: str):
    """List stored versions of an audit, oldest first."""
    entries = get_history_store().history(audit_id)
    if not entries:
        raise NotFoundError("Audit")
    return [AuditHistoryItemSchema.from_domain(e).to_wire() for e in entries]


@router.get("/{audit_id}/history/{version}")
def get_audit_version(audit_id: str, version: int):
    """Get one stored version with its full results."""
    entry = get_history_store().get(audit_id, version)
    if entry is None:
        raise NotFoundError("Audit version")
    return AuditHistoryEntrySchema.from_domain(entry).to_wire()


@router.get("/{audit_id}/diff")
def diff_audit_versions(audit_id: str, params: AuditDiffRequest = Depends()):
    """Diff any two stored versions of an audit."""
    store = get_history_store()
    previous = store.get(audit_id, params.from_version)
    current = store.get(audit_id, params.to_version)
    if previous is None or current is None:
        raise NotFoundError("Audit version")

    changes = HistoryDifferencer().diff(previous.results, current.results)
    return AuditChangesSchema.from_domain(changes).to_wire()
