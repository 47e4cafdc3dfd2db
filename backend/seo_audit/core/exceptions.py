"""
HTTP exceptions for the audit API.
"""
from fastapi import HTTPException, status

from seo_audit.services.scoring.errors import MalformedInputError


class NotFoundError(HTTPException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found"
        )


class MalformedBatchError(HTTPException):
    """A factor batch was rejected at ingestion."""

    def __init__(self, error: MalformedInputError):
        super().__init__(
            status_code=422,
            detail={"error": "malformed_input", **error.to_dict()}
        )
