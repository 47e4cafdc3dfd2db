"""
Domain errors raised by the aggregation engine and crawl tracker.
"""

from typing import Optional


class MalformedInputError(ValueError):
    """A factor item failed validation; the whole batch is rejected."""

    def __init__(self, message: str, index: int, category: Optional[str] = None, field: Optional[str] = None):
        self.index = index
        self.category = category
        self.field = field
        self.reason = message
        location = f"item {index}"
        if category:
            location += f" (category={category})"
        if field:
            location += f" field '{field}'"
        super().__init__(f"Malformed factor {location}: {message}")

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "category": self.category,
            "field": self.field,
            "message": self.reason,
        }


class CrawlStateError(RuntimeError):
    """An invalid crawl state transition or update."""
