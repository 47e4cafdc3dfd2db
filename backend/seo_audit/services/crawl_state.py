"""
Crawl State Tracker - Records crawl progress for the audit.

Pattern:
- pending -> running -> completed | failed
- Progress only moves forward
- A failed crawl keeps its partial site structure and errors, so a partial
  audit can still be composed from whatever was analyzed
"""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Any, Callable, Optional

from seo_audit.config import settings
from seo_audit.logger import logger
from seo_audit.services.scoring.errors import CrawlStateError
from seo_audit.services.scoring.models import CrawlMetadata


class CrawlState(Enum):
    """Crawl job states."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = frozenset({CrawlState.COMPLETED, CrawlState.FAILED})


@dataclass
class SiteStructure:
    """Pages discovered by the crawler, classified by role."""
    homepage: Optional[dict[str, Any]] = None
    contact_page: Optional[dict[str, Any]] = None
    service_pages: list[dict[str, Any]] = field(default_factory=list)
    location_pages: list[dict[str, Any]] = field(default_factory=list)
    other_pages: list[dict[str, Any]] = field(default_factory=list)
    sitemap_urls: list[str] = field(default_factory=list)
    robots_txt: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SiteStructure":
        return cls(
            homepage=data.get("homepage"),
            contact_page=data.get("contactPage"),
            service_pages=list(data.get("servicePages") or []),
            location_pages=list(data.get("locationPages") or []),
            other_pages=list(data.get("otherPages") or []),
            sitemap_urls=list(data.get("sitemapUrls") or []),
            robots_txt=data.get("robotsTxt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "homepage": self.homepage,
            "contactPage": self.contact_page,
            "servicePages": list(self.service_pages),
            "locationPages": list(self.location_pages),
            "otherPages": list(self.other_pages),
            "sitemapUrls": list(self.sitemap_urls),
            "robotsTxt": self.robots_txt,
        }

    @property
    def page_count(self) -> int:
        pages = len(self.service_pages) + len(self.location_pages) + len(self.other_pages)
        return pages + (1 if self.homepage else 0) + (1 if self.contact_page else 0)


class CrawlStateTracker:
    """State machine for one crawl job."""

    def __init__(self, url: str, max_pages: Optional[int] = None, clock: Callable[[], float] = time.time):
        self.url = url
        self.max_pages = settings.CRAWL_MAX_PAGES if max_pages is None else max_pages
        self._clock = clock
        self.state = CrawlState.PENDING
        self.progress = 0
        self.pages_found = 0
        self.pages_analyzed = 0
        self.errors: list[str] = []
        self.site_structure = SiteStructure()
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None
        self._lock = Lock()

    def start(self):
        """pending -> running."""
        with self._lock:
            if self.state != CrawlState.PENDING:
                raise CrawlStateError(f"Cannot start crawl in state '{self.state.value}'")
            self.state = CrawlState.RUNNING
            self.started_at = self._clock()
            logger.info(f"Crawl started for {self.url} (max_pages={self.max_pages})")

    def update(
        self,
        progress: Optional[int] = None,
        pages_found: Optional[int] = None,
        pages_analyzed: Optional[int] = None,
    ):
        """Record progress while running.

        A progress value lower than the current one is ignored.
        """
        with self._lock:
            self._require_running("update")

            if progress is not None and not 0 <= progress <= 100:
                raise ValueError(f"progress must be between 0 and 100, got {progress}")
            found = self.pages_found if pages_found is None else pages_found
            analyzed = self.pages_analyzed if pages_analyzed is None else pages_analyzed
            if found < 0 or analyzed < 0:
                raise ValueError("page counts cannot be negative")
            if analyzed > found:
                raise ValueError(f"pages_analyzed ({analyzed}) cannot exceed pages_found ({found})")

            if progress is not None:
                if progress < self.progress:
                    logger.warning(f"Crawl {self.url}: ignoring progress regression {self.progress} -> {progress}")
                else:
                    self.progress = progress
            self.pages_found = found
            self.pages_analyzed = analyzed

    def record_site_structure(self, structure: SiteStructure):
        """Store the crawler's page classification (may be partial)."""
        with self._lock:
            self._require_running("record site structure")
            self.site_structure = structure

    def record_error(self, message: str):
        """Keep a non-fatal crawl error; the crawl continues."""
        with self._lock:
            if self.state in TERMINAL_STATES:
                raise CrawlStateError(f"Cannot record error in terminal state '{self.state.value}'")
            self.errors.append(message)
            logger.warning(f"Crawl {self.url}: {message}")

    def complete(self):
        """running -> completed."""
        with self._lock:
            self._require_running("complete")
            self.state = CrawlState.COMPLETED
            self.progress = 100
            self.finished_at = self._clock()
            logger.info(f"Crawl completed for {self.url}: {self.pages_analyzed}/{self.pages_found} pages")

    def fail(self, error: str):
        """pending|running -> failed, keeping everything gathered so far."""
        with self._lock:
            if self.state in TERMINAL_STATES:
                raise CrawlStateError(f"Cannot fail crawl in terminal state '{self.state.value}'")
            self.state = CrawlState.FAILED
            self.errors.append(error)
            self.finished_at = self._clock()
            logger.error(
                f"Crawl failed for {self.url} after {self.pages_analyzed}/{self.pages_found} pages: {error}"
            )

    def crawl_metadata(self) -> CrawlMetadata:
        """Crawl facts for the audit composer."""
        with self._lock:
            return CrawlMetadata(
                pages_analyzed=self.pages_analyzed,
                max_pages_reached=self.pages_found >= self.max_pages,
                crawl_duration=self._duration(),
                errors=list(self.errors),
            )

    def estimated_time_remaining(self) -> str:
        """Rough time left, extrapolated from elapsed time and progress."""
        with self._lock:
            if self.started_at is None or self.progress <= 0:
                return "Unknown"
            elapsed = self._duration()
            remaining = (elapsed / self.progress) * 100 - elapsed
            if remaining <= 0:
                return "Almost done"
            minutes = math.ceil(remaining / 60)
            return f"{minutes} minute{'s' if minutes != 1 else ''}"

    def get_status(self) -> dict:
        """Get crawl status."""
        with self._lock:
            return {
                "url": self.url,
                "state": self.state.value,
                "progress": self.progress,
                "pagesFound": self.pages_found,
                "pagesAnalyzed": self.pages_analyzed,
                "errors": list(self.errors),
                "siteStructure": self.site_structure.to_dict(),
            }

    def _duration(self) -> Optional[float]:
        if self.started_at is None:
            return None
        end = self.finished_at if self.finished_at is not None else self._clock()
        return round(end - self.started_at, 2)

    def _require_running(self, action: str):
        if self.state != CrawlState.RUNNING:
            raise CrawlStateError(f"Cannot {action} crawl in state '{self.state.value}'")
