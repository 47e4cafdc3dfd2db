"""
Audit history - version-to-version diffs and the snapshot store.

Factors are matched across versions by (category, name, pageUrl), never by
position, so reordering a batch does not show up as a change.
"""

import copy
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Optional

from seo_audit.logger import logger
from seo_audit.services.scoring.category_aggregator import round_score
from seo_audit.services.scoring.models import AuditChanges, AuditSummary, FactorItem, Summary


def _names_in_order(items: list[FactorItem]) -> list[str]:
    seen = []
    for item in items:
        if item.name not in seen:
            seen.append(item.name)
    return seen


class HistoryDifferencer:
    """Compares two audit snapshots of the same subject."""

    def diff(self, previous: AuditSummary, current: AuditSummary) -> AuditChanges:
        """Diff two versions, ordered (previous, current).

        Names are deduplicated and listed in the order they first appear in
        the version they come from.
        """
        prev_items = {}
        for item in previous.all_items():
            prev_items.setdefault(item.identity, item)
        curr_items = {}
        for item in current.all_items():
            curr_items.setdefault(item.identity, item)

        added = [item for key, item in curr_items.items() if key not in prev_items]
        removed = [item for key, item in prev_items.items() if key not in curr_items]
        modified = [
            item for key, item in curr_items.items()
            if key in prev_items and prev_items[key].status != item.status
        ]

        score_change, trend = self._score_change(
            previous.summary.overall_score, current.summary.overall_score
        )

        return AuditChanges(
            added=_names_in_order(added),
            removed=_names_in_order(removed),
            modified=_names_in_order(modified),
            score_change=score_change,
            score_trend=trend,
        )

    def _score_change(self, previous: Optional[float], current: Optional[float]) -> tuple[float, str]:
        if previous is None or current is None:
            return 0.0, "indeterminate"
        change = round_score(current - previous)
        if change > 0:
            return change, "increased"
        if change < 0:
            return change, "decreased"
        return 0.0, "unchanged"


@dataclass
class AuditHistoryEntry:
    """One persisted version of an audit."""
    audit_id: str
    version: int
    results: AuditSummary
    changes: AuditChanges
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entry_id: int = 0


class AuditHistoryStore:
    """In-memory snapshot store. Entries are append-only.

    Snapshots are copied on the way in and on the way out, so no caller can
    edit a stored version.
    """

    def __init__(self, differencer: Optional[HistoryDifferencer] = None):
        self.differencer = differencer or HistoryDifferencer()
        self._entries: dict[str, list[AuditHistoryEntry]] = {}
        self._ids = itertools.count(1)
        self._lock = Lock()

    def save(self, audit_id: str, results: AuditSummary) -> AuditHistoryEntry:
        """Persist a new version, diffed against the latest one.

        The first version of an audit has no predecessor, so everything in it
        is reported as added with an indeterminate score trend.
        """
        with self._lock:
            versions = self._entries.setdefault(audit_id, [])
            if versions:
                changes = self.differencer.diff(versions[-1].results, results)
            else:
                changes = self.differencer.diff(AuditSummary(summary=Summary()), results)

            entry = AuditHistoryEntry(
                audit_id=audit_id,
                version=len(versions) + 1,
                results=copy.deepcopy(results),
                changes=changes,
                entry_id=next(self._ids),
            )
            versions.append(entry)

        logger.info(
            f"Saved audit {audit_id} v{entry.version}: +{len(changes.added)} -{len(changes.removed)} "
            f"~{len(changes.modified)} score {changes.score_trend} ({changes.score_change:+})"
        )
        return copy.deepcopy(entry)

    def history(self, audit_id: str) -> list[AuditHistoryEntry]:
        with self._lock:
            return copy.deepcopy(self._entries.get(audit_id, []))

    def get(self, audit_id: str, version: int) -> Optional[AuditHistoryEntry]:
        with self._lock:
            versions = self._entries.get(audit_id, [])
            if 1 <= version <= len(versions):
                return copy.deepcopy(versions[version - 1])
            return None

    def latest(self, audit_id: str) -> Optional[AuditHistoryEntry]:
        with self._lock:
            versions = self._entries.get(audit_id)
            return copy.deepcopy(versions[-1]) if versions else None


# Global history store instance
_history_store: AuditHistoryStore | None = None


def get_history_store() -> AuditHistoryStore:
    """Get global history store instance (singleton)."""
    global _history_store
    if _history_store is None:
        _history_store = AuditHistoryStore()
    return _history_store
