"""
Ingestion boundary - turn raw factor payloads into FactorItem records.

Everything past this module trusts its input. A single bad record fails the
whole batch so that factor totals are never silently short.
"""

from collections.abc import Mapping
from dataclasses import asdict
from typing import Any, Iterable, Optional

from seo_audit.logger import logger
from seo_audit.services.scoring.errors import MalformedInputError
from seo_audit.services.scoring.models import AnalysisDetails, FactorItem, FactorStatus, Importance
from seo_audit.services.scoring.weights import CATEGORY_ALIASES, CATEGORY_KEYS

# Spellings used by the older factor checks
STATUS_ALIASES = {
    "Priority OFI": FactorStatus.PRIORITY_OFI,
    "N/A": FactorStatus.NOT_APPLICABLE,
}

DIFFICULTIES = ("easy", "medium", "hard")
IMPACTS = ("low", "medium", "high")

_REQUIRED_TEXT = ("name", "description", "notes")


def normalize_category(value: Any) -> Optional[str]:
    """Map a category key or legacy alias to its section key."""
    if not isinstance(value, str):
        return None
    if value in CATEGORY_KEYS:
        return value
    return CATEGORY_ALIASES.get(value.lower())


def normalize_status(value: Any) -> Optional[FactorStatus]:
    if isinstance(value, FactorStatus):
        return value
    if not isinstance(value, str):
        return None
    if value in STATUS_ALIASES:
        return STATUS_ALIASES[value]
    try:
        return FactorStatus(value)
    except ValueError:
        return None


def normalize_importance(value: Any) -> Optional[Importance]:
    if isinstance(value, Importance):
        return value
    try:
        return Importance(value)
    except ValueError:
        return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_text(raw: Mapping, key: str, index: int, category: str) -> Optional[str]:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedInputError("expected a string", index, category, key)
    return value


def _check_score(score: Any, index: int, category: str):
    if score is None:
        return
    if not _is_number(score):
        raise MalformedInputError("expected a number", index, category, "score")
    if not 0 <= score <= 100:
        raise MalformedInputError("must be between 0 and 100", index, category, "score")


def _check_record(item: FactorItem, index: int) -> FactorItem:
    """Apply the mapping checks to an already-built FactorItem."""
    category = item.category
    if normalize_category(category) != category:
        label = category if isinstance(category, str) else None
        raise MalformedInputError(f"unknown category {category!r}", index, label, "category")
    for key in _REQUIRED_TEXT:
        if not isinstance(getattr(item, key), str):
            raise MalformedInputError("required string is missing", index, category, key)
    if not isinstance(item.status, FactorStatus):
        raise MalformedInputError(f"invalid status {item.status!r}", index, category, "status")
    if not isinstance(item.importance, Importance):
        raise MalformedInputError(f"invalid importance {item.importance!r}", index, category, "importance")
    _check_score(item.score, index, category)
    for key in ("page_url", "page_title", "page_type"):
        value = getattr(item, key)
        if value is not None and not isinstance(value, str):
            raise MalformedInputError("expected a string", index, category, key)
    if item.analysis_details is not None:
        if not isinstance(item.analysis_details, AnalysisDetails):
            raise MalformedInputError("expected AnalysisDetails", index, category, "analysisDetails")
        _parse_details(asdict(item.analysis_details), index, category)
    return item


def _parse_details(raw: Any, index: int, category: str) -> Optional[AnalysisDetails]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise MalformedInputError("expected an object", index, category, "analysisDetails")

    def fail(message: str, key: str):
        raise MalformedInputError(message, index, category, f"analysisDetails.{key}")

    for key in ("actual", "expected"):
        value = raw.get(key)
        if value is not None and not isinstance(value, (str, int, float, bool)):
            fail("expected a string, number or boolean", key)

    metrics = raw.get("metrics")
    if metrics is not None:
        if not isinstance(metrics, Mapping):
            fail("expected an object", "metrics")
        for metric_key, metric_value in metrics.items():
            if not isinstance(metric_value, (str, int, float, bool)):
                fail(f"metric '{metric_key}' must be a string, number or boolean", "metrics")
        metrics = dict(metrics)

    recommendations = raw.get("recommendations")
    if recommendations is None:
        recommendations = ()
    elif isinstance(recommendations, str) or not isinstance(recommendations, Iterable):
        fail("expected a list of strings", "recommendations")
    else:
        recommendations = tuple(recommendations)
        if not all(isinstance(r, str) for r in recommendations):
            fail("expected a list of strings", "recommendations")

    difficulty = raw.get("difficulty")
    if difficulty is not None and difficulty not in DIFFICULTIES:
        fail(f"must be one of {', '.join(DIFFICULTIES)}", "difficulty")

    impact = raw.get("estimatedImpact", raw.get("estimated_impact"))
    if impact is not None and impact not in IMPACTS:
        fail(f"must be one of {', '.join(IMPACTS)}", "estimatedImpact")

    priority = raw.get("priority")
    if priority is not None:
        if not _is_number(priority):
            fail("expected a number", "priority")
        if not 1 <= priority <= 10:
            fail("must be between 1 and 10", "priority")

    return AnalysisDetails(
        actual=raw.get("actual"),
        expected=raw.get("expected"),
        metrics=metrics,
        recommendations=recommendations,
        difficulty=difficulty,
        estimated_impact=impact,
        priority=priority,
    )


def parse_factor_item(raw: Any, index: int) -> FactorItem:
    """Validate one raw factor mapping (camelCase or snake_case keys).

    Raises:
        MalformedInputError: naming the item index, category and field.
    """
    if isinstance(raw, FactorItem):
        return _check_record(raw, index)
    if not isinstance(raw, Mapping):
        raise MalformedInputError("expected an object", index)

    raw_category = raw.get("category")
    category = normalize_category(raw_category)
    label = raw_category if isinstance(raw_category, str) else None
    if category is None:
        raise MalformedInputError(f"unknown category {raw_category!r}", index, label, "category")

    for key in _REQUIRED_TEXT:
        if not isinstance(raw.get(key), str):
            raise MalformedInputError("required string is missing", index, category, key)

    status = normalize_status(raw.get("status"))
    if status is None:
        raise MalformedInputError(f"invalid status {raw.get('status')!r}", index, category, "status")

    importance = normalize_importance(raw.get("importance"))
    if importance is None:
        raise MalformedInputError(f"invalid importance {raw.get('importance')!r}", index, category, "importance")

    score = raw.get("score")
    _check_score(score, index, category)

    def pick(camel: str, snake: str) -> Optional[str]:
        key = camel if camel in raw else snake
        return _optional_text(raw, key, index, category)

    details = raw.get("analysisDetails", raw.get("analysis_details"))

    return FactorItem(
        name=raw["name"],
        description=raw["description"],
        status=status,
        importance=importance,
        notes=raw["notes"],
        category=category,
        score=score,
        page_url=pick("pageUrl", "page_url"),
        page_title=pick("pageTitle", "page_title"),
        page_type=pick("pageType", "page_type"),
        analysis_details=_parse_details(details, index, category),
    )


def parse_factor_items(raw_items: Iterable[Any]) -> list[FactorItem]:
    """Validate a whole batch, failing on the first malformed record."""
    items = []
    for index, raw in enumerate(raw_items):
        try:
            items.append(parse_factor_item(raw, index))
        except MalformedInputError as e:
            logger.error(f"Rejected factor batch: {e}")
            raise
    return items
