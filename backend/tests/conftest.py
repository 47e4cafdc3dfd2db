"""
Pytest configuration and fixtures for the audit engine tests.
"""
import pytest
from fastapi.testclient import TestClient

from seo_audit.services import history
from seo_audit.services.scoring.models import AnalysisDetails, FactorItem, FactorStatus, Importance


def build_item(
    name: str = "Meta Tags Optimization",
    status: str = "OK",
    importance: str = "High",
    category: str = "onPage",
    **overrides,
) -> FactorItem:
    """Build a FactorItem with sensible defaults."""
    details = overrides.pop("analysis_details", None)
    if isinstance(details, dict):
        details = dict(details)
        details["recommendations"] = tuple(details.get("recommendations", ()))
        details = AnalysisDetails(**details)
    return FactorItem(
        name=name,
        description=overrides.pop("description", f"{name} check"),
        status=FactorStatus(status),
        importance=Importance(importance),
        notes=overrides.pop("notes", ""),
        category=category,
        analysis_details=details,
        **overrides,
    )


def build_raw_item(**overrides) -> dict:
    """Build a camelCase factor payload as the factor checks send it."""
    raw = {
        "name": "Meta Tags Optimization",
        "description": "Title and meta description present",
        "status": "OK",
        "importance": "High",
        "notes": "",
        "category": "onPage",
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def make_item():
    """Factory fixture for FactorItem records."""
    return build_item


@pytest.fixture
def make_raw_item():
    """Factory fixture for raw factor payloads."""
    return build_raw_item


@pytest.fixture
def history_store():
    """Fresh global history store for each test."""
    history._history_store = None
    store = history.get_history_store()
    yield store
    history._history_store = None


@pytest.fixture
def client(history_store):
    """Test client bound to a fresh history store."""
    from seo_audit.main import app

    with TestClient(app) as test_client:
        yield test_client
