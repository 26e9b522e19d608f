"""
FILE: tests/conftest.py
Shared fixtures for engine and API tests.
"""

from pathlib import Path

import pytest

from src.api.services import insights_service


def _has_marker(item: pytest.Item, name: str) -> bool:
    return item.get_closest_marker(name) is not None


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if _has_marker(item, "unit") or _has_marker(item, "integration"):
            continue

        path = Path(str(item.fspath)).as_posix().lower()
        if "/tests/integration/" in path or "_integration.py" in path:
            item.add_marker(pytest.mark.integration)
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def insights_runtime_harness(monkeypatch: pytest.MonkeyPatch):
    """Start every test from default service configuration and an empty insights cache."""

    for name in (
        "INSIGHTS_ENGINE_ENABLED",
        "INSIGHTS_MAX_ACTIONS",
        "INSIGHTS_MIN_ACTIONS",
        "INSIGHTS_NEAR_RETIREMENT_YEARS",
        "INSIGHTS_CACHE_MAX_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    insights_service.INSIGHTS_CACHE.clear()
    yield
    insights_service.INSIGHTS_CACHE.clear()
