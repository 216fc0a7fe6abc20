from __future__ import annotations

from collections.abc import Iterator

import pytest

from price_tracker.core.config import Settings

from .fakes import FakeBackend

BACKEND_URL = "http://backend.test"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[Settings]:
    monkeypatch.setenv("PRICE_TRACKER_BACKEND_URL", BACKEND_URL)
    yield Settings()
