"""Pytest configuration for the receipt service test suite."""

import pytest
from fastapi.testclient import TestClient

# server/api is put on sys.path by the pythonpath setting in pyproject.toml
from receipt_service.main import create_app


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app(tmp_path, clock):
    return create_app(cache_ttl=300, logo_path=str(tmp_path / "no-logo.png"), clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
