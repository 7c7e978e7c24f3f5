"""Shared pytest configuration and fixtures for gqlparams tests."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def diagnostics():
    """Collects messages reported through a converter's on_error sink."""
    messages: list[str] = []
    return messages


@pytest.fixture
def client():
    from gqlparams.main import app

    with TestClient(app) as test_client:
        yield test_client


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "api: marks tests that go through the HTTP routes")
