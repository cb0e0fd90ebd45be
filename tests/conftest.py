"""
Test configuration and fixtures for the short link service.
This centralizes all test setup, making individual tests clean.
"""

import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlinks_app.dependencies import get_registry, get_url_service
from shortlinks_app.services.analytics import AnalyticsRecorder
from shortlinks_app.services.clock import FixedClock
from shortlinks_app.services.short_code_strategies import RandomShortCodeStrategy
from shortlinks_app.services.url_service import URLService
from shortlinks_app.storage.strategies import InMemoryRegistryStore

START = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
BASE_URL = "http://sho.rt"


@pytest.fixture(scope="function")
def clock():
    """Clock frozen at START; tests move it explicitly."""
    return FixedClock(START)


@pytest.fixture(scope="function")
def registry():
    """A fresh, empty registry for each test."""
    return InMemoryRegistryStore()


@pytest.fixture(scope="function")
def url_service(registry, clock):
    """Service wired to the test registry and clock."""
    return URLService(
        registry=registry,
        short_code_strategy=RandomShortCodeStrategy(rng=random.Random(1234)),
        analytics=AnalyticsRecorder(registry, clock=clock),
        clock=clock,
        base_url=BASE_URL,
    )


@pytest.fixture(scope="function")
def client(registry, url_service):
    """
    Create a test client with the service dependency overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_url_service] = lambda: url_service
    app.dependency_overrides[get_registry] = lambda: registry
    
    with TestClient(app) as test_client:
        yield test_client
    
    # Clean up overrides
    app.dependency_overrides.clear()
