"""
Test configuration and fixtures for Hue Palette tests.
"""
import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from huepalette.services.observability import get_metrics_collector
    get_metrics_collector().reset()
