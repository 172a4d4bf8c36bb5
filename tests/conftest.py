"""
conftest.py: shared pytest fixtures
Adds the project root to sys.path so `seo_analyzer.*` imports resolve
regardless of where pytest is invoked from.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient
from seo_analyzer.main import app
from seo_analyzer.config import get_settings
from seo_analyzer.middleware import rate_limit


@pytest.fixture(scope="session")
def client():
    """Synchronous test client; the webhook is always mocked."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _fresh_rate_limit():
    rate_limit.reset()
    yield
    rate_limit.reset()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def submission():
    return {
        "websiteUrl": "https://example.com",
        "mainTopic": "digital marketing",
        "email": "owner@example.com",
    }
