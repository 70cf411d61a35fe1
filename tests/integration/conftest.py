"""Shared fixtures for API integration tests"""
import pytest
from typing import Dict, Generator
from uuid import uuid4

from fastapi.testclient import TestClient

from saveup_pet.api.middleware import limiter
from saveup_pet.api.server import app


@pytest.fixture
def test_api_key() -> str:
    """Test API key for authentication"""
    return "test_key_123"


@pytest.fixture
def auth_headers(test_api_key: str) -> Dict[str, str]:
    """Valid authentication headers"""
    return {"Authorization": f"Bearer {test_api_key}"}


@pytest.fixture
def api_client(monkeypatch, test_api_key: str) -> Generator[TestClient, None, None]:
    """In-process client; the app lifespan builds a fresh in-memory container"""
    monkeypatch.setenv("API_KEYS", test_api_key)
    monkeypatch.setattr("saveup_pet.api.server.STORAGE_BACKEND", "memory")
    monkeypatch.setattr("saveup_pet.config.STORAGE_BACKEND", "memory")
    limiter.enabled = False
    with TestClient(app) as client:
        yield client
    limiter.enabled = True


@pytest.fixture
def unique_user_id() -> str:
    """Generate unique user ID for test isolation"""
    return f"test_user_{uuid4().hex[:12]}"
