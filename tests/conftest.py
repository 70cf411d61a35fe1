"""Global test fixtures and utilities for pet engine tests"""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from saveup_pet.db.memory_store import InMemoryPetStore
from saveup_pet.models.pet import Achievements, PetState
from saveup_pet.services.pet_service import PetService
from tests.helpers import FakeClock


# ============================================================================
# Clock
# ============================================================================

@pytest.fixture
def start_time():
    return datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time):
    return FakeClock(start_time)


# ============================================================================
# Storage & Service Fixtures
# ============================================================================

@pytest.fixture
def store():
    """Fresh in-memory pet store"""
    return InMemoryPetStore()


@pytest.fixture
def service(store, clock):
    """PetService over the in-memory store with a controllable clock"""
    return PetService(store, clock=clock)


@pytest.fixture
def failing_store():
    """Store whose writes fail like an unavailable database"""
    store = MagicMock()
    store.get_pet_state = AsyncMock(return_value=PetState())
    store.get_achievements = AsyncMock(return_value=Achievements())
    store.save_pet_update = AsyncMock(side_effect=ConnectionError("database unavailable"))
    store.get_gem_transactions = AsyncMock(return_value=[])
    store.list_user_ids = AsyncMock(return_value=[])
    return store


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"
