"""Unit tests for pet storage backends (saveup_pet/db/memory_store.py, postgres_store.py)"""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from saveup_pet.db.interface import PetStorageInterface
from saveup_pet.db.memory_store import InMemoryPetStore
from saveup_pet.db.postgres_store import PostgresPetStore
from saveup_pet.models.pet import (
    Achievements,
    GemTransaction,
    MoodState,
    PetState,
    PetType,
    TransactionType,
)


# ============================================================================
# InMemoryPetStore
# ============================================================================

@pytest.mark.asyncio
async def test_memory_store_round_trip_is_isolated():
    store = InMemoryPetStore()
    state = PetState(accessories=["bow"])

    await store.save_pet_state("u1", state)
    loaded = await store.get_pet_state("u1")
    loaded.accessories.append("crown")

    assert (await store.get_pet_state("u1")).accessories == ["bow"]


@pytest.mark.asyncio
async def test_memory_store_missing_user():
    store = InMemoryPetStore()

    assert await store.get_pet_state("ghost") is None
    assert await store.get_achievements("ghost") is None
    assert await store.get_gem_transactions("ghost") == []


@pytest.mark.asyncio
async def test_memory_store_transactions_newest_first_with_limit():
    store = InMemoryPetStore()
    now = datetime(2024, 3, 1, tzinfo=timezone.utc)
    for amount in (1, 2, 3):
        await store.add_gem_transaction(
            "u1", GemTransaction(type=TransactionType.EARN, amount=amount, reason="X", timestamp=now)
        )

    transactions = await store.get_gem_transactions("u1", limit=2)

    assert [t.amount for t in transactions] == [3, 2]


@pytest.mark.asyncio
async def test_memory_store_lists_users_with_state():
    store = InMemoryPetStore()
    await store.save_pet_state("a", PetState())
    await store.save_achievements("b", Achievements())

    assert await store.list_user_ids() == ["a"]


def test_stores_implement_interface():
    assert isinstance(InMemoryPetStore(), PetStorageInterface)
    assert isinstance(PostgresPetStore(), PetStorageInterface)


# ============================================================================
# PostgresPetStore
# ============================================================================

@pytest.mark.asyncio
async def test_postgres_store_maps_row_to_state():
    last_fed = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    row = {
        "user_id": "u1",
        "current_pet": "sensei",
        "gems": 75,
        "unlocked_pets": ["meow", "doge", "finny", "chill", "sensei"],
        "accessories": [],
        "pet_level": 3,
        "pet_xp": 460,
        "last_fed": last_fed,
        "mood_state": "sad",
        "happiness": 30,
        "energy": 50,
    }

    with patch('saveup_pet.db.postgres_store.queries.get_pet_state', new=AsyncMock(return_value=row)):
        state = await PostgresPetStore().get_pet_state("u1")

    assert state.current_pet == PetType.SENSEI
    assert state.mood_state == MoodState.SAD
    assert state.last_fed == last_fed


@pytest.mark.asyncio
async def test_postgres_store_missing_state():
    with patch('saveup_pet.db.postgres_store.queries.get_pet_state', new=AsyncMock(return_value=None)):
        assert await PostgresPetStore().get_pet_state("ghost") is None


@pytest.mark.asyncio
async def test_postgres_store_saves_enum_values_and_datetime():
    last_fed = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    state = PetState(current_pet=PetType.DOGE, last_fed=last_fed)

    with patch('saveup_pet.db.postgres_store.queries.upsert_pet_state', new=AsyncMock()) as mock_upsert:
        await PostgresPetStore().save_pet_state("u1", state)

    user_id, saved = mock_upsert.call_args[0]
    assert user_id == "u1"
    assert saved["current_pet"] == "doge"
    assert saved["unlocked_pets"] == ["meow", "doge", "finny", "chill"]
    assert saved["mood_state"] == "happy"
    assert saved["last_fed"] == last_fed


@pytest.mark.asyncio
async def test_postgres_store_maps_transactions():
    created_at = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    rows = [{"id": "t1", "user_id": "u1", "type": "spend", "amount": 20, "reason": "FEED_PET", "created_at": created_at}]

    with patch('saveup_pet.db.postgres_store.queries.get_gem_transactions', new=AsyncMock(return_value=rows)):
        transactions = await PostgresPetStore().get_gem_transactions("u1", limit=10)

    assert transactions == [
        GemTransaction(type=TransactionType.SPEND, amount=20, reason="FEED_PET", timestamp=created_at)
    ]


@pytest.mark.asyncio
async def test_postgres_store_errors_propagate():
    with patch(
        'saveup_pet.db.postgres_store.queries.upsert_pet_achievements',
        new=AsyncMock(side_effect=RuntimeError("Database pool not initialized"))
    ):
        with pytest.raises(RuntimeError):
            await PostgresPetStore().save_achievements("u1", Achievements())


@pytest.mark.asyncio
async def test_postgres_store_saves_update_in_one_call():
    timestamp = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    spend = GemTransaction(type=TransactionType.SPEND, amount=20, reason="FEED_PET", timestamp=timestamp)

    with patch('saveup_pet.db.postgres_store.queries.save_pet_update', new=AsyncMock()) as mock_save:
        await PostgresPetStore().save_pet_update("u1", PetState(gems=30), Achievements(goals_hit=1), [spend])

    user_id, state, achievements, transactions = mock_save.call_args[0]
    assert user_id == "u1"
    assert state["gems"] == 30
    assert achievements["goals_hit"] == 1
    assert transactions == [("spend", 20, "FEED_PET", timestamp)]


@pytest.mark.asyncio
async def test_postgres_store_update_without_achievements():
    with patch('saveup_pet.db.postgres_store.queries.save_pet_update', new=AsyncMock()) as mock_save:
        await PostgresPetStore().save_pet_update("u1", PetState())

    assert mock_save.call_args[0][2] is None
    assert mock_save.call_args[0][3] == []


# ============================================================================
# Atomic Updates (InMemoryPetStore)
# ============================================================================

class FlakyLedgerStore(InMemoryPetStore):
    """Fails on the nth gem transaction append"""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.appends = 0

    async def add_gem_transaction(self, user_id, transaction):
        self.appends += 1
        if self.appends == self.fail_on:
            raise ConnectionError("ledger unavailable")
        await super().add_gem_transaction(user_id, transaction)


def _earn(amount: int) -> GemTransaction:
    return GemTransaction(
        type=TransactionType.EARN,
        amount=amount,
        reason="DAILY_LOGIN",
        timestamp=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )


@pytest.mark.asyncio
async def test_memory_store_update_writes_everything():
    store = InMemoryPetStore()

    await store.save_pet_update("u1", PetState(gems=60), Achievements(streak_days=2), [_earn(10)])

    assert (await store.get_pet_state("u1")).gems == 60
    assert (await store.get_achievements("u1")).streak_days == 2
    assert len(await store.get_gem_transactions("u1")) == 1


@pytest.mark.asyncio
async def test_memory_store_update_rolls_back_on_failure():
    store = FlakyLedgerStore(fail_on=3)
    await store.save_pet_update("u1", PetState(gems=55), Achievements(), [_earn(5)])

    with pytest.raises(ConnectionError):
        await store.save_pet_update("u1", PetState(gems=75), Achievements(goals_hit=4), [_earn(10), _earn(10)])

    assert (await store.get_pet_state("u1")).gems == 55
    assert (await store.get_achievements("u1")).goals_hit == 0
    assert [t.amount for t in await store.get_gem_transactions("u1")] == [5]


@pytest.mark.asyncio
async def test_memory_store_update_for_new_user_leaves_nothing_on_failure():
    store = FlakyLedgerStore(fail_on=1)

    with pytest.raises(ConnectionError):
        await store.save_pet_update("new", PetState(), Achievements(), [_earn(5)])

    assert await store.get_pet_state("new") is None
    assert await store.get_achievements("new") is None
    assert await store.list_user_ids() == []
