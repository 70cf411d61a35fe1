"""Unit tests for the mood decay scheduler (saveup_pet/scheduler/decay_scheduler.py)"""
import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from saveup_pet.models.pet import MoodState
from saveup_pet.scheduler.decay_scheduler import PetDecayScheduler
from tests.helpers import seed_state


@pytest.mark.asyncio
async def test_run_once_decays_hungry_pets(service, store, clock):
    await seed_state(store, "hungry", last_fed=clock.now - timedelta(hours=50))
    await seed_state(store, "fed", last_fed=clock.now - timedelta(hours=2))
    scheduler = PetDecayScheduler(service, interval_seconds=60)

    decayed = await scheduler.run_once()

    assert decayed == 1
    hungry = await store.get_pet_state("hungry")
    assert hungry.mood_state == MoodState.SLEEPING
    assert hungry.happiness == 50


@pytest.mark.asyncio
async def test_start_and_stop(service):
    scheduler = PetDecayScheduler(service, interval_seconds=3600)

    await scheduler.start()
    assert scheduler.is_running
    await asyncio.sleep(0)

    await scheduler.stop()
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_start_twice_is_noop(service):
    scheduler = PetDecayScheduler(service, interval_seconds=3600)

    await scheduler.start()
    first_task = scheduler._task
    await scheduler.start()

    assert scheduler._task is first_task
    await scheduler.stop()


@pytest.mark.asyncio
async def test_stop_when_not_running(service):
    await PetDecayScheduler(service).stop()


@pytest.mark.asyncio
async def test_loop_survives_sweep_errors(service):
    scheduler = PetDecayScheduler(service, interval_seconds=0)
    sweep = AsyncMock(side_effect=[RuntimeError("db down"), 0, 0, 0, 0, 0, 0, 0, 0, 0])

    with patch('saveup_pet.scheduler.decay_scheduler.run_decay_sweep', sweep):
        await scheduler.start()
        for _ in range(5):
            await asyncio.sleep(0)
        await scheduler.stop()

    assert sweep.await_count >= 2
