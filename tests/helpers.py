"""Helper utilities for pet engine tests"""
from datetime import datetime, timedelta

from saveup_pet.models.pet import Achievements, PetState


class FakeClock:
    """Controllable clock for time-dependent coordinator behaviour"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


async def seed_state(store, user_id: str, **fields) -> PetState:
    """Persist a pet state with the given fields overriding defaults"""
    state = PetState(**fields)
    await store.save_pet_state(user_id, state)
    return state


async def seed_achievements(store, user_id: str, **counters) -> Achievements:
    achievements = Achievements(**counters)
    await store.save_achievements(user_id, achievements)
    return achievements
