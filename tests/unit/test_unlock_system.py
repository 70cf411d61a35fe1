"""Unit tests for pet unlock evaluation (saveup_pet/pet/unlock_system.py)"""
import pytest

from saveup_pet.models.pet import Achievements, PetType
from saveup_pet.pet.pet_config import STARTER_PETS
from saveup_pet.pet.unlock_system import (
    can_unlock_pet,
    describe_requirement,
    get_all_unlock_statuses,
    get_newly_unlockable_pets,
    get_next_unlockable_pet,
    get_unlock_progress,
)
from saveup_pet.pet.pet_config import get_pet_config


# ============================================================================
# can_unlock_pet
# ============================================================================

def test_starters_always_unlockable():
    for pet in STARTER_PETS:
        assert can_unlock_pet(pet, Achievements())


@pytest.mark.parametrize("pet,counter,threshold", [
    (PetType.SENSEI, "total_saved", 50000),
    (PetType.ZOOM, "streak_days", 30),
    (PetType.LAZY, "automated_expenses", 5),
    (PetType.TRASHPANDA, "challenges_completed", 20),
    (PetType.DRAGON, "goals_hit", 10),
    (PetType.MYSTIC, "total_saved", 100000),
])
def test_requirement_threshold_is_inclusive(pet, counter, threshold):
    assert not can_unlock_pet(pet, Achievements(**{counter: threshold - 1}))
    assert can_unlock_pet(pet, Achievements(**{counter: threshold}))


# ============================================================================
# Progress
# ============================================================================

def test_progress_is_integer_percentage():
    assert get_unlock_progress(PetType.SENSEI, Achievements(total_saved=12345)) == 24
    assert get_unlock_progress(PetType.ZOOM, Achievements(streak_days=15)) == 50


def test_progress_caps_at_100():
    assert get_unlock_progress(PetType.LAZY, Achievements(automated_expenses=50)) == 100


def test_progress_for_starter_is_complete():
    assert get_unlock_progress(PetType.MEOW, Achievements()) == 100


def test_describe_requirement():
    assert describe_requirement(get_pet_config(PetType.SENSEI)) == "Save ৳50,000 total"
    assert describe_requirement(get_pet_config(PetType.ZOOM)) == "Maintain 30-day tracking streak"
    assert describe_requirement(get_pet_config(PetType.DOGE)) == "Available from start"


# ============================================================================
# Statuses
# ============================================================================

def test_all_statuses_follow_catalog_order():
    statuses = get_all_unlock_statuses(STARTER_PETS, Achievements())

    assert [s.pet_type for s in statuses] == list(PetType)
    assert all(s.is_unlocked for s in statuses[:4])
    assert not any(s.is_unlocked for s in statuses[4:])


def test_next_unlockable_pet_has_highest_progress():
    achievements = Achievements(streak_days=20, goals_hit=2)

    status = get_next_unlockable_pet(STARTER_PETS, achievements)

    assert status.pet_type == PetType.ZOOM
    assert status.progress == 66


def test_next_unlockable_pet_ties_use_catalog_order():
    status = get_next_unlockable_pet(STARTER_PETS, Achievements())
    assert status.pet_type == PetType.SENSEI


def test_next_unlockable_pet_none_when_everything_unlocked():
    assert get_next_unlockable_pet(list(PetType), Achievements()) is None


def test_newly_unlockable_pets_both_savings_tiers():
    newly = get_newly_unlockable_pets(STARTER_PETS, Achievements(total_saved=100000))
    assert newly == [PetType.SENSEI, PetType.MYSTIC]


def test_newly_unlockable_skips_already_unlocked():
    unlocked = [*STARTER_PETS, PetType.SENSEI]
    newly = get_newly_unlockable_pets(unlocked, Achievements(total_saved=100000))
    assert newly == [PetType.MYSTIC]
