"""
Unlock System

Evaluates pet unlock requirements against the user's achievement counters.
Requirement kinds other than 'starter' name the counter they compare against;
an unrecognised kind never unlocks (fails closed).
"""

from typing import Dict, Iterable, List, Optional

from saveup_pet.models.pet import (
    Achievements,
    PetConfig,
    PetType,
    UnlockRequirementType,
    UnlockStatus,
)
from saveup_pet.pet.pet_config import PET_CONFIGS, get_pet_config

REQUIREMENT_COUNTERS: Dict[UnlockRequirementType, str] = {
    UnlockRequirementType.TOTAL_SAVED: "total_saved",
    UnlockRequirementType.STREAK_DAYS: "streak_days",
    UnlockRequirementType.AUTOMATED_EXPENSES: "automated_expenses",
    UnlockRequirementType.CHALLENGES_COMPLETED: "challenges_completed",
    UnlockRequirementType.GOALS_HIT: "goals_hit",
}

REQUIREMENT_DESCRIPTIONS: Dict[UnlockRequirementType, str] = {
    UnlockRequirementType.STARTER: "Available from start",
    UnlockRequirementType.TOTAL_SAVED: "Save ৳{value:,} total",
    UnlockRequirementType.STREAK_DAYS: "Maintain {value}-day tracking streak",
    UnlockRequirementType.AUTOMATED_EXPENSES: "Automate {value} recurring expenses",
    UnlockRequirementType.CHALLENGES_COMPLETED: "Complete {value} daily challenges",
    UnlockRequirementType.GOALS_HIT: "Achieve {value} savings goals",
}


def _counter_value(config: PetConfig, achievements: Achievements) -> Optional[int]:
    counter = REQUIREMENT_COUNTERS.get(config.unlock_requirement.type)
    if counter is None:
        return None
    return getattr(achievements, counter)


def can_unlock_pet(pet_type: PetType, achievements: Achievements) -> bool:
    """Check whether a pet's unlock requirement is satisfied"""
    config = get_pet_config(pet_type)
    if config.unlock_requirement.type == UnlockRequirementType.STARTER:
        return True

    current = _counter_value(config, achievements)
    if current is None:
        return False
    return current >= config.unlock_requirement.value


def get_unlock_progress(pet_type: PetType, achievements: Achievements) -> int:
    """Unlock progress for a pet as an integer percentage (0-100)"""
    config = get_pet_config(pet_type)
    if config.unlock_requirement.type == UnlockRequirementType.STARTER:
        return 100

    current = _counter_value(config, achievements) or 0
    target = config.unlock_requirement.value
    if target <= 0:
        return 100
    return min(100, (current * 100) // target)


def describe_requirement(config: PetConfig) -> str:
    template = REQUIREMENT_DESCRIPTIONS.get(config.unlock_requirement.type, "Unavailable")
    return template.format(value=config.unlock_requirement.value)


def get_all_unlock_statuses(unlocked_pets: Iterable[PetType], achievements: Achievements) -> List[UnlockStatus]:
    """Unlock status for every catalog pet, in catalog order"""
    unlocked = set(unlocked_pets)
    return [
        UnlockStatus(
            pet_type=pet_type,
            is_unlocked=pet_type in unlocked,
            progress=get_unlock_progress(pet_type, achievements),
            requirement=describe_requirement(config),
            requirement_met=can_unlock_pet(pet_type, achievements),
        )
        for pet_type, config in PET_CONFIGS.items()
    ]


def get_next_unlockable_pet(unlocked_pets: Iterable[PetType], achievements: Achievements) -> Optional[UnlockStatus]:
    """
    Locked pet closest to unlocking (highest progress, catalog order on ties)

    Pets whose requirement is already met are skipped since they unlock
    automatically on the next achievement update.
    """
    candidates = [
        status for status in get_all_unlock_statuses(unlocked_pets, achievements)
        if not status.is_unlocked and not status.requirement_met
    ]
    if not candidates:
        return None
    # sorted() is stable, so catalog order breaks ties
    return sorted(candidates, key=lambda status: status.progress, reverse=True)[0]


def get_newly_unlockable_pets(unlocked_pets: Iterable[PetType], achievements: Achievements) -> List[PetType]:
    """Pets not yet unlocked whose requirement is now satisfied, in catalog order"""
    unlocked = set(unlocked_pets)
    return [
        pet_type for pet_type in PET_CONFIGS
        if pet_type not in unlocked and can_unlock_pet(pet_type, achievements)
    ]
