"""
Pet Catalog

Static registry of every pet: identity, personality, unlock rule, bonus
description and display gradient. Never mutated at runtime.

Starters (always unlocked): Meow, Doge, Finny, Chill
Unlockable:
- Sensei: save 50,000 total
- Zoom: 30-day tracking streak
- Lazy: 5 automated expenses
- Trash Panda: 20 challenges completed
- Dragon: 10 savings goals hit
- Mystic: save 100,000 total
"""

from typing import List, Union

from saveup_pet.exceptions import PetNotFoundError
from saveup_pet.models.pet import PetConfig, PetType, UnlockRequirement, UnlockRequirementType

DEFAULT_PET = PetType.MEOW


def _pet(
    pet_id: PetType,
    name: str,
    emoji: str,
    personality: str,
    description: str,
    requirement_type: UnlockRequirementType,
    requirement_value: int,
    bonus_type: str,
    bonus_description: str,
    gradient: tuple[str, str],
) -> PetConfig:
    return PetConfig(
        id=pet_id,
        name=name,
        emoji=emoji,
        personality=personality,
        description=description,
        unlock_requirement=UnlockRequirement(type=requirement_type, value=requirement_value),
        bonus_type=bonus_type,
        bonus_description=bonus_description,
        gradient=gradient,
    )


PET_CONFIGS: dict[PetType, PetConfig] = {
    PetType.MEOW: _pet(
        PetType.MEOW, "Meow", "🐱", "Anxious Saver",
        'Your worried friend who checks prices 10 times. "Are you SURE you need that?" energy.',
        UnlockRequirementType.STARTER, 0,
        "Anti-impulse", "+20% gems for resisting impulse buys",
        ("#ec4899", "#f43f5e"),
    ),
    PetType.DOGE: _pet(
        PetType.DOGE, "Doge", "🐶", "Loyal Budgeter",
        "Much save, very budget, wow. Supportive golden retriever energy.",
        UnlockRequirementType.STARTER, 0,
        "Consistency", "2x gems on 7-day streaks",
        ("#f59e0b", "#f97316"),
    ),
    PetType.FINNY: _pet(
        PetType.FINNY, "Finny", "🦊", "Smart Spender",
        "The friend who finds all the deals. \"Actually, there's a cheaper option...\"",
        UnlockRequirementType.STARTER, 0,
        "Optimization", "Daily spending tips & alternatives",
        ("#8b5cf6", "#7c3aed"),
    ),
    PetType.CHILL: _pet(
        PetType.CHILL, "Chill", "🐻", "Long-term Planner",
        '"It\'s about the journey" slow-life advocate. Monk mode, delayed gratification king.',
        UnlockRequirementType.STARTER, 0,
        "Long-term", "Calmer reactions to overspending",
        ("#06b6d4", "#0891b2"),
    ),
    PetType.SENSEI: _pet(
        PetType.SENSEI, "Sensei", "🦉", "Wise Mentor",
        "Financial literacy king. Drops knowledge bombs about investing.",
        UnlockRequirementType.TOTAL_SAVED, 50000,
        "Education", 'Teaches you about tax, investments. "Did you know?" daily facts',
        ("#10b981", "#059669"),
    ),
    PetType.ZOOM: _pet(
        PetType.ZOOM, "Zoom", "🐰", "Fast-paced Tracker",
        'Chaos organized. "Quick! Log that expense NOW!"',
        UnlockRequirementType.STREAK_DAYS, 30,
        "Efficiency", "Instant reminders, speed tracking rewards. 1-click categories",
        ("#3b82f6", "#2563eb"),
    ),
    PetType.LAZY: _pet(
        PetType.LAZY, "Lazy", "🐼", "Automation King",
        'Work smarter not harder. "Why do manually what tech can do?"',
        UnlockRequirementType.AUTOMATED_EXPENSES, 5,
        "Passive", "Auto-tracking bonus gems",
        ("#14b8a6", "#0d9488"),
    ),
    PetType.TRASHPANDA: _pet(
        PetType.TRASHPANDA, "Trash Panda", "🦝", "Budget Hacker",
        "Chaotic good, dumpster-diver-but-make-it-cute. \"One person's expense is my treasure\"",
        UnlockRequirementType.CHALLENGES_COMPLETED, 20,
        "Resourceful", 'Extra gems for low-budget meals/thrift finds. "Trash to Treasure" challenges',
        ("#64748b", "#475569"),
    ),
    PetType.DRAGON: _pet(
        PetType.DRAGON, "Dragon", "🐉", "Wealth Hoarder",
        'Smaug energy. "A dragon sleeps on a pile of savings"',
        UnlockRequirementType.GOALS_HIT, 10,
        "Max Saver", "3x gems for staying under budget. Treasure vault visualization",
        ("#ef4444", "#dc2626"),
    ),
    PetType.MYSTIC: _pet(
        PetType.MYSTIC, "Mystic", "🦄", "Financial Freedom",
        "Legendary. Financial freedom achieved, zen master. Only 1% unlock this.",
        UnlockRequirementType.TOTAL_SAVED, 100000,
        "Ultimate", "+50% gems on everything. Rainbow trail effects",
        ("#a855f7", "#ec4899"),
    ),
}

STARTER_PETS: List[PetType] = [
    pet_id for pet_id, config in PET_CONFIGS.items()
    if config.unlock_requirement.type == UnlockRequirementType.STARTER
]
UNLOCKABLE_PETS: List[PetType] = [pet_id for pet_id in PET_CONFIGS if pet_id not in STARTER_PETS]


def resolve_pet_type(pet_id: Union[PetType, str]) -> PetType:
    """Validate a pet id against the catalog enumeration"""
    try:
        return PetType(pet_id)
    except ValueError:
        raise PetNotFoundError(pet_id, operation="resolve_pet_type") from None


def get_pet_config(pet_id: Union[PetType, str]) -> PetConfig:
    """Look up a catalog entry, raising PetNotFoundError for unknown ids"""
    return PET_CONFIGS[resolve_pet_type(pet_id)]


def get_all_pets() -> List[PetConfig]:
    return list(PET_CONFIGS.values())


def get_starter_pets() -> List[PetConfig]:
    return [PET_CONFIGS[pet_id] for pet_id in STARTER_PETS]


def get_unlockable_pets() -> List[PetConfig]:
    return [PET_CONFIGS[pet_id] for pet_id in UNLOCKABLE_PETS]
