"""
Pet reward engine for SaveUp

This package holds the pure rules of the virtual-pet system:
- Pet catalog (starters and unlockable pets)
- Gem economy and XP/leveling
- Mood engine (spending, feeding, goals, neglect)
- Unlock evaluation against achievement counters

State changes are coordinated by saveup_pet.services.pet_service.PetService.
"""

from saveup_pet.pet.pet_config import get_pet_config, get_all_pets, get_starter_pets, get_unlockable_pets
from saveup_pet.pet.gem_calculator import (
    calculate_gems_earned,
    calculate_xp_earned,
    calculate_level,
    level_for_xp,
    calculate_xp_for_next_level,
)
from saveup_pet.pet.mood_engine import (
    calculate_mood_from_spending,
    calculate_mood_after_feeding,
    calculate_mood_after_goal,
    calculate_mood_decay,
)
from saveup_pet.pet.unlock_system import (
    can_unlock_pet,
    get_unlock_progress,
    get_all_unlock_statuses,
    get_newly_unlockable_pets,
)

__all__ = [
    "get_pet_config",
    "get_all_pets",
    "get_starter_pets",
    "get_unlockable_pets",
    "calculate_gems_earned",
    "calculate_xp_earned",
    "calculate_level",
    "level_for_xp",
    "calculate_xp_for_next_level",
    "calculate_mood_from_spending",
    "calculate_mood_after_feeding",
    "calculate_mood_after_goal",
    "calculate_mood_decay",
    "can_unlock_pet",
    "get_unlock_progress",
    "get_all_unlock_statuses",
    "get_newly_unlockable_pets",
]
