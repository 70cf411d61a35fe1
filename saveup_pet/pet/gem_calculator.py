"""
Gem and XP Rules

Pure functions for the gem economy and pet leveling.

Gem Earning (base amounts):
- Track expense: 5 (WhatsApp: 8, SMS auto-track: 5)
- Daily login: 10
- Under budget: 20
- Weekly streak: 50
- Goal achieved: 100
- Complete profile: 50
- Challenge complete: 30
- Resist impulse: 15

Pet Bonuses (each step floors to an integer):
- Meow: +20% on RESIST_IMPULSE
- Doge: 2x on WEEKLY_STREAK
- Dragon: 3x on UNDER_BUDGET
- Mystic: +50% on everything, applied after any reason-specific bonus

Leveling Curve:
- Level 1 at 100 XP, level 2 at 250, level 3 at 450, ...
- Each level's increment is 50 XP larger than the previous one
- Stored pet level never drops below 1
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple, Union

from saveup_pet.models.pet import LevelProgress, PetType


@dataclass(frozen=True)
class GemEarningReason:
    """Base gem reward for a reason code"""
    type: str
    base_amount: int
    description: str


GEM_EARNING_RULES: Dict[str, GemEarningReason] = {
    rule.type: rule
    for rule in (
        GemEarningReason("TRACK_EXPENSE", 5, "Tracked an expense"),
        GemEarningReason("DAILY_LOGIN", 10, "Daily login bonus"),
        GemEarningReason("UNDER_BUDGET", 20, "Stayed under daily budget"),
        GemEarningReason("WEEKLY_STREAK", 50, "7-day tracking streak"),
        GemEarningReason("GOAL_ACHIEVED", 100, "Savings goal achieved"),
        GemEarningReason("COMPLETE_PROFILE", 50, "Completed profile setup"),
        GemEarningReason("WHATSAPP_TRACK", 8, "Tracked via WhatsApp bot"),
        GemEarningReason("SMS_AUTO_TRACK", 5, "SMS auto-tracked"),
        GemEarningReason("CHALLENGE_COMPLETE", 30, "Daily challenge completed"),
        GemEarningReason("RESIST_IMPULSE", 15, "Resisted impulse buy"),
    )
}

# Level-up bonus is awarded with an explicit amount, never looked up above
LEVEL_UP_REASON = "LEVEL_UP"
LEVEL_UP_GEMS_PER_LEVEL = 20

GEM_SPENDING_RULES: Dict[str, int] = {
    "FEED_PET": 20,
    "ACCESSORY_BASIC": 50,
    "ACCESSORY_PREMIUM": 100,
    "ACCESSORY_LEGENDARY": 500,
    "CHANGE_PET": 200,
    "UNLOCK_PET_EARLY": 2000,
    "XP_BOOSTER": 150,
    "ENVIRONMENT": 300,
    "ANIMATION": 200,
}

# Multipliers as (numerator, denominator) so bonuses stay in integer arithmetic
Multiplier = Tuple[int, int]

PET_REASON_BONUSES: Dict[PetType, Dict[str, Multiplier]] = {
    PetType.MEOW: {"RESIST_IMPULSE": (6, 5)},
    PetType.DOGE: {"WEEKLY_STREAK": (2, 1)},
    PetType.DRAGON: {"UNDER_BUDGET": (3, 1)},
}

PET_GLOBAL_BONUSES: Dict[PetType, Multiplier] = {
    PetType.MYSTIC: (3, 2),
}

MAX_XP_PER_EXPENSE = 50
XP_PER_CURRENCY_UNIT = 10
FIRST_LEVEL_XP = 100
LEVEL_XP_STEP = 50


def _apply_multiplier(amount: int, multiplier: Multiplier) -> int:
    numerator, denominator = multiplier
    return (amount * numerator) // denominator


def calculate_gems_earned(reason: str, current_pet: Union[PetType, str], streak_days: int = 0) -> int:
    """
    Calculate gems earned for a reason code, including the current pet's bonus

    Args:
        reason: Reason code (e.g. 'TRACK_EXPENSE')
        current_pet: Active pet
        streak_days: Current tracking streak (reserved for streak-scaled bonuses)

    Returns:
        Non-negative gem amount; 0 for unknown reason codes
    """
    rule = GEM_EARNING_RULES.get(reason)
    if rule is None:
        return 0

    pet = PetType(current_pet)
    amount = rule.base_amount

    reason_bonus = PET_REASON_BONUSES.get(pet, {}).get(reason)
    if reason_bonus:
        amount = _apply_multiplier(amount, reason_bonus)

    global_bonus = PET_GLOBAL_BONUSES.get(pet)
    if global_bonus:
        amount = _apply_multiplier(amount, global_bonus)

    return max(0, amount)


def calculate_xp_earned(expense_amount: float) -> int:
    """1 XP per 10 currency units tracked, max 50 XP per expense"""
    if expense_amount <= 0:
        return 0
    return min(math.floor(expense_amount / XP_PER_CURRENCY_UNIT), MAX_XP_PER_EXPENSE)


def _level_thresholds():
    """Yield cumulative XP thresholds: 100, 250, 450, 700, ..."""
    threshold = 0
    increment = FIRST_LEVEL_XP
    while True:
        threshold += increment
        yield threshold
        increment += LEVEL_XP_STEP


def calculate_level(xp: int) -> int:
    """Count of level thresholds passed (0 XP -> level 0)"""
    level = 0
    for threshold in _level_thresholds():
        if xp < threshold:
            return level
        level += 1


def level_for_xp(xp: int) -> int:
    """Stored pet level: raw level with a floor of 1"""
    return max(1, calculate_level(xp))


def xp_required_for_level(level: int) -> int:
    """Cumulative XP needed to reach a level (level 0 needs 0)"""
    if level <= 0:
        return 0
    for reached, threshold in enumerate(_level_thresholds(), start=1):
        if reached == level:
            return threshold


def calculate_xp_for_next_level(current_xp: int) -> LevelProgress:
    """
    Calculate XP standing relative to the next stored level

    Returns:
        LevelProgress with the current level, the cumulative XP threshold of
        the next level and how much XP is still missing
    """
    level = level_for_xp(current_xp)
    next_threshold = xp_required_for_level(level + 1)
    return LevelProgress(
        current_xp=current_xp,
        level=level,
        next_level=level + 1,
        xp_for_next_level=next_threshold,
        xp_to_next_level=max(0, next_threshold - current_xp),
    )


def calculate_level_up_bonus(new_level: int) -> int:
    return new_level * LEVEL_UP_GEMS_PER_LEVEL


def get_spending_cost(item: str) -> int:
    """Fixed gem cost of a purchasable item (KeyError for unknown items)"""
    return GEM_SPENDING_RULES[item]
