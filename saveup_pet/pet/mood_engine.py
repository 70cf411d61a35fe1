"""
Mood Engine

Pure functions that turn spending behaviour, feeding, goals and neglect into
mood transitions. Happiness and energy are always clamped to 0-100 after the
change is added to the current value.

Spending bands (spent / budget):
- < 0.7: +10 happiness
- 0.7 - 0.9: no change
- 0.9 - 1.2: -15 happiness
- >= 1.2: -25 happiness
Every spending evaluation costs 5 energy.

Pet reactions (applied after the band, one modifier per pet):
- Meow: extra -5 when over budget (ratio > 1.0)
- Chill: scales the happiness change by 0.7, truncated toward zero
- Dragon: extra -10 once spending passes 80% of budget

Final mood comes from the clamped happiness, and energy below 20 always
puts the pet to sleep.
"""

import random
from typing import Callable, Dict, Optional, Tuple

from saveup_pet.models.pet import MoodChange, MoodState, PetType
from saveup_pet.pet.pet_config import get_pet_config

MIN_STAT = 0
MAX_STAT = 100
EXHAUSTED_ENERGY = 20
SPENDING_ENERGY_COST = -5

FEED_HAPPINESS = 20
FEED_ENERGY = 30
GOAL_HAPPINESS = 30
GOAL_ENERGY = 10

# (hours strictly above, happiness change, energy change, mood, message)
DECAY_BANDS: Tuple[Tuple[float, int, int, MoodState, str], ...] = (
    (48, -30, -40, MoodState.SLEEPING, "Your pet is starving and exhausted! Please feed them! 😭"),
    (24, -15, -20, MoodState.SAD, "Your pet is getting hungry... 🍽️"),
    (12, -5, -10, MoodState.NEUTRAL, "Your pet could use some food soon..."),
)

MOOD_ANIMATIONS: Dict[MoodState, str] = {
    MoodState.HAPPY: "bounce",
    MoodState.NEUTRAL: "idle",
    MoodState.SAD: "droop",
    MoodState.SLEEPING: "breathe",
    MoodState.EXCITED: "jump",
}

MOOD_FILTERS: Dict[MoodState, str] = {
    MoodState.HAPPY: "brightness(1.2) saturate(1.3)",
    MoodState.NEUTRAL: "none",
    MoodState.SAD: "grayscale(0.6) brightness(0.8)",
    MoodState.SLEEPING: "blur(1px) grayscale(0.8)",
    MoodState.EXCITED: "brightness(1.4) saturate(1.5)",
}

# (happiness_change, spending_ratio) -> (adjusted change, message override or None)
MoodModifier = Callable[[int, float], Tuple[int, Optional[str]]]


def _meow_modifier(happiness_change: int, ratio: float) -> Tuple[int, Optional[str]]:
    if ratio > 1.0:
        return happiness_change - 5, "Meow is having anxiety about your spending! 😱"
    return happiness_change, None


def _chill_modifier(happiness_change: int, ratio: float) -> Tuple[int, Optional[str]]:
    scaled = int(happiness_change * 7 / 10)
    if ratio > 1.0:
        return scaled, 'Chill says: "It\'s okay, just do better tomorrow" 🐻'
    return scaled, None


def _dragon_modifier(happiness_change: int, ratio: float) -> Tuple[int, Optional[str]]:
    if ratio > 0.8:
        return happiness_change - 10, "Dragon is guarding the treasure! STOP SPENDING! 🐉🔥"
    return happiness_change, None


PET_MOOD_MODIFIERS: Dict[PetType, MoodModifier] = {
    PetType.MEOW: _meow_modifier,
    PetType.CHILL: _chill_modifier,
    PetType.DRAGON: _dragon_modifier,
}


def clamp_stat(value: int) -> int:
    return max(MIN_STAT, min(MAX_STAT, value))


def mood_from_levels(happiness: int, energy: int) -> MoodState:
    """Derive resting mood from (already clamped) happiness and energy"""
    if energy < EXHAUSTED_ENERGY:
        return MoodState.SLEEPING
    if happiness > 70:
        return MoodState.HAPPY
    if happiness > 40:
        return MoodState.NEUTRAL
    if happiness > 20:
        return MoodState.SAD
    return MoodState.SLEEPING


def _spending_band(ratio: float, name: str, emoji: str) -> Tuple[int, str]:
    if ratio < 0.7:
        return 10, random.choice([
            f"{name} is proud of you! 🌟",
            f"Great job staying under budget! {emoji}",
            f"{name} is doing a happy dance! 💃",
            "Your savings game is strong today! 💪",
        ])
    if ratio < 0.9:
        return 0, f"{name} is watching your budget closely... 👀"
    if ratio < 1.2:
        return -15, random.choice([
            f"{name} is worried about your spending... 😰",
            f"Budget exceeded! {name} looks concerned.",
            f"{name} hopes you know what you're doing... 🤔",
        ])
    return -25, f"{name} is very worried! You're way over budget! 🚨"


def calculate_mood_from_spending(
    daily_spent: float,
    daily_budget: float,
    current_happiness: int,
    current_energy: int,
    pet_type: PetType
) -> MoodChange:
    """
    Calculate pet mood based on today's spending against the daily budget

    A non-positive budget counts as ratio 0 (nothing to compare against).
    """
    config = get_pet_config(pet_type)
    ratio = daily_spent / daily_budget if daily_budget > 0 else 0.0

    happiness_change, message = _spending_band(ratio, config.name, config.emoji)
    energy_change = SPENDING_ENERGY_COST

    modifier = PET_MOOD_MODIFIERS.get(config.id)
    if modifier:
        happiness_change, override = modifier(happiness_change, ratio)
        message = override or message

    new_happiness = clamp_stat(current_happiness + happiness_change)
    new_energy = clamp_stat(current_energy + energy_change)
    new_mood = mood_from_levels(new_happiness, new_energy)

    if new_energy < EXHAUSTED_ENERGY:
        message = f"{config.name} is exhausted and needs rest... 😴"
    elif new_mood == MoodState.SLEEPING:
        message = f"{config.name} is too sad and went to sleep... 😴"

    return MoodChange(
        new_mood=new_mood,
        happiness_change=happiness_change,
        energy_change=energy_change,
        new_happiness=new_happiness,
        new_energy=new_energy,
        message=message,
    )


def calculate_mood_after_feeding(current_happiness: int, current_energy: int, pet_type: PetType) -> MoodChange:
    """Feeding always excites the pet (+20 happiness, +30 energy)"""
    config = get_pet_config(pet_type)
    return MoodChange(
        new_mood=MoodState.EXCITED,
        happiness_change=FEED_HAPPINESS,
        energy_change=FEED_ENERGY,
        new_happiness=clamp_stat(current_happiness + FEED_HAPPINESS),
        new_energy=clamp_stat(current_energy + FEED_ENERGY),
        message=f"{config.name} loved the food! Yum! 😋",
    )


def calculate_mood_after_goal(pet_type: PetType, current_happiness: int, current_energy: int) -> MoodChange:
    """Goal completion excites the pet (+30 happiness, +10 energy)"""
    config = get_pet_config(pet_type)
    return MoodChange(
        new_mood=MoodState.EXCITED,
        happiness_change=GOAL_HAPPINESS,
        energy_change=GOAL_ENERGY,
        new_happiness=clamp_stat(current_happiness + GOAL_HAPPINESS),
        new_energy=clamp_stat(current_energy + GOAL_ENERGY),
        message=f"{config.name} is celebrating your goal! 🎉🎊",
    )


def calculate_mood_decay(hours_since_last_fed: float, current_happiness: int, current_energy: int) -> MoodChange:
    """
    Calculate mood decay for a pet that has not been fed

    Bands: >48h sleeping, >24h sad, >12h neutral with a small drop,
    otherwise no change.
    """
    for hours, happiness_change, energy_change, mood, message in DECAY_BANDS:
        if hours_since_last_fed > hours:
            return MoodChange(
                new_mood=mood,
                happiness_change=happiness_change,
                energy_change=energy_change,
                new_happiness=clamp_stat(current_happiness + happiness_change),
                new_energy=clamp_stat(current_energy + energy_change),
                message=message,
            )

    return MoodChange(
        new_mood=MoodState.NEUTRAL,
        happiness_change=0,
        energy_change=0,
        new_happiness=clamp_stat(current_happiness),
        new_energy=clamp_stat(current_energy),
        message="",
    )


def get_mood_animation(mood: MoodState) -> str:
    return MOOD_ANIMATIONS[MoodState(mood)]


def get_mood_filter(mood: MoodState) -> str:
    return MOOD_FILTERS[MoodState(mood)]
