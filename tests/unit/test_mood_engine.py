"""Unit tests for the mood engine (saveup_pet/pet/mood_engine.py)"""
import random

import pytest

from saveup_pet.models.pet import MoodState, PetType
from saveup_pet.pet.mood_engine import (
    calculate_mood_after_feeding,
    calculate_mood_after_goal,
    calculate_mood_decay,
    calculate_mood_from_spending,
    clamp_stat,
    get_mood_animation,
    get_mood_filter,
    mood_from_levels,
)


# ============================================================================
# Mood From Levels
# ============================================================================

@pytest.mark.parametrize("happiness,energy,expected", [
    (80, 100, MoodState.HAPPY),
    (71, 50, MoodState.HAPPY),
    (70, 50, MoodState.NEUTRAL),
    (41, 50, MoodState.NEUTRAL),
    (40, 50, MoodState.SAD),
    (21, 50, MoodState.SAD),
    (20, 50, MoodState.SLEEPING),
    (100, 19, MoodState.SLEEPING),
])
def test_mood_from_levels(happiness, energy, expected):
    assert mood_from_levels(happiness, energy) == expected


def test_clamp_stat():
    assert clamp_stat(-5) == 0
    assert clamp_stat(105) == 100
    assert clamp_stat(42) == 42


# ============================================================================
# Spending
# ============================================================================

def test_under_budget_recomputes_mood_from_happiness():
    """Regression: ratio 0.5 is the 'happy' band but happiness 60 is neutral"""
    change = calculate_mood_from_spending(50, 100, 50, 100, PetType.FINNY)

    assert change.happiness_change == 10
    assert change.new_happiness == 60
    assert change.new_mood == MoodState.NEUTRAL


def test_under_budget_happy():
    change = calculate_mood_from_spending(50, 100, 80, 100, PetType.DOGE)

    assert change.new_happiness == 90
    assert change.new_energy == 95
    assert change.new_mood == MoodState.HAPPY


def test_watching_band_has_no_happiness_change():
    change = calculate_mood_from_spending(80, 100, 80, 100, PetType.DOGE)

    assert change.happiness_change == 0
    assert change.energy_change == -5
    assert "watching" in change.message


def test_over_budget_band():
    change = calculate_mood_from_spending(100, 100, 80, 100, PetType.DOGE)
    assert change.happiness_change == -15
    assert change.new_happiness == 65


def test_way_over_budget_band():
    change = calculate_mood_from_spending(150, 100, 80, 100, PetType.DOGE)
    assert change.happiness_change == -25
    assert change.new_mood == MoodState.NEUTRAL


def test_zero_budget_counts_as_under_budget():
    change = calculate_mood_from_spending(500, 0, 50, 100, PetType.FINNY)
    assert change.happiness_change == 10


def test_meow_anxiety_when_over_budget():
    change = calculate_mood_from_spending(110, 100, 80, 100, PetType.MEOW)

    assert change.happiness_change == -20
    assert "anxiety" in change.message


def test_meow_not_anxious_at_budget():
    change = calculate_mood_from_spending(100, 100, 80, 100, PetType.MEOW)
    assert change.happiness_change == -15


def test_chill_scales_change_toward_zero():
    over = calculate_mood_from_spending(110, 100, 80, 100, PetType.CHILL)
    under = calculate_mood_from_spending(10, 100, 80, 100, PetType.CHILL)
    way_over = calculate_mood_from_spending(200, 100, 80, 100, PetType.CHILL)

    assert over.happiness_change == -10
    assert under.happiness_change == 7
    assert way_over.happiness_change == -17
    assert "Chill says" in over.message


def test_dragon_guards_from_eighty_percent():
    guarded = calculate_mood_from_spending(85, 100, 80, 100, PetType.DRAGON)
    relaxed = calculate_mood_from_spending(75, 100, 80, 100, PetType.DRAGON)

    assert guarded.happiness_change == -10
    assert "treasure" in guarded.message
    assert relaxed.happiness_change == 0


def test_exhausted_pet_sleeps():
    change = calculate_mood_from_spending(10, 100, 90, 22, PetType.DOGE)

    assert change.new_energy == 17
    assert change.new_mood == MoodState.SLEEPING
    assert "exhausted" in change.message


def test_stats_stay_in_range_for_random_sequences():
    rng = random.Random(1234)
    pets = list(PetType)

    for _ in range(50):
        happiness, energy = rng.randint(0, 100), rng.randint(0, 100)
        for _ in range(40):
            pet = rng.choice(pets)
            action = rng.randrange(4)
            if action == 0:
                change = calculate_mood_from_spending(
                    rng.uniform(0, 5000), rng.uniform(-100, 3000), happiness, energy, pet
                )
            elif action == 1:
                change = calculate_mood_after_feeding(happiness, energy, pet)
            elif action == 2:
                change = calculate_mood_after_goal(pet, happiness, energy)
            else:
                change = calculate_mood_decay(rng.uniform(0, 100), happiness, energy)

            happiness, energy = change.new_happiness, change.new_energy
            assert 0 <= happiness <= 100
            assert 0 <= energy <= 100


# ============================================================================
# Feeding, Goals, Decay
# ============================================================================

def test_feeding_excites_and_clamps():
    change = calculate_mood_after_feeding(80, 100, PetType.MEOW)

    assert change.new_mood == MoodState.EXCITED
    assert change.new_happiness == 100
    assert change.new_energy == 100
    assert "Meow" in change.message


def test_goal_excites():
    change = calculate_mood_after_goal(PetType.DOGE, 50, 50)

    assert change.new_mood == MoodState.EXCITED
    assert change.new_happiness == 80
    assert change.new_energy == 60


@pytest.mark.parametrize("hours,happiness,energy,mood", [
    (49, 50, 60, MoodState.SLEEPING),
    (30, 65, 80, MoodState.SAD),
    (13, 75, 90, MoodState.NEUTRAL),
])
def test_decay_bands(hours, happiness, energy, mood):
    change = calculate_mood_decay(hours, 80, 100)

    assert change.new_happiness == happiness
    assert change.new_energy == energy
    assert change.new_mood == mood


def test_decay_band_boundaries_are_exclusive():
    assert calculate_mood_decay(48, 80, 100).new_mood == MoodState.SAD
    assert calculate_mood_decay(24, 80, 100).new_mood == MoodState.NEUTRAL
    assert calculate_mood_decay(24, 80, 100).happiness_change == -5


def test_no_decay_when_recently_fed():
    change = calculate_mood_decay(6, 80, 100)

    assert change.happiness_change == 0
    assert change.energy_change == 0
    assert change.new_happiness == 80


def test_mood_display_tables_cover_every_mood():
    for mood in MoodState:
        assert get_mood_animation(mood)
        assert get_mood_filter(mood)
    assert get_mood_animation("excited") == "jump"
