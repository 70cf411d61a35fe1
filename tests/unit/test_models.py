"""Unit tests for Pydantic models"""
import pytest
from pydantic import ValidationError

from saveup_pet.models.pet import PetState, PetType


STARTERS = [PetType.MEOW, PetType.DOGE, PetType.FINNY, PetType.CHILL]


def test_pet_state_defaults():
    """Test PetState with defaults"""
    state = PetState()

    assert state.gems == 50
    assert state.pet_level == 1
    assert state.unlocked_pets == STARTERS


def test_unlocked_pets_are_deduplicated():
    state = PetState(unlocked_pets=[*STARTERS, PetType.MEOW])
    assert state.unlocked_pets == STARTERS


def test_current_pet_must_be_unlocked():
    with pytest.raises(ValidationError, match="not unlocked"):
        PetState(current_pet=PetType.DRAGON)


def test_starter_pets_cannot_be_missing():
    """A stored row without every starter pet is rejected"""
    with pytest.raises(ValidationError, match="missing starter pets"):
        PetState(unlocked_pets=[PetType.MEOW, PetType.DOGE])


@pytest.mark.parametrize("pet_xp,pet_level", [
    (0, 1),
    (249, 1),
    (250, 2),
    (460, 3),
])
def test_level_matching_xp_is_accepted(pet_xp, pet_level):
    state = PetState(pet_xp=pet_xp, pet_level=pet_level)
    assert state.pet_level == pet_level


@pytest.mark.parametrize("pet_xp,pet_level", [
    (0, 2),
    (460, 1),
    (250, 5),
])
def test_level_not_matching_xp_is_rejected(pet_xp, pet_level):
    with pytest.raises(ValidationError, match="does not match"):
        PetState(pet_xp=pet_xp, pet_level=pet_level)


def test_evolve_revalidates():
    state = PetState()

    with pytest.raises(ValidationError):
        state.evolve(pet_xp=500)

    evolved = state.evolve(pet_xp=500, pet_level=3)
    assert evolved.pet_level == 3
