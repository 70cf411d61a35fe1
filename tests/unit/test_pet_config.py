"""Unit tests for the pet catalog (saveup_pet/pet/pet_config.py)"""
import pytest

from saveup_pet.exceptions import PetNotFoundError
from saveup_pet.models.pet import PetType, UnlockRequirementType
from saveup_pet.pet.pet_config import (
    DEFAULT_PET,
    PET_CONFIGS,
    get_all_pets,
    get_pet_config,
    get_starter_pets,
    get_unlockable_pets,
    resolve_pet_type,
)


def test_catalog_has_every_pet_type():
    assert set(PET_CONFIGS) == set(PetType)
    assert len(get_all_pets()) == 10


def test_starters_and_unlockables_partition_catalog():
    starters = [pet.id for pet in get_starter_pets()]
    unlockables = [pet.id for pet in get_unlockable_pets()]

    assert starters == [PetType.MEOW, PetType.DOGE, PetType.FINNY, PetType.CHILL]
    assert len(unlockables) == 6
    assert not set(starters) & set(unlockables)


def test_config_ids_match_keys():
    for pet_id, config in PET_CONFIGS.items():
        assert config.id == pet_id


def test_get_pet_config_accepts_string_id():
    config = get_pet_config("dragon")

    assert config.name == "Dragon"
    assert config.unlock_requirement.type == UnlockRequirementType.GOALS_HIT
    assert config.unlock_requirement.value == 10


def test_unknown_pet_raises_not_found():
    with pytest.raises(PetNotFoundError) as exc_info:
        get_pet_config("griffin")

    assert exc_info.value.context["pet_id"] == "griffin"


def test_resolve_pet_type():
    assert resolve_pet_type("trashpanda") == PetType.TRASHPANDA
    assert resolve_pet_type(PetType.ZOOM) == PetType.ZOOM


def test_default_pet_is_starter():
    assert PET_CONFIGS[DEFAULT_PET].unlock_requirement.type == UnlockRequirementType.STARTER


def test_configs_are_frozen():
    with pytest.raises(Exception):
        PET_CONFIGS[PetType.MEOW].name = "Tom"
