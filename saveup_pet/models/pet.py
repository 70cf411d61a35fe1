"""Pet, achievement and gem transaction models"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PetType(str, Enum):
    """Catalog pet identifiers (declaration order is catalog order)"""
    MEOW = "meow"
    DOGE = "doge"
    FINNY = "finny"
    CHILL = "chill"
    SENSEI = "sensei"
    ZOOM = "zoom"
    LAZY = "lazy"
    TRASHPANDA = "trashpanda"
    DRAGON = "dragon"
    MYSTIC = "mystic"


class MoodState(str, Enum):
    """Pet mood states"""
    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    SLEEPING = "sleeping"
    EXCITED = "excited"


class UnlockRequirementType(str, Enum):
    """Kinds of unlock requirement; non-starter kinds name an achievement counter"""
    STARTER = "starter"
    TOTAL_SAVED = "total_saved"
    STREAK_DAYS = "streak_days"
    AUTOMATED_EXPENSES = "automated_expenses"
    CHALLENGES_COMPLETED = "challenges_completed"
    GOALS_HIT = "goals_hit"


class TransactionType(str, Enum):
    """Gem transaction direction"""
    EARN = "earn"
    SPEND = "spend"


class UnlockRequirement(BaseModel):
    """Threshold gating a non-starter pet"""
    model_config = ConfigDict(frozen=True)

    type: UnlockRequirementType
    value: int = Field(default=0, ge=0)


class PetConfig(BaseModel):
    """Static catalog entry"""
    model_config = ConfigDict(frozen=True)

    id: PetType
    name: str
    emoji: str
    personality: str
    description: str
    unlock_requirement: UnlockRequirement
    bonus_type: str
    bonus_description: str
    gradient: tuple[str, str]


class Achievements(BaseModel):
    """Cumulative progress counters that drive pet unlocks"""
    total_saved: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    automated_expenses: int = Field(default=0, ge=0)
    challenges_completed: int = Field(default=0, ge=0)
    goals_hit: int = Field(default=0, ge=0)


ACHIEVEMENT_COUNTERS: tuple[str, ...] = tuple(Achievements.model_fields)


class PetState(BaseModel):
    """Per-user pet record"""
    current_pet: PetType = PetType.MEOW
    gems: int = Field(default=50, ge=0)
    unlocked_pets: list[PetType] = Field(
        default_factory=lambda: [PetType.MEOW, PetType.DOGE, PetType.FINNY, PetType.CHILL]
    )
    accessories: list[str] = Field(default_factory=list)
    pet_level: int = Field(default=1, ge=1)
    pet_xp: int = Field(default=0, ge=0)
    last_fed: Optional[datetime] = None
    mood_state: MoodState = MoodState.HAPPY
    happiness: int = Field(default=80, ge=0, le=100)
    energy: int = Field(default=100, ge=0, le=100)

    @field_validator("unlocked_pets", "accessories")
    @classmethod
    def _dedupe(cls, value: list) -> list:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _check_invariants(self) -> "PetState":
        from saveup_pet.pet.gem_calculator import level_for_xp
        from saveup_pet.pet.pet_config import STARTER_PETS

        if not self.unlocked_pets:
            raise ValueError("unlocked_pets must not be empty")
        missing = [pet.value for pet in STARTER_PETS if pet not in self.unlocked_pets]
        if missing:
            raise ValueError(f"unlocked_pets is missing starter pets: {missing}")
        if self.current_pet not in self.unlocked_pets:
            raise ValueError(f"current_pet '{self.current_pet.value}' is not unlocked")
        expected_level = level_for_xp(self.pet_xp)
        if self.pet_level != expected_level:
            raise ValueError(f"pet_level {self.pet_level} does not match {self.pet_xp} XP (expected {expected_level})")
        return self

    def evolve(self, **changes: Any) -> "PetState":
        """Return a validated copy with the given fields replaced"""
        return PetState.model_validate({**self.model_dump(), **changes})


class GemTransaction(BaseModel):
    """Append-only gem ledger entry"""
    type: TransactionType
    amount: int = Field(..., gt=0)
    reason: str
    timestamp: datetime


class MoodChange(BaseModel):
    """Outcome of a mood engine rule"""
    new_mood: MoodState
    happiness_change: int
    energy_change: int
    new_happiness: int = Field(..., ge=0, le=100)
    new_energy: int = Field(..., ge=0, le=100)
    message: str = ""


class UnlockStatus(BaseModel):
    """Unlock standing of one catalog pet"""
    pet_type: PetType
    is_unlocked: bool
    progress: int = Field(..., ge=0, le=100)
    requirement: str
    requirement_met: bool


class LevelProgress(BaseModel):
    """XP position relative to the next level"""
    current_xp: int
    level: int
    next_level: int
    xp_for_next_level: int
    xp_to_next_level: int


class PetUpdate(BaseModel):
    """Result of a coordinator mutation, also pushed to subscribers"""
    user_id: str
    operation: str
    state: PetState
    achievements: Achievements
    message: str = ""
    gems_earned: int = 0
    gems_spent: int = 0
    xp_awarded: int = 0
    leveled_up: bool = False
    unlocked_pets: list[PetType] = Field(default_factory=list)
