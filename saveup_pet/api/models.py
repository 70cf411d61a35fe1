"""Pydantic models for API request/response validation"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from saveup_pet.models.pet import GemTransaction, PetConfig


class SelectPetRequest(BaseModel):
    """Request to switch the active pet"""
    pet_id: str = Field(..., description="Pet id, e.g. 'doge'")


class UnlockPetRequest(BaseModel):
    """Request to unlock a pet"""
    pet_id: str = Field(..., description="Pet id to unlock")


class EarnGemsRequest(BaseModel):
    """Request to award gems"""
    reason: str = Field(..., description="Reason code, e.g. 'DAILY_LOGIN'")
    amount: Optional[int] = Field(
        default=None,
        description="Explicit amount (overrides the reason's table value)"
    )


class SpendGemsRequest(BaseModel):
    """Request to spend gems"""
    amount: int = Field(..., description="Gems to spend (positive)")
    reason: str = Field(..., description="What the gems were spent on")


class BuyAccessoryRequest(BaseModel):
    """Request to buy an accessory"""
    accessory_id: str = Field(..., min_length=1, description="Accessory identifier")
    cost: int = Field(..., description="Price in gems (positive)")


class SpendingMoodRequest(BaseModel):
    """Today's spending against the daily budget"""
    daily_spent: float = Field(..., ge=0, description="Amount spent today")
    daily_budget: float = Field(..., description="Daily budget (<= 0 means no budget)")


class AddXPRequest(BaseModel):
    """Request to add XP"""
    amount: int = Field(..., ge=0, description="XP to add")


class AchievementsUpdateRequest(BaseModel):
    """Partial achievement counter update"""
    updates: Dict[str, int] = Field(
        ...,
        description="Counter name -> new value (total_saved, streak_days, ...)"
    )


class PetCatalogResponse(BaseModel):
    """All pets in the catalog"""
    pets: List[PetConfig]


class TransactionListResponse(BaseModel):
    """Gem transactions, newest first"""
    user_id: str
    transactions: List[GemTransaction]


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Overall health status")
    storage: str = Field(..., description="Storage backend in use")
    decay_scheduler: str = Field(..., description="Decay scheduler status")
