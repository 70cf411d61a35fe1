"""API routes for the pet engine"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from saveup_pet.api.auth import ApiKeyScope, require_write_access, verify_api_key
from saveup_pet.api.middleware import limiter
from saveup_pet.api.models import (
    AchievementsUpdateRequest,
    AddXPRequest,
    BuyAccessoryRequest,
    EarnGemsRequest,
    HealthCheckResponse,
    PetCatalogResponse,
    SelectPetRequest,
    SpendGemsRequest,
    SpendingMoodRequest,
    TransactionListResponse,
    UnlockPetRequest,
)
from saveup_pet.exceptions import PetEngineError
from saveup_pet.models.pet import (
    Achievements,
    LevelProgress,
    PetConfig,
    PetState,
    PetUpdate,
    UnlockStatus,
)
from saveup_pet.pet.pet_config import get_all_pets, get_pet_config, resolve_pet_type
from saveup_pet.services.container import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


def _service():
    return get_container().pet_service


def _internal_error(operation: str, e: Exception) -> HTTPException:
    logger.error(f"Error in {operation}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error"
    )


# ==========================================
# Catalog
# ==========================================

@router.get("/api/v1/pets", response_model=PetCatalogResponse)
@limiter.limit("60/minute")
async def list_pets(request: Request, api_key: ApiKeyScope = Depends(verify_api_key)):
    """List every pet in the catalog, starters first"""
    return PetCatalogResponse(pets=get_all_pets())


@router.get("/api/v1/pets/{pet_id}", response_model=PetConfig)
@limiter.limit("60/minute")
async def get_pet(request: Request, pet_id: str, api_key: ApiKeyScope = Depends(verify_api_key)):
    return get_pet_config(resolve_pet_type(pet_id))


# ==========================================
# Read side
# ==========================================

@router.get("/api/v1/users/{user_id}/pet", response_model=PetState)
@limiter.limit("60/minute")
async def get_pet_state(request: Request, user_id: str, api_key: ApiKeyScope = Depends(verify_api_key)):
    """Get the user's pet state (created with defaults on first access)"""
    try:
        return await _service().get_pet_state(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("get_pet_state", e)


@router.get("/api/v1/users/{user_id}/achievements", response_model=Achievements)
@limiter.limit("60/minute")
async def get_achievements(request: Request, user_id: str, api_key: ApiKeyScope = Depends(verify_api_key)):
    try:
        return await _service().get_achievements(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("get_achievements", e)


@router.get("/api/v1/users/{user_id}/transactions", response_model=TransactionListResponse)
@limiter.limit("60/minute")
async def get_transactions(
    request: Request,
    user_id: str,
    limit: int = Query(default=50, ge=1, le=500),
    api_key: ApiKeyScope = Depends(verify_api_key)
):
    """Get gem transactions, newest first"""
    try:
        transactions = await _service().get_transactions(user_id, limit=limit)
        return TransactionListResponse(user_id=user_id, transactions=transactions)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("get_transactions", e)


@router.get("/api/v1/users/{user_id}/unlocks", response_model=List[UnlockStatus])
@limiter.limit("60/minute")
async def get_unlocks(request: Request, user_id: str, api_key: ApiKeyScope = Depends(verify_api_key)):
    """Unlock status and progress for every pet"""
    try:
        return await _service().get_unlock_statuses(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("get_unlocks", e)


@router.get("/api/v1/users/{user_id}/unlocks/next", response_model=Optional[UnlockStatus])
@limiter.limit("60/minute")
async def get_next_unlock(request: Request, user_id: str, api_key: ApiKeyScope = Depends(verify_api_key)):
    """Locked pet closest to being unlocked (null when none remain)"""
    try:
        return await _service().get_next_unlockable_pet(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("get_next_unlock", e)


@router.get("/api/v1/users/{user_id}/level", response_model=LevelProgress)
@limiter.limit("60/minute")
async def get_level(request: Request, user_id: str, api_key: ApiKeyScope = Depends(verify_api_key)):
    try:
        return await _service().get_level_progress(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("get_level", e)


# ==========================================
# Actions
# ==========================================

@router.post("/api/v1/users/{user_id}/pet/select", response_model=PetUpdate)
@limiter.limit("30/minute")
async def select_pet(
    request: Request,
    user_id: str,
    payload: SelectPetRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    """Switch the active pet (Rate limit: 30/minute)"""
    try:
        return await _service().select_pet(user_id, payload.pet_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("select_pet", e)


@router.post("/api/v1/users/{user_id}/pet/feed", response_model=PetUpdate)
@limiter.limit("30/minute")
async def feed_pet(request: Request, user_id: str, api_key: ApiKeyScope = Depends(require_write_access)):
    """Feed the current pet for 20 gems (Rate limit: 30/minute)"""
    try:
        return await _service().feed_pet(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("feed_pet", e)


@router.post("/api/v1/users/{user_id}/pet/unlock", response_model=PetUpdate)
@limiter.limit("30/minute")
async def unlock_pet(
    request: Request,
    user_id: str,
    payload: UnlockPetRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    try:
        return await _service().unlock_pet(user_id, payload.pet_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("unlock_pet", e)


@router.post("/api/v1/users/{user_id}/pet/accessories", response_model=PetUpdate)
@limiter.limit("30/minute")
async def buy_accessory(
    request: Request,
    user_id: str,
    payload: BuyAccessoryRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    try:
        return await _service().buy_accessory(user_id, payload.accessory_id, payload.cost)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("buy_accessory", e)


@router.post("/api/v1/users/{user_id}/gems/earn", response_model=PetUpdate)
@limiter.limit("30/minute")
async def earn_gems(
    request: Request,
    user_id: str,
    payload: EarnGemsRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    try:
        return await _service().earn_gems(user_id, payload.reason, payload.amount)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("earn_gems", e)


@router.post("/api/v1/users/{user_id}/gems/spend", response_model=PetUpdate)
@limiter.limit("30/minute")
async def spend_gems(
    request: Request,
    user_id: str,
    payload: SpendGemsRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    try:
        return await _service().spend_gems(user_id, payload.amount, payload.reason)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("spend_gems", e)


@router.post("/api/v1/users/{user_id}/mood/spending", response_model=PetUpdate)
@limiter.limit("30/minute")
async def mood_from_spending(
    request: Request,
    user_id: str,
    payload: SpendingMoodRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    """React to today's spending against the daily budget"""
    try:
        return await _service().update_mood_from_spending(user_id, payload.daily_spent, payload.daily_budget)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("mood_from_spending", e)


@router.post("/api/v1/users/{user_id}/mood/goal", response_model=PetUpdate)
@limiter.limit("30/minute")
async def mood_from_goal(request: Request, user_id: str, api_key: ApiKeyScope = Depends(require_write_access)):
    """Celebrate a completed goal (+GOAL_ACHIEVED gems)"""
    try:
        return await _service().update_mood_from_goal(user_id)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("mood_from_goal", e)


@router.post("/api/v1/users/{user_id}/xp", response_model=PetUpdate)
@limiter.limit("30/minute")
async def add_xp(
    request: Request,
    user_id: str,
    payload: AddXPRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    try:
        return await _service().add_xp(user_id, payload.amount)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("add_xp", e)


@router.post("/api/v1/users/{user_id}/achievements", response_model=PetUpdate)
@limiter.limit("30/minute")
async def update_achievements(
    request: Request,
    user_id: str,
    payload: AchievementsUpdateRequest,
    api_key: ApiKeyScope = Depends(require_write_access)
):
    """Merge achievement counters; newly qualified pets unlock automatically"""
    try:
        return await _service().update_achievements(user_id, payload.updates)
    except PetEngineError:
        raise
    except Exception as e:
        raise _internal_error("update_achievements", e)


# ==========================================
# Health
# ==========================================

@router.get("/api/health", response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint (no auth required)"""
    from saveup_pet.config import STORAGE_BACKEND

    try:
        container = get_container()
        storage = type(container.store).__name__
        scheduler = "running" if container.decay_scheduler.is_running else "stopped"
        return HealthCheckResponse(status="healthy", storage=storage, decay_scheduler=scheduler)
    except RuntimeError:
        return HealthCheckResponse(status="starting", storage=STORAGE_BACKEND, decay_scheduler="stopped")
