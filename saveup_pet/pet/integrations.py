"""
Pet Reward Integration Hooks

This module connects the pet engine with the rest of SaveUp. Call these
functions after user actions (expense logged, goal completed, streak
updated, etc.) to award gems and XP, move the pet's mood and advance the
achievement counters that unlock new pets.

Usage:
    from saveup_pet.pet.integrations import handle_expense_tracked

    # After saving the expense
    await handle_expense_tracked(user_id, amount=12.5, channel="whatsapp")

Rewards are a side effect of the action that triggered them: a failure here
is logged and reported in the result, never raised to the caller.
"""

import logging
from typing import List, Optional, TypedDict

from saveup_pet.models.pet import PetUpdate
from saveup_pet.pet.gem_calculator import calculate_xp_earned

logger = logging.getLogger(__name__)

EXPENSE_CHANNEL_REASONS = {
    "app": "TRACK_EXPENSE",
    "whatsapp": "WHATSAPP_TRACK",
    "sms": "SMS_AUTO_TRACK",
}

UNDER_BUDGET_RATIO = 0.7
WEEKLY_STREAK_DAYS = 7

UNAVAILABLE_MESSAGE = "Pet rewards temporarily unavailable. Your progress was recorded!"


class PetRewardResult(TypedDict):
    """Result of pet reward processing"""
    gems_earned: int
    xp_awarded: int
    leveled_up: bool
    unlocked_pets: List[str]
    messages: List[str]


def _empty_result() -> PetRewardResult:
    return {
        'gems_earned': 0,
        'xp_awarded': 0,
        'leveled_up': False,
        'unlocked_pets': [],
        'messages': [],
    }


def _collect(result: PetRewardResult, update: Optional[PetUpdate]) -> None:
    if update is None:
        return
    result['gems_earned'] += update.gems_earned
    result['xp_awarded'] += update.xp_awarded
    result['leveled_up'] = result['leveled_up'] or update.leveled_up
    result['unlocked_pets'].extend(pet.value for pet in update.unlocked_pets)
    if update.message:
        result['messages'].append(update.message)


def _failed(hook: str, user_id: str, error: Exception) -> PetRewardResult:
    logger.error(f"[PET] ERROR in {hook} for user {user_id}: {type(error).__name__}: {error}", exc_info=True)
    result = _empty_result()
    result['messages'].append(UNAVAILABLE_MESSAGE)
    return result


def _get_service(service):
    if service is not None:
        return service
    from saveup_pet.services.container import get_container
    return get_container().pet_service


async def handle_expense_tracked(
    user_id: str,
    amount: float,
    channel: str = "app",
    service=None
) -> PetRewardResult:
    """
    Reward logging an expense

    Args:
        user_id: User identifier
        amount: Expense amount (drives XP: 1 per 10, max 50)
        channel: Where the expense came from: app, whatsapp or sms
        service: PetService (defaults to the container's)
    """
    logger.info(f"[PET] handle_expense_tracked called: user={user_id}, amount={amount}, channel={channel}")

    try:
        service = _get_service(service)
        result = _empty_result()

        reason = EXPENSE_CHANNEL_REASONS.get(channel)
        if reason is None:
            logger.warning(f"Unknown expense channel '{channel}', using TRACK_EXPENSE")
            reason = "TRACK_EXPENSE"

        _collect(result, await service.earn_gems(user_id, reason))

        xp = calculate_xp_earned(amount)
        if xp > 0:
            _collect(result, await service.add_xp(user_id, xp))

        return result

    except Exception as e:
        return _failed("handle_expense_tracked", user_id, e)


async def handle_daily_spending(
    user_id: str,
    daily_spent: float,
    daily_budget: float,
    service=None
) -> PetRewardResult:
    """
    Update the pet's mood from today's spending

    Spending under 70% of the budget also earns the UNDER_BUDGET bonus.
    """
    logger.info(f"[PET] handle_daily_spending called: user={user_id}, spent={daily_spent}, budget={daily_budget}")

    try:
        service = _get_service(service)
        result = _empty_result()

        _collect(result, await service.update_mood_from_spending(user_id, daily_spent, daily_budget))

        if daily_budget > 0 and daily_spent / daily_budget < UNDER_BUDGET_RATIO:
            _collect(result, await service.earn_gems(user_id, "UNDER_BUDGET"))

        return result

    except Exception as e:
        return _failed("handle_daily_spending", user_id, e)


async def handle_goal_completed(user_id: str, service=None) -> PetRewardResult:
    """Celebrate a completed savings goal and count it toward unlocks"""
    logger.info(f"[PET] handle_goal_completed called: user={user_id}")

    try:
        service = _get_service(service)
        result = _empty_result()

        _collect(result, await service.update_mood_from_goal(user_id))
        _collect(result, await service.increment_achievement(user_id, "goals_hit"))

        return result

    except Exception as e:
        return _failed("handle_goal_completed", user_id, e)


async def handle_streak_updated(user_id: str, streak_days: int, service=None) -> PetRewardResult:
    """Record the current streak; every full week earns WEEKLY_STREAK gems"""
    logger.info(f"[PET] handle_streak_updated called: user={user_id}, streak={streak_days}")

    try:
        service = _get_service(service)
        result = _empty_result()

        _collect(result, await service.update_achievements(user_id, {"streak_days": streak_days}))

        if streak_days > 0 and streak_days % WEEKLY_STREAK_DAYS == 0:
            _collect(result, await service.earn_gems(user_id, "WEEKLY_STREAK"))

        return result

    except Exception as e:
        return _failed("handle_streak_updated", user_id, e)


async def handle_challenge_completed(user_id: str, service=None) -> PetRewardResult:
    logger.info(f"[PET] handle_challenge_completed called: user={user_id}")

    try:
        service = _get_service(service)
        result = _empty_result()

        _collect(result, await service.earn_gems(user_id, "CHALLENGE_COMPLETE"))
        _collect(result, await service.increment_achievement(user_id, "challenges_completed"))

        return result

    except Exception as e:
        return _failed("handle_challenge_completed", user_id, e)


async def handle_expense_automated(user_id: str, service=None) -> PetRewardResult:
    """Count a newly automated recurring expense"""
    logger.info(f"[PET] handle_expense_automated called: user={user_id}")

    try:
        service = _get_service(service)
        result = _empty_result()
        _collect(result, await service.increment_achievement(user_id, "automated_expenses"))
        return result

    except Exception as e:
        return _failed("handle_expense_automated", user_id, e)


async def handle_savings_updated(user_id: str, total_saved: int, service=None) -> PetRewardResult:
    """Record the lifetime saved amount (whole currency units)"""
    logger.info(f"[PET] handle_savings_updated called: user={user_id}, total_saved={total_saved}")

    try:
        service = _get_service(service)
        result = _empty_result()
        _collect(result, await service.update_achievements(user_id, {"total_saved": total_saved}))
        return result

    except Exception as e:
        return _failed("handle_savings_updated", user_id, e)


async def handle_profile_completed(user_id: str, service=None) -> PetRewardResult:
    logger.info(f"[PET] handle_profile_completed called: user={user_id}")

    try:
        service = _get_service(service)
        result = _empty_result()
        _collect(result, await service.earn_gems(user_id, "COMPLETE_PROFILE"))
        return result

    except Exception as e:
        return _failed("handle_profile_completed", user_id, e)


async def handle_daily_login(user_id: str, service=None) -> PetRewardResult:
    logger.info(f"[PET] handle_daily_login called: user={user_id}")

    try:
        service = _get_service(service)
        result = _empty_result()
        _collect(result, await service.earn_gems(user_id, "DAILY_LOGIN"))
        return result

    except Exception as e:
        return _failed("handle_daily_login", user_id, e)


async def handle_impulse_resisted(user_id: str, service=None) -> PetRewardResult:
    """Reward skipping an impulse purchase (Meow pays extra)"""
    logger.info(f"[PET] handle_impulse_resisted called: user={user_id}")

    try:
        service = _get_service(service)
        result = _empty_result()
        _collect(result, await service.earn_gems(user_id, "RESIST_IMPULSE"))
        return result

    except Exception as e:
        return _failed("handle_impulse_resisted", user_id, e)
