"""
PetService - Pet State Coordinator

Sole writer of a user's pet state and achievement counters. Applies the pure
rules from saveup_pet.pet to the stored documents, persists the result, logs
gem transactions and notifies subscribers.
"""

import asyncio
import functools
import inspect
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from saveup_pet.config import DECAY_THRESHOLD_HOURS
from saveup_pet.db.interface import PetStorageInterface
from saveup_pet.exceptions import (
    AlreadyOwnedError,
    AlreadyUnlockedError,
    InsufficientGemsError,
    NotUnlockedError,
    PetEngineError,
    RequirementNotMetError,
    ValidationError,
)
from saveup_pet.models.pet import (
    ACHIEVEMENT_COUNTERS,
    Achievements,
    GemTransaction,
    LevelProgress,
    PetState,
    PetType,
    PetUpdate,
    TransactionType,
    UnlockStatus,
)
from saveup_pet.observability.metrics import (
    pet_decay_sweeps_total,
    pet_level_ups_total,
    pet_mood_transitions_total,
    pet_operation_duration_seconds,
    pet_operations_total,
    pet_subscribers_active,
    pet_unlocks_total,
    track_gems,
)
from saveup_pet.pet.gem_calculator import (
    GEM_SPENDING_RULES,
    LEVEL_UP_REASON,
    calculate_gems_earned,
    calculate_level_up_bonus,
    calculate_xp_for_next_level,
    level_for_xp,
)
from saveup_pet.pet.mood_engine import (
    calculate_mood_after_feeding,
    calculate_mood_after_goal,
    calculate_mood_decay,
    calculate_mood_from_spending,
)
from saveup_pet.pet.pet_config import DEFAULT_PET, STARTER_PETS, get_pet_config, resolve_pet_type
from saveup_pet.pet.unlock_system import (
    can_unlock_pet,
    get_all_unlock_statuses,
    get_newly_unlockable_pets,
    get_next_unlockable_pet,
    get_unlock_progress,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[PetUpdate], Union[None, Awaitable[None]]]


def _tracked(operation: str):
    """Record outcome and latency of a coordinator operation"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(self, *args, **kwargs)
            except PetEngineError:
                pet_operations_total.labels(operation=operation, status="rejected").inc()
                raise
            except Exception:
                pet_operations_total.labels(operation=operation, status="error").inc()
                raise
            finally:
                pet_operation_duration_seconds.labels(operation=operation).observe(time.perf_counter() - start)
            pet_operations_total.labels(operation=operation, status="success").inc()
            return result
        return wrapper
    return decorator


class PetService:
    """
    Service for the virtual pet reward system.

    Responsibilities:
    - Default state creation for new users
    - Pet selection, feeding and accessory purchases
    - Gem earning/spending with an append-only transaction log
    - Mood updates from spending, goals and neglect
    - XP, leveling and level-up bonuses
    - Achievement updates with automatic pet unlocks
    - Change notifications for subscribers

    All mutations for one user run under that user's lock, in the order they
    were issued. Chained effects (goal bonus, level-up bonus, auto-unlocks)
    are applied inside the same critical section and saved together.
    Subscribers are called while the lock is held, so they must not await a
    mutation for the same user.
    """

    def __init__(
        self,
        store: PetStorageInterface,
        clock: Optional[Callable[[], datetime]] = None,
        decay_threshold_hours: float = DECAY_THRESHOLD_HOURS
    ):
        """
        Initialize PetService.

        Args:
            store: Storage backend for pet documents
            clock: Returns the current time (timezone-aware); defaults to UTC now
            decay_threshold_hours: Hours without food before mood decay applies
        """
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.decay_threshold_hours = decay_threshold_hours
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._subscribers: Dict[str, List[Subscriber]] = {}
        logger.debug("PetService initialized")

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, user_id: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a user's state changes.

        Returns:
            Function that removes the subscription
        """
        callbacks = self._subscribers.setdefault(user_id, [])
        callbacks.append(callback)
        pet_subscribers_active.inc()

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)
                pet_subscribers_active.dec()
            if not callbacks and self._subscribers.get(user_id) is callbacks:
                del self._subscribers[user_id]

        return unsubscribe

    async def _notify(self, update: PetUpdate) -> None:
        for callback in list(self._subscribers.get(update.user_id, [])):
            try:
                result = callback(update)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Pet subscriber failed for user {update.user_id}: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    async def get_pet_state(self, user_id: str) -> PetState:
        async with self._lock_for(user_id):
            state, _ = await self._load(user_id)
            return state

    async def get_achievements(self, user_id: str) -> Achievements:
        async with self._lock_for(user_id):
            _, achievements = await self._load(user_id)
            return achievements

    async def get_transactions(self, user_id: str, limit: int = 50) -> List[GemTransaction]:
        return await self.store.get_gem_transactions(user_id, limit=limit)

    async def get_unlock_statuses(self, user_id: str) -> List[UnlockStatus]:
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)
        return get_all_unlock_statuses(state.unlocked_pets, achievements)

    async def get_next_unlockable_pet(self, user_id: str) -> Optional[UnlockStatus]:
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)
        return get_next_unlockable_pet(state.unlocked_pets, achievements)

    async def get_level_progress(self, user_id: str) -> LevelProgress:
        async with self._lock_for(user_id):
            state, _ = await self._load(user_id)
        return calculate_xp_for_next_level(state.pet_xp)

    async def list_user_ids(self) -> List[str]:
        return await self.store.list_user_ids()

    # ------------------------------------------------------------------
    # Pet actions
    # ------------------------------------------------------------------

    @_tracked("select_pet")
    async def select_pet(self, user_id: str, pet_id: Union[PetType, str]) -> PetUpdate:
        """Switch the active pet (must already be unlocked)"""
        pet = resolve_pet_type(pet_id)
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            if pet not in state.unlocked_pets:
                raise NotUnlockedError(pet.value, user_id=user_id, operation="select_pet")

            state = state.evolve(current_pet=pet)
            return await self._commit(
                user_id, "select_pet", state, achievements,
                message=f"{get_pet_config(pet).name} is now your companion!"
            )

    @_tracked("feed_pet")
    async def feed_pet(self, user_id: str) -> PetUpdate:
        """Spend FEED_PET gems to feed the current pet"""
        cost = GEM_SPENDING_RULES["FEED_PET"]
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            if state.gems < cost:
                raise InsufficientGemsError(cost, state.gems, user_id=user_id, operation="feed_pet")

            now = self._clock()
            change = calculate_mood_after_feeding(state.happiness, state.energy, state.current_pet)
            state = state.evolve(
                gems=state.gems - cost,
                happiness=change.new_happiness,
                energy=change.new_energy,
                mood_state=change.new_mood,
                last_fed=now,
            )
            pet_mood_transitions_total.labels(trigger="feeding", mood=change.new_mood.value).inc()

            return await self._commit(
                user_id, "feed_pet", state, achievements,
                transactions=[self._transaction(TransactionType.SPEND, cost, "FEED_PET", now)],
                message=change.message,
                gems_spent=cost,
            )

    @_tracked("earn_gems")
    async def earn_gems(self, user_id: str, reason: str, amount: Optional[int] = None) -> PetUpdate:
        """
        Award gems for a reason code.

        Args:
            user_id: User identifier
            reason: Reason code looked up in the earning table (unknown codes earn 0)
            amount: Explicit amount overriding the table lookup
        """
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)
            state, earned, transactions = self._earn(user_id, state, achievements, reason, amount)
            return await self._commit(
                user_id, "earn_gems", state, achievements,
                transactions=transactions,
                message=f"+{earned} gems" if earned else "",
                gems_earned=earned,
            )

    @_tracked("spend_gems")
    async def spend_gems(self, user_id: str, amount: int, reason: str) -> PetUpdate:
        """Deduct gems, rejecting the spend if the balance is too low"""
        if amount <= 0:
            raise ValidationError("Amount must be positive", field="amount", value=amount, user_id=user_id)

        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            if state.gems < amount:
                raise InsufficientGemsError(amount, state.gems, user_id=user_id, operation="spend_gems")

            state = state.evolve(gems=state.gems - amount)
            return await self._commit(
                user_id, "spend_gems", state, achievements,
                transactions=[self._transaction(TransactionType.SPEND, amount, reason)],
                gems_spent=amount,
            )

    @_tracked("buy_accessory")
    async def buy_accessory(self, user_id: str, accessory_id: str, cost: int) -> PetUpdate:
        """Buy an accessory for gems; each accessory can be owned once"""
        if cost <= 0:
            raise ValidationError("Cost must be positive", field="cost", value=cost, user_id=user_id)

        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            if accessory_id in state.accessories:
                raise AlreadyOwnedError(accessory_id, user_id=user_id, operation="buy_accessory")
            if state.gems < cost:
                raise InsufficientGemsError(cost, state.gems, user_id=user_id, operation="buy_accessory")

            state = state.evolve(
                gems=state.gems - cost,
                accessories=[*state.accessories, accessory_id],
            )
            return await self._commit(
                user_id, "buy_accessory", state, achievements,
                transactions=[self._transaction(TransactionType.SPEND, cost, f"Bought accessory: {accessory_id}")],
                gems_spent=cost,
            )

    @_tracked("unlock_pet")
    async def unlock_pet(self, user_id: str, pet_id: Union[PetType, str]) -> PetUpdate:
        """Unlock a pet whose requirement is met"""
        pet = resolve_pet_type(pet_id)
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            if pet in state.unlocked_pets:
                raise AlreadyUnlockedError(pet.value, user_id=user_id, operation="unlock_pet")
            if not can_unlock_pet(pet, achievements):
                raise RequirementNotMetError(
                    pet.value,
                    progress=get_unlock_progress(pet, achievements),
                    user_id=user_id,
                    operation="unlock_pet"
                )

            state = state.evolve(unlocked_pets=[*state.unlocked_pets, pet])
            pet_unlocks_total.labels(pet=pet.value).inc()
            logger.info(f"User {user_id} unlocked pet {pet.value}")

            return await self._commit(
                user_id, "unlock_pet", state, achievements,
                message=f"{get_pet_config(pet).name} unlocked!",
                unlocked_pets=[pet],
            )

    # ------------------------------------------------------------------
    # Mood
    # ------------------------------------------------------------------

    @_tracked("update_mood_from_spending")
    async def update_mood_from_spending(self, user_id: str, daily_spent: float, daily_budget: float) -> PetUpdate:
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            change = calculate_mood_from_spending(
                daily_spent, daily_budget, state.happiness, state.energy, state.current_pet
            )
            state = state.evolve(
                happiness=change.new_happiness,
                energy=change.new_energy,
                mood_state=change.new_mood,
            )
            pet_mood_transitions_total.labels(trigger="spending", mood=change.new_mood.value).inc()

            return await self._commit(
                user_id, "update_mood_from_spending", state, achievements,
                message=change.message,
            )

    @_tracked("update_mood_from_goal")
    async def update_mood_from_goal(self, user_id: str) -> PetUpdate:
        """Celebrate a completed goal and award the GOAL_ACHIEVED bonus"""
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            change = calculate_mood_after_goal(state.current_pet, state.happiness, state.energy)
            state = state.evolve(
                happiness=change.new_happiness,
                energy=change.new_energy,
                mood_state=change.new_mood,
            )
            pet_mood_transitions_total.labels(trigger="goal", mood=change.new_mood.value).inc()

            state, earned, transactions = self._earn(user_id, state, achievements, "GOAL_ACHIEVED")
            return await self._commit(
                user_id, "update_mood_from_goal", state, achievements,
                transactions=transactions,
                message=change.message,
                gems_earned=earned,
            )

    @_tracked("apply_mood_decay")
    async def apply_mood_decay(self, user_id: str, now: Optional[datetime] = None) -> Optional[PetUpdate]:
        """
        Apply hunger decay if the pet has not been fed within the threshold.

        Returns:
            The update, or None if no decay was due
        """
        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            if state.last_fed is None:
                return None

            now = now or self._clock()
            last_fed = state.last_fed
            if last_fed.tzinfo is None:
                last_fed = last_fed.replace(tzinfo=timezone.utc)
            hours_since_fed = (now - last_fed).total_seconds() / 3600

            if hours_since_fed <= self.decay_threshold_hours:
                return None

            change = calculate_mood_decay(hours_since_fed, state.happiness, state.energy)
            state = state.evolve(
                happiness=change.new_happiness,
                energy=change.new_energy,
                mood_state=change.new_mood,
            )
            pet_mood_transitions_total.labels(trigger="decay", mood=change.new_mood.value).inc()
            logger.info(
                f"Mood decay for user {user_id}: {hours_since_fed:.1f}h since last fed, "
                f"happiness={state.happiness}, energy={state.energy}, mood={state.mood_state.value}"
            )

            return await self._commit(
                user_id, "apply_mood_decay", state, achievements,
                message=change.message,
            )

    # ------------------------------------------------------------------
    # XP and achievements
    # ------------------------------------------------------------------

    @_tracked("add_xp")
    async def add_xp(self, user_id: str, amount: int) -> PetUpdate:
        """Add XP, recompute the level and award the level-up bonus"""
        if amount < 0:
            raise ValidationError("XP amount cannot be negative", field="amount", value=amount, user_id=user_id)

        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            old_level = state.pet_level
            new_xp = state.pet_xp + amount
            new_level = level_for_xp(new_xp)
            state = state.evolve(pet_xp=new_xp, pet_level=new_level)

            leveled_up = new_level > old_level
            earned = 0
            transactions: List[GemTransaction] = []
            message = f"+{amount} XP" if amount else ""

            if leveled_up:
                state, earned, transactions = self._earn(
                    user_id, state, achievements, LEVEL_UP_REASON, calculate_level_up_bonus(new_level)
                )
                pet_level_ups_total.inc()
                message = f"Level {new_level} reached! +{earned} gems"
                logger.info(f"User {user_id} pet leveled up from {old_level} to {new_level}!")

            return await self._commit(
                user_id, "add_xp", state, achievements,
                transactions=transactions,
                message=message,
                xp_awarded=amount,
                leveled_up=leveled_up,
                gems_earned=earned,
            )

    @_tracked("update_achievements")
    async def update_achievements(self, user_id: str, updates: Mapping[str, int]) -> PetUpdate:
        """
        Merge achievement counters and auto-unlock pets whose requirement is now met.

        Counters never decrease: a value lower than the stored one is ignored.
        """
        self._validate_counters(user_id, updates)

        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)

            merged = achievements.model_dump()
            for counter, value in updates.items():
                if value < merged[counter]:
                    logger.warning(
                        f"Ignoring decrease of {counter} for user {user_id}: {merged[counter]} -> {value}"
                    )
                    continue
                merged[counter] = value

            return await self._apply_achievements(user_id, "update_achievements", state, Achievements(**merged))

    @_tracked("increment_achievement")
    async def increment_achievement(self, user_id: str, counter: str, by: int = 1) -> PetUpdate:
        """Add to a single achievement counter"""
        self._validate_counters(user_id, {counter: by})

        async with self._lock_for(user_id):
            state, achievements = await self._load(user_id)
            merged = achievements.model_copy(update={counter: getattr(achievements, counter) + by})
            return await self._apply_achievements(user_id, "increment_achievement", state, merged)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _lock_for(self, user_id: str) -> AsyncIterator[None]:
        """Hold the user's lock; the lock is dropped once nobody holds or awaits it"""
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]

    def _default_state(self) -> PetState:
        return PetState(
            current_pet=DEFAULT_PET,
            unlocked_pets=list(STARTER_PETS),
            last_fed=self._clock(),
        )

    async def _load(self, user_id: str) -> Tuple[PetState, Achievements]:
        """Load both documents, creating and persisting defaults for new users"""
        state = await self.store.get_pet_state(user_id)
        achievements = await self.store.get_achievements(user_id)
        if state is not None and achievements is not None:
            return state, achievements

        new_achievements = None
        if achievements is None:
            achievements = new_achievements = Achievements()
        if state is None:
            state = self._default_state()
        await self.store.save_pet_update(user_id, state, new_achievements)
        logger.info(f"Created default pet records for user {user_id}")
        return state, achievements

    def _transaction(
        self,
        transaction_type: TransactionType,
        amount: int,
        reason: str,
        timestamp: Optional[datetime] = None
    ) -> GemTransaction:
        return GemTransaction(
            type=transaction_type,
            amount=amount,
            reason=reason,
            timestamp=timestamp or self._clock(),
        )

    def _earn(
        self,
        user_id: str,
        state: PetState,
        achievements: Achievements,
        reason: str,
        amount: Optional[int] = None
    ) -> Tuple[PetState, int, List[GemTransaction]]:
        if amount is None:
            amount = calculate_gems_earned(reason, state.current_pet, achievements.streak_days)
        elif amount < 0:
            logger.warning(f"Ignoring negative gem award for user {user_id}: {amount} ({reason})")
            amount = 0

        if amount == 0:
            return state, 0, []

        state = state.evolve(gems=state.gems + amount)
        return state, amount, [self._transaction(TransactionType.EARN, amount, reason)]

    def _validate_counters(self, user_id: str, values: Mapping[str, int]) -> None:
        for counter, value in values.items():
            if counter not in ACHIEVEMENT_COUNTERS:
                raise ValidationError(
                    f"Unknown achievement counter '{counter}'", field="counter", value=counter, user_id=user_id
                )
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValidationError(
                    f"{counter} must be a non-negative integer", field=counter, value=value, user_id=user_id
                )

    async def _apply_achievements(
        self,
        user_id: str,
        operation: str,
        state: PetState,
        achievements: Achievements
    ) -> PetUpdate:
        newly_unlocked = [
            pet for pet in get_newly_unlockable_pets(state.unlocked_pets, achievements)
            if pet not in state.unlocked_pets
        ]
        if newly_unlocked:
            state = state.evolve(unlocked_pets=[*state.unlocked_pets, *newly_unlocked])
            for pet in newly_unlocked:
                pet_unlocks_total.labels(pet=pet.value).inc()
            logger.info(f"Auto-unlocked pets for user {user_id}: {[pet.value for pet in newly_unlocked]}")

        message = ", ".join(f"{get_pet_config(pet).name} unlocked!" for pet in newly_unlocked)
        return await self._commit(
            user_id, operation, state, achievements,
            save_achievements=True,
            message=message,
            unlocked_pets=newly_unlocked,
        )

    async def _commit(
        self,
        user_id: str,
        operation: str,
        state: PetState,
        achievements: Achievements,
        transactions: Optional[List[GemTransaction]] = None,
        save_achievements: bool = False,
        **result
    ) -> PetUpdate:
        """Persist state, counters and ledger entries as one write, then notify subscribers"""
        transactions = transactions or []
        await self.store.save_pet_update(
            user_id,
            state,
            achievements if save_achievements else None,
            transactions,
        )
        for transaction in transactions:
            track_gems(transaction.type.value, transaction.reason, transaction.amount)

        update = PetUpdate(
            user_id=user_id,
            operation=operation,
            state=state,
            achievements=achievements,
            **result
        )
        await self._notify(update)
        return update


async def run_decay_sweep(service: PetService, now: Optional[datetime] = None) -> int:
    """
    Apply mood decay to every stored user.

    Failures for one user are logged and do not stop the sweep.

    Returns:
        Number of users whose pet decayed
    """
    decayed = 0
    for user_id in await service.list_user_ids():
        try:
            if await service.apply_mood_decay(user_id, now=now):
                decayed += 1
        except Exception as e:
            logger.error(f"Mood decay failed for user {user_id}: {e}", exc_info=True)
            pet_decay_sweeps_total.labels(status="error").inc()
    pet_decay_sweeps_total.labels(status="success").inc()
    return decayed
