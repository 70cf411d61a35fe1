"""
In-memory pet store

Keeps pet state in process memory. Used for tests, local development and
single-process deployments that do not need persistence across restarts
(STORAGE_BACKEND=memory).
"""

import logging
from typing import Dict, List, Optional, Sequence

from saveup_pet.db.interface import PetStorageInterface
from saveup_pet.models.pet import Achievements, GemTransaction, PetState

logger = logging.getLogger(__name__)


class InMemoryPetStore(PetStorageInterface):
    """In-memory store for pet state (not persisted)"""

    def __init__(self):
        self._states: Dict[str, PetState] = {}
        self._achievements: Dict[str, Achievements] = {}
        self._transactions: Dict[str, List[GemTransaction]] = {}
        logger.info("InMemoryPetStore initialized - pet state is NOT persisted across restarts")

    async def get_pet_state(self, user_id: str) -> Optional[PetState]:
        state = self._states.get(user_id)
        return state.model_copy(deep=True) if state else None

    async def save_pet_state(self, user_id: str, state: PetState) -> None:
        self._states[user_id] = state.model_copy(deep=True)
        logger.debug(f"Saved pet state for user {user_id}")

    async def get_achievements(self, user_id: str) -> Optional[Achievements]:
        achievements = self._achievements.get(user_id)
        return achievements.model_copy() if achievements else None

    async def save_achievements(self, user_id: str, achievements: Achievements) -> None:
        self._achievements[user_id] = achievements.model_copy()
        logger.debug(f"Saved achievements for user {user_id}")

    async def add_gem_transaction(self, user_id: str, transaction: GemTransaction) -> None:
        self._transactions.setdefault(user_id, []).append(transaction)

    async def save_pet_update(
        self,
        user_id: str,
        state: PetState,
        achievements: Optional[Achievements] = None,
        transactions: Sequence[GemTransaction] = ()
    ) -> None:
        previous_state = self._states.get(user_id)
        previous_achievements = self._achievements.get(user_id)
        previous_transactions = list(self._transactions.get(user_id, []))

        try:
            await self.save_pet_state(user_id, state)
            if achievements is not None:
                await self.save_achievements(user_id, achievements)
            for transaction in transactions:
                await self.add_gem_transaction(user_id, transaction)
        except Exception:
            self._restore(user_id, previous_state, previous_achievements, previous_transactions)
            logger.warning(f"Rolled back pet update for user {user_id}")
            raise

    def _restore(
        self,
        user_id: str,
        state: Optional[PetState],
        achievements: Optional[Achievements],
        transactions: List[GemTransaction]
    ) -> None:
        if state is None:
            self._states.pop(user_id, None)
        else:
            self._states[user_id] = state
        if achievements is None:
            self._achievements.pop(user_id, None)
        else:
            self._achievements[user_id] = achievements
        if transactions:
            self._transactions[user_id] = transactions
        else:
            self._transactions.pop(user_id, None)

    async def get_gem_transactions(self, user_id: str, limit: int = 50) -> List[GemTransaction]:
        history = self._transactions.get(user_id, [])
        return list(reversed(history))[:limit]

    async def list_user_ids(self) -> List[str]:
        return list(self._states)
