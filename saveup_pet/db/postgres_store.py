"""
PostgreSQL pet store

Maps pet engine models onto the pet_states, pet_achievements and
gem_transactions tables (see migrations/001_pet_engine.sql). psycopg errors
propagate to the caller unchanged.
"""

import logging
from typing import List, Optional, Sequence

from saveup_pet.db import queries
from saveup_pet.db.interface import PetStorageInterface
from saveup_pet.models.pet import Achievements, GemTransaction, PetState

logger = logging.getLogger(__name__)


class PostgresPetStore(PetStorageInterface):
    """Pet store backed by the shared psycopg connection pool"""

    async def get_pet_state(self, user_id: str) -> Optional[PetState]:
        row = await queries.get_pet_state(user_id)
        if not row:
            return None
        row.pop("user_id", None)
        return PetState.model_validate(row)

    async def save_pet_state(self, user_id: str, state: PetState) -> None:
        await queries.upsert_pet_state(user_id, self._state_row(state))

    async def get_achievements(self, user_id: str) -> Optional[Achievements]:
        row = await queries.get_pet_achievements(user_id)
        if not row:
            return None
        row.pop("user_id", None)
        return Achievements.model_validate(row)

    async def save_achievements(self, user_id: str, achievements: Achievements) -> None:
        await queries.upsert_pet_achievements(user_id, achievements.model_dump())

    async def add_gem_transaction(self, user_id: str, transaction: GemTransaction) -> None:
        transaction_id = await queries.add_gem_transaction(
            user_id,
            transaction.type.value,
            transaction.amount,
            transaction.reason,
            transaction.timestamp,
        )
        logger.debug(f"Logged gem transaction {transaction_id} for user {user_id}")

    async def save_pet_update(
        self,
        user_id: str,
        state: PetState,
        achievements: Optional[Achievements] = None,
        transactions: Sequence[GemTransaction] = ()
    ) -> None:
        await queries.save_pet_update(
            user_id,
            self._state_row(state),
            achievements.model_dump() if achievements is not None else None,
            [
                (transaction.type.value, transaction.amount, transaction.reason, transaction.timestamp)
                for transaction in transactions
            ],
        )

    @staticmethod
    def _state_row(state: PetState) -> dict:
        return state.model_dump(mode="json", exclude={"last_fed"}) | {"last_fed": state.last_fed}

    async def get_gem_transactions(self, user_id: str, limit: int = 50) -> List[GemTransaction]:
        rows = await queries.get_gem_transactions(user_id, limit=limit)
        return [
            GemTransaction(
                type=row["type"],
                amount=row["amount"],
                reason=row["reason"],
                timestamp=row["created_at"],
            )
            for row in rows
        ]

    async def list_user_ids(self) -> List[str]:
        return await queries.get_pet_user_ids()
