"""
Abstract Storage Interface

The pet engine only needs a handful of per-user documents: the pet state,
the achievement counters and an append-only gem ledger. Backends implement
this interface; the coordinator never talks to a database directly.

Infrastructure failures (connection loss, timeouts) are raised as-is by the
implementations and are never translated into pet engine errors.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from saveup_pet.models.pet import Achievements, GemTransaction, PetState


class PetStorageInterface(ABC):
    """
    Abstract interface for pet storage operations.

    Any storage implementation (in-memory, PostgreSQL, ...) must implement
    these methods.
    """

    @abstractmethod
    async def get_pet_state(self, user_id: str) -> Optional[PetState]:
        """
        Load a user's pet state.

        Returns:
            The stored state, or None if the user has none yet
        """
        pass

    @abstractmethod
    async def save_pet_state(self, user_id: str, state: PetState) -> None:
        """Create or replace a user's pet state."""
        pass

    @abstractmethod
    async def get_achievements(self, user_id: str) -> Optional[Achievements]:
        """
        Load a user's achievement counters.

        Returns:
            The stored counters, or None if the user has none yet
        """
        pass

    @abstractmethod
    async def save_achievements(self, user_id: str, achievements: Achievements) -> None:
        """Create or replace a user's achievement counters."""
        pass

    @abstractmethod
    async def add_gem_transaction(self, user_id: str, transaction: GemTransaction) -> None:
        """Append a gem transaction to the user's ledger."""
        pass

    @abstractmethod
    async def save_pet_update(
        self,
        user_id: str,
        state: PetState,
        achievements: Optional[Achievements] = None,
        transactions: Sequence[GemTransaction] = ()
    ) -> None:
        """
        Persist the result of one pet operation atomically.

        Writes the pet state, the achievement counters (when given) and
        appends the gem transactions. Either all of them are stored or, if
        any write fails, none are and the error is raised.
        """
        pass

    @abstractmethod
    async def get_gem_transactions(self, user_id: str, limit: int = 50) -> List[GemTransaction]:
        """
        Get recent gem transactions.

        Args:
            user_id: User identifier
            limit: Maximum number of transactions to return

        Returns:
            Transactions ordered newest first
        """
        pass

    @abstractmethod
    async def list_user_ids(self) -> List[str]:
        """All users that have a stored pet state."""
        pass
