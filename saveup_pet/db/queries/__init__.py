"""
Database queries - re-exported for convenient access.

Module organization:
- pet.py: pet state, achievement counters, gem transaction ledger
"""

from saveup_pet.db.queries.pet import (
    get_pet_state,
    upsert_pet_state,
    get_pet_user_ids,
    get_pet_achievements,
    upsert_pet_achievements,
    add_gem_transaction,
    get_gem_transactions,
    save_pet_update,
)

__all__ = [
    "get_pet_state",
    "upsert_pet_state",
    "get_pet_user_ids",
    "get_pet_achievements",
    "upsert_pet_achievements",
    "add_gem_transaction",
    "get_gem_transactions",
    "save_pet_update",
]
