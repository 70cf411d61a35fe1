"""Pet engine database queries"""
import logging
from typing import Optional, Sequence
from saveup_pet.db.connection import db

logger = logging.getLogger(__name__)


UPSERT_PET_STATE_SQL = """
    INSERT INTO pet_states (user_id, current_pet, gems, unlocked_pets, accessories, pet_level,
                            pet_xp, last_fed, mood_state, happiness, energy)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
    ON CONFLICT (user_id) DO UPDATE
    SET current_pet = EXCLUDED.current_pet,
        gems = EXCLUDED.gems,
        unlocked_pets = EXCLUDED.unlocked_pets,
        accessories = EXCLUDED.accessories,
        pet_level = EXCLUDED.pet_level,
        pet_xp = EXCLUDED.pet_xp,
        last_fed = EXCLUDED.last_fed,
        mood_state = EXCLUDED.mood_state,
        happiness = EXCLUDED.happiness,
        energy = EXCLUDED.energy,
        updated_at = CURRENT_TIMESTAMP
"""

UPSERT_ACHIEVEMENTS_SQL = """
    INSERT INTO pet_achievements (user_id, total_saved, streak_days, automated_expenses,
                                  challenges_completed, goals_hit)
    VALUES (%s, %s, %s, %s, %s, %s)
    ON CONFLICT (user_id) DO UPDATE
    SET total_saved = EXCLUDED.total_saved,
        streak_days = EXCLUDED.streak_days,
        automated_expenses = EXCLUDED.automated_expenses,
        challenges_completed = EXCLUDED.challenges_completed,
        goals_hit = EXCLUDED.goals_hit,
        updated_at = CURRENT_TIMESTAMP
"""

INSERT_GEM_TRANSACTION_SQL = """
    INSERT INTO gem_transactions (user_id, type, amount, reason, created_at)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING id
"""


def _pet_state_params(user_id: str, state: dict) -> tuple:
    return (
        user_id,
        state['current_pet'],
        state['gems'],
        state['unlocked_pets'],
        state['accessories'],
        state['pet_level'],
        state['pet_xp'],
        state['last_fed'],
        state['mood_state'],
        state['happiness'],
        state['energy'],
    )


def _achievements_params(user_id: str, achievements: dict) -> tuple:
    return (
        user_id,
        achievements['total_saved'],
        achievements['streak_days'],
        achievements['automated_expenses'],
        achievements['challenges_completed'],
        achievements['goals_hit'],
    )


# ==========================================
# Pet State
# ==========================================

async def get_pet_state(user_id: str) -> Optional[dict]:
    """
    Get a user's pet state row

    Returns:
        {
            'user_id': str,
            'current_pet': str,
            'gems': int,
            'unlocked_pets': list[str],
            'accessories': list[str],
            'pet_level': int,
            'pet_xp': int,
            'last_fed': datetime | None,
            'mood_state': str,
            'happiness': int,
            'energy': int
        }
        or None if the user has no pet yet
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT user_id, current_pet, gems, unlocked_pets, accessories, pet_level, pet_xp,
                       last_fed, mood_state, happiness, energy
                FROM pet_states
                WHERE user_id = %s
                """,
                (user_id,)
            )
            row = await cur.fetchone()
            return dict(row) if row else None


async def upsert_pet_state(user_id: str, state: dict) -> None:
    """
    Create or replace a user's pet state

    Args:
        user_id: User identifier
        state: Dict with the pet_states columns (enum values as strings)
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(UPSERT_PET_STATE_SQL, _pet_state_params(user_id, state))
            await conn.commit()


async def get_pet_user_ids() -> list[str]:
    """All users with a pet state row"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT user_id FROM pet_states ORDER BY user_id")
            rows = await cur.fetchall()
            return [row['user_id'] for row in rows]


# ==========================================
# Achievements
# ==========================================

async def get_pet_achievements(user_id: str) -> Optional[dict]:
    """Get a user's achievement counters (None if not created yet)"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT user_id, total_saved, streak_days, automated_expenses, challenges_completed, goals_hit
                FROM pet_achievements
                WHERE user_id = %s
                """,
                (user_id,)
            )
            row = await cur.fetchone()
            return dict(row) if row else None


async def upsert_pet_achievements(user_id: str, achievements: dict) -> None:
    """Create or replace a user's achievement counters"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(UPSERT_ACHIEVEMENTS_SQL, _achievements_params(user_id, achievements))
            await conn.commit()


# ==========================================
# Gem Transactions
# ==========================================

async def add_gem_transaction(
    user_id: str,
    transaction_type: str,
    amount: int,
    reason: str,
    created_at
) -> str:
    """
    Add gem transaction

    Args:
        user_id: User identifier
        transaction_type: 'earn' or 'spend'
        amount: Positive gem amount
        reason: Reason code or description
        created_at: Transaction timestamp

    Returns:
        Transaction ID (UUID string)
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                INSERT_GEM_TRANSACTION_SQL,
                (user_id, transaction_type, amount, reason, created_at)
            )
            result = await cur.fetchone()
            await conn.commit()
            return str(result['id']) if result else None


async def get_gem_transactions(user_id: str, limit: int = 50) -> list[dict]:
    """
    Get recent gem transactions for user

    Returns:
        List of transactions ordered by created_at DESC
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, user_id, type, amount, reason, created_at
                FROM gem_transactions
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


# ==========================================
# Combined Updates
# ==========================================

async def save_pet_update(
    user_id: str,
    state: dict,
    achievements: Optional[dict] = None,
    transactions: Sequence[tuple] = ()
) -> None:
    """
    Write a pet state, optional achievement counters and gem transactions
    in one database transaction

    Args:
        user_id: User identifier
        state: Dict with the pet_states columns
        achievements: Dict with the pet_achievements columns, or None to leave them untouched
        transactions: (type, amount, reason, created_at) tuples to append to the ledger

    Either every row is written or none is.
    """
    async with db.connection() as conn:
        async with conn.transaction():
            async with conn.cursor() as cur:
                await cur.execute(UPSERT_PET_STATE_SQL, _pet_state_params(user_id, state))
                if achievements is not None:
                    await cur.execute(UPSERT_ACHIEVEMENTS_SQL, _achievements_params(user_id, achievements))
                for transaction_type, amount, reason, created_at in transactions:
                    await cur.execute(
                        INSERT_GEM_TRANSACTION_SQL,
                        (user_id, transaction_type, amount, reason, created_at)
                    )
    logger.debug(f"Saved pet update for user {user_id} ({len(transactions)} gem transactions)")
