"""
Prometheus metrics definitions for the pet engine.

Metrics are organized by category:
- Coordinator operations: counts by operation and outcome
- Gem economy: gems earned and spent by reason
- Progression: level-ups and pet unlocks
- Mood: transitions into each mood and decay sweeps

Metrics are exposed at the /metrics endpoint for Prometheus scraping.
"""

import logging
from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

# =============================================================================
# Coordinator Operations
# =============================================================================

pet_operations_total = Counter(
    "pet_operations_total",
    "Total pet coordinator operations",
    ["operation", "status"],  # status: success/rejected/error
)

pet_operation_duration_seconds = Histogram(
    "pet_operation_duration_seconds",
    "Pet coordinator operation latency in seconds (including storage I/O)",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

pet_subscribers_active = Gauge(
    "pet_subscribers_active",
    "Number of registered pet state subscribers",
)

pet_users = Gauge(
    "pet_users",
    "Number of users with a stored pet (refreshed on scrape)",
)

# =============================================================================
# Gem Economy
# =============================================================================

gems_earned_total = Counter(
    "pet_gems_earned_total",
    "Total gems earned",
    ["reason"],
)

gems_spent_total = Counter(
    "pet_gems_spent_total",
    "Total gems spent",
    ["reason"],
)

# =============================================================================
# Progression
# =============================================================================

pet_level_ups_total = Counter(
    "pet_level_ups_total",
    "Total pet level-ups",
)

pet_unlocks_total = Counter(
    "pet_unlocks_total",
    "Total pets unlocked",
    ["pet"],
)

# =============================================================================
# Mood
# =============================================================================

pet_mood_transitions_total = Counter(
    "pet_mood_transitions_total",
    "Mood assignments by trigger and resulting mood",
    ["trigger", "mood"],  # trigger: spending/feeding/goal/decay
)

pet_decay_sweeps_total = Counter(
    "pet_decay_sweeps_total",
    "Mood decay sweeps by outcome",
    ["status"],
)


def track_gems(transaction_type: str, reason: str, amount: int) -> None:
    """Record a gem movement"""
    if transaction_type == "earn":
        gems_earned_total.labels(reason=reason).inc(amount)
    else:
        gems_spent_total.labels(reason=reason).inc(amount)
