"""
Service Layer Package

Business logic between the API/integration hooks and the storage layer.

- PetService: sole writer of pet state, gems, XP and achievement counters
- ServiceContainer: lazy DI container wiring the store, PetService and the decay scheduler
"""

from saveup_pet.services.container import ServiceContainer, get_container, init_container, reset_container
from saveup_pet.services.pet_service import PetService

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "reset_container",
    "PetService",
]
