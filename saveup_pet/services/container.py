"""
Service Container - Dependency Injection Container

Simple DI container for the pet engine. The storage backend is injected;
the coordinator and the decay scheduler are lazy-loaded on first access.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from saveup_pet.db.interface import PetStorageInterface

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    """

    # Infrastructure dependencies (injected)
    store: PetStorageInterface

    # Services (lazy-loaded via properties)
    _pet_service: Optional[object] = field(default=None, init=False, repr=False)
    _decay_scheduler: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def pet_service(self):
        """Get PetService instance (lazy-loaded)"""
        if self._pet_service is None:
            from saveup_pet.services.pet_service import PetService
            self._pet_service = PetService(self.store)
            logger.debug("PetService instantiated")
        return self._pet_service

    @property
    def decay_scheduler(self):
        """Get PetDecayScheduler instance (lazy-loaded)"""
        if self._decay_scheduler is None:
            from saveup_pet.scheduler.decay_scheduler import PetDecayScheduler
            self._decay_scheduler = PetDecayScheduler(self.pet_service)
            logger.debug("PetDecayScheduler instantiated")
        return self._decay_scheduler


# Global container instance (initialized in the API lifespan)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before using services."
        )
    return _container


def init_container(store: Optional[PetStorageInterface] = None) -> ServiceContainer:
    """
    Initialize the global service container.

    Args:
        store: Storage backend; built from STORAGE_BACKEND when omitted

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    if store is None:
        store = create_store()

    _container = ServiceContainer(store=store)

    logger.info(f"Service container initialized with {type(store).__name__}")
    return _container


def reset_container() -> None:
    """Drop the global container (shutdown and tests)"""
    global _container
    _container = None


def create_store(backend: Optional[str] = None) -> PetStorageInterface:
    """Build the storage backend named by STORAGE_BACKEND"""
    from saveup_pet.config import STORAGE_BACKEND

    backend = (backend or STORAGE_BACKEND).lower()
    if backend == "postgres":
        from saveup_pet.db.postgres_store import PostgresPetStore
        return PostgresPetStore()
    if backend == "memory":
        from saveup_pet.db.memory_store import InMemoryPetStore
        return InMemoryPetStore()

    from saveup_pet.exceptions import ConfigurationError
    raise ConfigurationError(f"Unknown storage backend '{backend}'", config_key="STORAGE_BACKEND")
