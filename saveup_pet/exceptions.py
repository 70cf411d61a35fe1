"""
Standardized exception hierarchy for the pet engine
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class SaveUpPetError(Exception):
    """
    Base exception for all pet engine errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise SaveUpPetError(
            message="Failed to save pet state",
            user_id="user-123",
            operation="feed_pet",
            context={"gems": 10}
        )
    """

    log_level = logging.ERROR

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Pet Engine Errors (recoverable, user-actionable)
# ==========================================

class PetEngineError(SaveUpPetError):
    """
    Base class for domain rule violations.

    These are expected outcomes of user actions (not enough gems, locked pet)
    and are logged at INFO rather than ERROR.
    """

    log_level = logging.INFO


class ValidationError(PetEngineError):
    """
    Raised when caller input fails validation

    Example:
        raise ValidationError(
            message="Amount must be positive",
            field="amount",
            value=-5,
            user_id="user-123"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


class PetNotFoundError(PetEngineError):
    """Pet id is not part of the catalog"""

    def __init__(self, pet_id: Any, **kwargs):
        self.pet_id = pet_id
        super().__init__(
            message=f"Unknown pet '{pet_id}'",
            user_message="That pet doesn't exist.",
            context={"pet_id": str(pet_id)},
            **kwargs
        )


class NotUnlockedError(PetEngineError):
    """Pet selected before it was unlocked"""

    def __init__(self, pet_id: str, **kwargs):
        self.pet_id = pet_id
        super().__init__(
            message=f"Pet '{pet_id}' is not unlocked yet",
            user_message="Pet not unlocked yet!",
            context={"pet_id": pet_id},
            **kwargs
        )


class InsufficientGemsError(PetEngineError):
    """Gem balance too low for the requested spend"""

    def __init__(self, required: int, available: int, **kwargs):
        self.required = required
        self.available = available
        super().__init__(
            message=f"Not enough gems: need {required}, have {available}",
            user_message="Not enough gems!",
            context={"required": required, "available": available},
            **kwargs
        )


class AlreadyUnlockedError(PetEngineError):
    """Pet is already in the user's unlocked set"""

    def __init__(self, pet_id: str, **kwargs):
        self.pet_id = pet_id
        super().__init__(
            message=f"Pet '{pet_id}' is already unlocked",
            user_message="Pet already unlocked!",
            context={"pet_id": pet_id},
            **kwargs
        )


class RequirementNotMetError(PetEngineError):
    """Unlock requirement of a pet is not satisfied"""

    def __init__(self, pet_id: str, progress: int = 0, **kwargs):
        self.pet_id = pet_id
        self.progress = progress
        super().__init__(
            message=f"Unlock requirement for '{pet_id}' not met ({progress}%)",
            user_message="Requirements not met!",
            context={"pet_id": pet_id, "progress": progress},
            **kwargs
        )


class AlreadyOwnedError(PetEngineError):
    """Accessory is already owned"""

    def __init__(self, accessory_id: str, **kwargs):
        self.accessory_id = accessory_id
        super().__init__(
            message=f"Accessory '{accessory_id}' is already owned",
            user_message="You already own this accessory.",
            context={"accessory_id": accessory_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(SaveUpPetError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )
