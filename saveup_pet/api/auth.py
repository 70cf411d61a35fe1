"""API key authentication with read and write scopes

Keys in API_KEYS may call every endpoint. Keys in API_READ_ONLY_KEYS (e.g.
for dashboards or the chat bot's status lookups) may only read pet state;
anything that changes gems, mood, XP or unlocks needs a write key.
"""
import hmac
import os
import logging
from enum import Enum
from typing import Dict, Optional

from fastapi import HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = logging.getLogger(__name__)

security = HTTPBearer()


class ApiKeyScope(str, Enum):
    READ = "read"
    WRITE = "write"


def _split_keys(env_var: str) -> list[str]:
    return [key.strip() for key in os.getenv(env_var, "").split(",") if key.strip()]


def get_api_keys() -> Dict[str, ApiKeyScope]:
    """
    Load configured keys with their scope

    A key listed in both variables gets write access.
    """
    keys = {key: ApiKeyScope.READ for key in _split_keys("API_READ_ONLY_KEYS")}
    keys.update({key: ApiKeyScope.WRITE for key in _split_keys("API_KEYS")})
    if not keys:
        logger.warning("No API_KEYS or API_READ_ONLY_KEYS configured in environment")
    return keys


def _scope_for(api_key: str, valid_keys: Dict[str, ApiKeyScope]) -> Optional[ApiKeyScope]:
    for key, scope in valid_keys.items():
        if hmac.compare_digest(key.encode(), api_key.encode()):
            return scope
    return None


def _authenticate(request: Request, credentials: HTTPAuthorizationCredentials) -> ApiKeyScope:
    user_id = request.path_params.get("user_id", "-")
    valid_keys = get_api_keys()

    if not valid_keys:
        logger.error("No API keys configured - rejecting all pet API requests")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    scope = _scope_for(credentials.credentials, valid_keys)
    if scope is None:
        logger.warning(
            f"Invalid API key for {request.method} {request.url.path} "
            f"(user {user_id}, key {credentials.credentials[:6]}...)"
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    return scope


async def verify_api_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> ApiKeyScope:
    """
    Accept any configured key (read endpoints)

    Raises:
        HTTPException: 503 if no keys are configured, 401 if the key is unknown
    """
    return _authenticate(request, credentials)


async def require_write_access(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> ApiKeyScope:
    """
    Accept only write keys (endpoints that change a user's pet)

    Raises:
        HTTPException: 403 for a valid read-only key, otherwise as verify_api_key
    """
    scope = _authenticate(request, credentials)
    if scope is not ApiKeyScope.WRITE:
        logger.warning(
            f"Read-only key used for {request.method} {request.url.path} "
            f"(user {request.path_params.get('user_id', '-')})"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key is read-only"
        )
    return scope
