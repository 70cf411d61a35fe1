"""API middleware for rate limiting, CORS and domain error mapping"""
import logging
import os
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from saveup_pet.exceptions import (
    AlreadyOwnedError,
    AlreadyUnlockedError,
    InsufficientGemsError,
    NotUnlockedError,
    PetEngineError,
    PetNotFoundError,
    RequirementNotMetError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)

ERROR_STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PetNotFoundError: status.HTTP_404_NOT_FOUND,
    NotUnlockedError: status.HTTP_409_CONFLICT,
    InsufficientGemsError: status.HTTP_409_CONFLICT,
    AlreadyUnlockedError: status.HTTP_409_CONFLICT,
    RequirementNotMetError: status.HTTP_409_CONFLICT,
    AlreadyOwnedError: status.HTTP_409_CONFLICT,
}


def status_code_for(exc: PetEngineError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return status.HTTP_400_BAD_REQUEST


async def pet_engine_error_handler(request: Request, exc: PetEngineError) -> JSONResponse:
    """Render a rejected pet operation as a 4xx response"""
    body = exc.to_dict()
    body.update({k: v for k, v in exc.context.items() if k not in body})
    return JSONResponse(status_code=status_code_for(exc), content=jsonable_encoder(body))


def setup_cors(app):
    """Configure CORS middleware"""
    cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    cors_origins = [origin.strip() for origin in cors_origins if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"CORS configured for origins: {cors_origins}")


def setup_rate_limiting(app):
    """Configure rate limiting"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info("Rate limiting configured")


def setup_error_handlers(app):
    """Map domain errors to HTTP status codes"""
    app.add_exception_handler(PetEngineError, pet_engine_error_handler)
