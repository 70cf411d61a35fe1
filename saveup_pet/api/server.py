"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from saveup_pet import __version__
from saveup_pet.api.routes import router
from saveup_pet.api.metrics_routes import router as metrics_router
from saveup_pet.api.middleware import setup_cors, setup_error_handlers, setup_rate_limiting
from saveup_pet.config import ENABLE_DECAY_SCHEDULER, LOG_LEVEL, STORAGE_BACKEND, validate_config
from saveup_pet.db.connection import db
from saveup_pet.observability.sentry_config import init_sentry, shutdown_sentry
from saveup_pet.services.container import init_container, reset_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting pet engine API...")
    validate_config()
    init_sentry()

    if STORAGE_BACKEND == "postgres":
        await db.init_pool()
        logger.info("Database pool initialized")

    container = init_container()

    if ENABLE_DECAY_SCHEDULER:
        await container.decay_scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down pet engine API...")
    await container.decay_scheduler.stop()

    if db.is_initialized:
        await db.close_pool()
        logger.info("Database pool closed")

    reset_container()
    shutdown_sentry()


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="SaveUp Pet Engine API",
        description="Virtual pet rewards: gems, moods, levels and unlocks",
        version=__version__,
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)
    setup_error_handlers(app)

    # Include routes
    app.include_router(router)
    app.include_router(metrics_router)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
