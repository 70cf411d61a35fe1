"""Prometheus metrics endpoint"""
import logging
from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from saveup_pet.observability.metrics import pet_users
from saveup_pet.services.container import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


async def _refresh_pet_gauges() -> None:
    """Update gauges that are read from storage rather than counted in-process"""
    try:
        container = get_container()
    except RuntimeError:
        return
    pet_users.set(len(await container.store.list_user_ids()))


@router.get("/metrics")
async def metrics_endpoint():
    """Expose Prometheus metrics for the pet engine"""
    try:
        await _refresh_pet_gauges()
    except Exception as e:
        logger.warning(f"Could not refresh pet gauges from storage: {e}")

    try:
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )
    except Exception as e:
        logger.error(f"Error generating metrics: {e}", exc_info=True)
        return Response(
            content="Error generating metrics",
            status_code=500
        )
