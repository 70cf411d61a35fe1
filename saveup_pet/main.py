"""Main entry point for the pet engine API server"""
import logging
import uvicorn

from saveup_pet.config import API_HOST, API_PORT, LOG_LEVEL

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the API server"""
    logger.info(f"Starting pet engine API on {API_HOST}:{API_PORT}")
    uvicorn.run(
        "saveup_pet.api.server:app",
        host=API_HOST,
        port=API_PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
