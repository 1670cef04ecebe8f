# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local application imports
from .api.v1 import events_router, health_router
from .core.config import get_settings
from .di.container import get_container
from .domain.exceptions import PersistenceError
from .domain.repositories.event_repository import EventRepository
from .infrastructure.db.mongo_connection import close_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Wires the DI container, prepares the event store indexes and closes
    the database client on shutdown.
    """
    container = get_container()

    try:
        await container.get(EventRepository).ensure_indexes()
        logger.info("Event store ready")
    except PersistenceError as e:
        # Don't fail app startup if MongoDB is temporarily unavailable
        logger.error(f"Failed to prepare event store: {e}", exc_info=True)

    yield

    close_database()
    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - CORS middleware configuration
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    settings = get_settings()

    application = FastAPI(
        title="Helicopter Services Telemetry API",
        version="1.0.0",
        description="Event capture and near-real-time usage analytics",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, prefix="/api")
    application.include_router(events_router, prefix="/api/events")

    return application


# Create application instance
app = create_application()
