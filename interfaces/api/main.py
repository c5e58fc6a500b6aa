"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from application.ports.repositories.document_repository import DocumentRepository
from application.ports.repositories.folder_repository import FolderRepository
from application.ports.repositories.share_repository import ShareRepository
from infrastructure.config import settings
from infrastructure.logging import setup_logging
from infrastructure.notifications.kafka_publisher import KafkaPublisher
from interfaces.api.middleware import register_exception_handlers
from interfaces.api.routes.document_routes import router as document_router
from interfaces.api.routes.file_routes import router as file_router
from interfaces.api.routes.folder_routes import router as folder_router
from interfaces.api.routes.share_routes import router as share_router
from interfaces.dependencies import get_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info("app_starting", env=settings.app_env)
    container = get_container()

    # Unique indexes back the join-record invariants, so a failure here is fatal
    for port in (DocumentRepository, FolderRepository, ShareRepository):
        await container[port].ensure_indexes()
    logger.info("mongo_indexes_ensured")

    logger.info("app_ready")

    yield

    logger.info("app_shutting_down")
    if settings.notification_backend == "kafka":
        await container[KafkaPublisher].disconnect()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Document storage, sharing and streaming API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Disposition"],
    )

    register_exception_handlers(app)

    app.include_router(document_router)
    app.include_router(share_router)
    app.include_router(folder_router)
    app.include_router(file_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create app instance
app = create_app()
