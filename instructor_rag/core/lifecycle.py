"""Lifecycle management for the application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from instructor_rag.core.container import ServiceContainer
from instructor_rag.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger.info("Starting instructor RAG service...")

    settings = app.state.settings
    container = getattr(app.state, "container", None)
    if container is None:
        container = ServiceContainer()
        app.state.container = container

    try:
        if not container.is_initialized:
            await container.initialize(settings)
        logger.info("Instructor RAG service started successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise

    yield

    logger.info("Shutting down instructor RAG service...")
    await container.shutdown()
    logger.info("Instructor RAG service shut down")
