"""Application factory."""
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from instructor_rag.api import chat, health
from instructor_rag.core.config import Settings, get_settings
from instructor_rag.core.container import ServiceContainer
from instructor_rag.core.errors import ProviderError, StreamError, ValidationError
from instructor_rag.core.lifecycle import lifespan
from instructor_rag.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to the cached environment settings.
        container: Pre-built service container (tests inject fakes through it).
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )
    app.state.settings = settings
    if container is not None:
        container.set_settings(settings)
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        # Measures time to first byte for streamed responses
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning(f"Validation error: {exc.message}", extra=exc.to_dict())
        return PlainTextResponse(
            f"Bad Request: {exc.message}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        logger.error(f"Error occurred during the request: {exc.message}", extra=exc.to_dict())
        return PlainTextResponse(
            f"Internal Server Error: {exc.message}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        if isinstance(exc, StreamError):
            # Headers are already sent; the response is discarded and the body aborted
            logger.warning(
                "Response stream aborted after %d chunks",
                exc.details.get("chunks_sent", 0),
                extra=exc.to_dict(),
            )
        else:
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return PlainTextResponse(
            f"Internal Server Error: {exc}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(chat.router, prefix=settings.api_prefix, tags=["chat"])

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "operational",
            "docs": f"{settings.api_prefix}/docs",
        }

    return app
