from fastapi import Depends, Request

from instructor_rag.core.config import Settings
from instructor_rag.core.container import ServiceContainer
from instructor_rag.services.chat.pipeline import ChatPipeline


def get_service_container(request: Request) -> ServiceContainer:
    """Get the service container from app state (lifespan managed)."""
    return request.app.state.container


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_chat_pipeline(
    container: ServiceContainer = Depends(get_service_container)
) -> ChatPipeline:
    return container.chat_pipeline()
