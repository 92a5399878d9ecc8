"""GET /api/health: liveness probe and effective configuration."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from instructor_rag.api.deps import get_settings_from_app
from instructor_rag.core.config import Settings

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings_from_app)) -> Dict[str, Any]:
    """Return service status without calling any external service."""
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "index": settings.pinecone_index_name,
        "namespace": settings.pinecone_namespace,
        "embedding_model": settings.openai_embedding_model,
        "chat_model": settings.openai_chat_model,
    }
