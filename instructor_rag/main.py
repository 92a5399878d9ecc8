"""Main FastAPI application for the instructor RAG service."""

from instructor_rag.core.app_factory import create_app
from instructor_rag.core.config import get_settings

settings = get_settings()
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "instructor_rag.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers,
        log_level=settings.log_level.lower(),
    )
