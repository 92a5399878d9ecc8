"""Chat API router (streaming-only service)."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from instructor_rag.api.deps import get_chat_pipeline
from instructor_rag.core.errors import ValidationError
from instructor_rag.core.logging import get_logger
from instructor_rag.services.chat.pipeline import ChatPipeline

router = APIRouter()
logger = get_logger(__name__)

MEDIA_TYPE = "text/plain; charset=utf-8"


@router.post("/chat")
async def chat(
    request: Request,
    pipeline: ChatPipeline = Depends(get_chat_pipeline),
) -> StreamingResponse:
    """Stream an answer to the last message of a conversation history.

    The body is a JSON array of ``{role, content}`` messages. Failures
    before streaming starts become plain-text 400/500 responses through the
    app's exception handlers; failures mid-stream abort the body.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Request body is not valid JSON: {e}", field="body") from e

    body = await pipeline.run(payload)
    return StreamingResponse(body, media_type=MEDIA_TYPE)
