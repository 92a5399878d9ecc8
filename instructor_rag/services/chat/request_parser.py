"""Validation of the inbound conversation history."""

from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from instructor_rag.core.errors import ValidationError
from instructor_rag.core.logging import get_logger
from instructor_rag.models.query import ChatMessage, ParsedHistory

logger = get_logger(__name__)

_ENTRY_ADAPTER = TypeAdapter(ChatMessage)


def parse_history(payload: Any) -> ParsedHistory:
    """Validate a decoded JSON body as an ordered list of chat messages.

    Raises:
        ValidationError: if the payload is not a non-empty list of
            ``{role, content}`` objects or the last message has no text.
    """
    if not isinstance(payload, list):
        raise ValidationError(
            "Request body must be a JSON array of messages",
            field="body",
            value=type(payload).__name__,
        )

    if not payload:
        raise ValidationError("Message history is empty", field="body")

    last = payload[-1]
    last_content = last.get("content") if isinstance(last, dict) else None
    if not isinstance(last_content, str) or not last_content.strip():
        raise ValidationError(
            "Last message has no text content",
            field=f"[{len(payload) - 1}].content",
        )

    history = []
    for position, entry in enumerate(payload):
        try:
            history.append(_ENTRY_ADAPTER.validate_python(entry))
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            field = f"[{position}].{location}" if location else f"[{position}]"
            raise ValidationError(
                f"Invalid message at position {position}: {first.get('msg')}",
                field=field,
            ) from e

    logger.debug("Parsed history with %d messages", len(history))
    return ParsedHistory(history=history)
