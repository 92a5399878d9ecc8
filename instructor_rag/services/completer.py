"""OpenAI streaming chat completion client."""

from typing import Any, AsyncIterator, List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI

from instructor_rag.core.config import Settings
from instructor_rag.core.errors import ProviderError
from instructor_rag.core.logging import get_logger
from instructor_rag.models.query import ChatMessage
from instructor_rag.utils.message_utils import build_langchain_messages
from instructor_rag.utils.streaming_utils import extract_chunk_text

logger = get_logger(__name__)

STAGE = "completion"

_EXHAUSTED = object()


class OpenAICompleter:
    """Streams chat completions from an OpenAI chat model."""

    def __init__(self, settings: Settings, llm: Optional[BaseChatModel] = None):
        self.model = settings.openai_chat_model
        self.llm = llm or self._create_llm(settings)

    def _create_llm(self, settings: Settings) -> BaseChatModel:
        if not settings.openai_api_key:
            raise ValueError("OpenAI API key not configured")

        logger.info("Creating OpenAI LLM for model: %s", self.model)
        return ChatOpenAI(
            api_key=settings.openai_api_key,
            model=self.model,
            streaming=True,
            max_retries=0,
        )

    async def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        """Open the completion stream.

        The first chunk is awaited here so that a rejected request surfaces
        as a ProviderError before any response bytes are written. Errors
        after that point propagate out of the returned iterator.
        """
        upstream = self.llm.astream(build_langchain_messages(messages))

        try:
            first = await upstream.__anext__()
        except StopAsyncIteration:
            first = _EXHAUSTED
        except Exception as e:
            await _close_quietly(upstream)
            error = ProviderError.from_exception(STAGE, e)
            logger.error("Chat completion request failed: %s", e, extra=error.to_dict())
            raise error from e

        logger.info("Completion stream opened (model=%s, messages=%d)", self.model, len(messages))
        return _relay(first, upstream)


async def _relay(first: Any, upstream: AsyncIterator[Any]) -> AsyncIterator[str]:
    try:
        if first is _EXHAUSTED:
            return
        yield extract_chunk_text(first)
        async for chunk in upstream:
            yield extract_chunk_text(chunk)
    finally:
        await _close_quietly(upstream)


async def _close_quietly(upstream: AsyncIterator[Any]) -> None:
    aclose = getattr(upstream, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception as e:
        logger.warning("Error closing completion stream: %s", e)
