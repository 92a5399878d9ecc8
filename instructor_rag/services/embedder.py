"""OpenAI embedding client."""

from typing import List, Optional

from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings

from instructor_rag.core.config import Settings
from instructor_rag.core.errors import ErrorCategory, ProviderError, ValidationError
from instructor_rag.core.logging import get_logger

logger = get_logger(__name__)

STAGE = "embedding"


class OpenAIEmbedder:
    """Embeds the latest user message with an OpenAI embedding model."""

    def __init__(self, settings: Settings, embeddings: Optional[Embeddings] = None):
        self.model = settings.openai_embedding_model
        self.dimensions = settings.openai_embedding_dimensions
        self.embeddings = embeddings or self._create_embeddings(settings)

    def _create_embeddings(self, settings: Settings) -> Embeddings:
        if not settings.openai_api_key:
            raise ValueError("OpenAI API key not configured")

        logger.info("Creating OpenAI embeddings: %s", self.model)
        return OpenAIEmbeddings(
            api_key=settings.openai_api_key,
            model=self.model,
            dimensions=self.dimensions,
            max_retries=0,
        )

    async def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValidationError("Cannot embed empty text", field="content")

        try:
            vector = await self.embeddings.aembed_query(text)
        except Exception as e:
            error = ProviderError.from_exception(STAGE, e)
            logger.error("Embedding request failed: %s", e, extra=error.to_dict())
            raise error from e

        if not vector or not all(isinstance(value, (int, float)) for value in vector):
            logger.error("Embedding provider returned a malformed vector", extra={"stage": STAGE})
            raise ProviderError(
                "embedding request failed: malformed embedding response",
                stage=STAGE,
                category=ErrorCategory.MALFORMED_RESPONSE,
            )

        logger.debug("Embedded %d characters into %d dimensions", len(text), len(vector))
        return [float(value) for value in vector]
