"""Protocol definitions for the external service clients.

The chat pipeline only depends on these interfaces, so tests can
substitute fakes for the hosted embedding, vector index and chat
completion services.
"""

from typing import AsyncIterator, List, Protocol, runtime_checkable

from instructor_rag.models.query import ChatMessage, RetrievedRecord


@runtime_checkable
class Embedder(Protocol):
    """Interface for text embedding."""

    async def embed(self, text: str) -> List[float]:
        """Embed a single text.

        Args:
            text: Non-empty text to embed.

        Returns:
            The embedding vector.
        """
        ...


@runtime_checkable
class Retriever(Protocol):
    """Interface for vector index queries."""

    async def retrieve(self, vector: List[float]) -> List[RetrievedRecord]:
        """Return the nearest records for a vector.

        Args:
            vector: Query embedding.

        Returns:
            Up to top-k records, in the order the index returned them.
        """
        ...


@runtime_checkable
class Completer(Protocol):
    """Interface for streaming chat completion."""

    async def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        """Open a streaming completion.

        Args:
            messages: Full outbound message list, system prompt first.

        Returns:
            Single-pass iterator of text fragments.
        """
        ...
