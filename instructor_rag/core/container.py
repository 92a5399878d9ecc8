"""Dependency injection container for service management.

Holds the settings and the three external service clients for the lifetime
of the application. Clients are stateless between requests; nothing
request-specific is stored here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from instructor_rag.core.logging import get_logger

if TYPE_CHECKING:
    from instructor_rag.core.config import Settings
    from instructor_rag.core.interfaces import Completer, Embedder, Retriever
    from instructor_rag.services.chat.pipeline import ChatPipeline

logger = get_logger(__name__)


class ServiceNotInitializedError(Exception):
    """Raised when accessing a service that hasn't been initialized."""

    def __init__(self, service_name: str):
        super().__init__(f"Service '{service_name}' has not been initialized. "
                         f"Call container.initialize() first.")
        self.service_name = service_name


@dataclass
class ServiceContainer:
    """Centralized container for dependency injection.

    Usage:
        container = ServiceContainer()
        await container.initialize(settings)

        pipeline = container.chat_pipeline()

        await container.shutdown()
    """

    _embedder: Optional[Embedder] = field(default=None, repr=False)
    _retriever: Optional[Retriever] = field(default=None, repr=False)
    _completer: Optional[Completer] = field(default=None, repr=False)
    _initialized: bool = field(default=False, repr=True)
    _settings: Optional[Settings] = field(default=None, repr=False)

    async def initialize(self, settings: Settings) -> None:
        """Create the provider clients.

        Clients already injected through the setters are kept.

        Raises:
            Exception: If any client fails to initialize.
        """
        if self._initialized:
            logger.warning("Container already initialized, skipping")
            return

        self._settings = settings
        logger.info("Initializing service container...")

        try:
            # Import here so tests with injected fakes never touch provider SDKs
            from instructor_rag.services.completer import OpenAICompleter
            from instructor_rag.services.embedder import OpenAIEmbedder
            from instructor_rag.services.retriever import PineconeRetriever

            if self._embedder is None:
                self._embedder = OpenAIEmbedder(settings)
                logger.info("Embedder initialized (%s)", settings.openai_embedding_model)

            if self._retriever is None:
                self._retriever = PineconeRetriever(settings)
                logger.info(
                    "Retriever initialized (%s/%s)",
                    settings.pinecone_index_name,
                    settings.pinecone_namespace,
                )

            if self._completer is None:
                self._completer = OpenAICompleter(settings)
                logger.info("Completer initialized (%s)", settings.openai_chat_model)

            self._initialized = True
            logger.info("Service container initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize service container: {e}")
            await self.shutdown()
            raise

    async def shutdown(self) -> None:
        """Release the provider clients."""
        logger.info("Shutting down service container...")
        self._embedder = None
        self._retriever = None
        self._completer = None
        self._initialized = False
        logger.info("Service container shut down")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise ServiceNotInitializedError("settings")
        return self._settings

    @property
    def embedder(self) -> Embedder:
        if self._embedder is None:
            raise ServiceNotInitializedError("embedder")
        return self._embedder

    @property
    def retriever(self) -> Retriever:
        if self._retriever is None:
            raise ServiceNotInitializedError("retriever")
        return self._retriever

    @property
    def completer(self) -> Completer:
        if self._completer is None:
            raise ServiceNotInitializedError("completer")
        return self._completer

    def chat_pipeline(self) -> ChatPipeline:
        """Build a pipeline over the current clients."""
        from instructor_rag.api.prompt_constants import CHAT_SYSTEM_PROMPT
        from instructor_rag.services.chat.pipeline import ChatPipeline

        return ChatPipeline(
            embedder=self.embedder,
            retriever=self.retriever,
            completer=self.completer,
            system_prompt=CHAT_SYSTEM_PROMPT,
        )

    def set_settings(self, settings: Settings) -> None:
        """Set the settings (for testing)."""
        self._settings = settings

    def set_embedder(self, embedder: Embedder) -> None:
        """Set the embedder (for testing)."""
        self._embedder = embedder

    def set_retriever(self, retriever: Retriever) -> None:
        """Set the retriever (for testing)."""
        self._retriever = retriever

    def set_completer(self, completer: Completer) -> None:
        """Set the completer (for testing)."""
        self._completer = completer
