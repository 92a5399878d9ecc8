"""Shared test fixtures for instructor RAG service tests."""

from typing import AsyncIterator, List, Optional

import pytest

from instructor_rag.core.config import Settings
from instructor_rag.core.container import ServiceContainer
from instructor_rag.core.errors import ProviderError
from instructor_rag.models.query import ChatMessage, InstructorMetadata, RetrievedRecord


# ============================================================================
# Fake provider clients
# ============================================================================

class FakeEmbedder:
    """Embedder that records its inputs."""

    def __init__(self, vector: Optional[List[float]] = None, error: Optional[Exception] = None):
        self.vector = vector or [0.1, 0.2, 0.3]
        self.error = error
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.vector)


class FakeRetriever:
    """Retriever returning canned records."""

    def __init__(self, records: Optional[List[RetrievedRecord]] = None, error: Optional[Exception] = None):
        self.records = records or []
        self.error = error
        self.calls: List[List[float]] = []

    async def retrieve(self, vector: List[float]) -> List[RetrievedRecord]:
        self.calls.append(vector)
        if self.error is not None:
            raise self.error
        return list(self.records)


class FakeCompleter:
    """Completer streaming canned chunks, optionally failing part-way."""

    def __init__(
        self,
        chunks: Optional[List[str]] = None,
        start_error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
    ):
        self.chunks = chunks if chunks is not None else ["Hello", ", ", "world"]
        self.start_error = start_error
        self.fail_after = fail_after
        self.calls: List[List[ChatMessage]] = []

    async def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        self.calls.append(list(messages))
        if self.start_error is not None:
            raise self.start_error
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        for position, chunk in enumerate(self.chunks):
            if self.fail_after is not None and position >= self.fail_after:
                raise RuntimeError("upstream connection reset")
            yield chunk


# ============================================================================
# Settings / container fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Settings with dummy credentials and no .env lookup."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        pinecone_api_key="pc-test",
        log_format="text",
    )


@pytest.fixture
def professor_record():
    return RetrievedRecord(
        id="Professor X",
        score=0.91,
        metadata=InstructorMetadata(review="Clear lectures", classes=["CS101"], stars=4),
    )


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def fake_retriever(professor_record):
    return FakeRetriever(records=[professor_record])


@pytest.fixture
def fake_completer():
    return FakeCompleter()


@pytest.fixture
def fake_container(settings, fake_embedder, fake_retriever, fake_completer):
    """Service container wired with fakes, no provider SDKs involved."""
    container = ServiceContainer()
    container.set_settings(settings)
    container.set_embedder(fake_embedder)
    container.set_retriever(fake_retriever)
    container.set_completer(fake_completer)
    return container


@pytest.fixture
def embedding_failure():
    return ProviderError("embedding request failed: Connection refused", stage="embedding")
