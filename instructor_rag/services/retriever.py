"""Pinecone retrieval client for instructor review records."""

import asyncio
from typing import Any, List, Optional

from pinecone import Pinecone
from pinecone.exceptions import NotFoundException

from instructor_rag.core.config import Settings
from instructor_rag.core.errors import ErrorCategory, ProviderError
from instructor_rag.core.logging import get_logger
from instructor_rag.models.query import InstructorMetadata, RetrievedRecord

logger = get_logger(__name__)

STAGE = "retrieval"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from an SDK response object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def match_to_record(match: Any) -> RetrievedRecord:
    """Normalise a Pinecone match into a RetrievedRecord."""
    metadata = _field(match, "metadata") or {}
    review = metadata.get("review")
    classes = metadata.get("classes") or []
    if isinstance(classes, str):
        classes = [classes]

    return RetrievedRecord(
        id=str(_field(match, "id")),
        score=_field(match, "score"),
        metadata=InstructorMetadata(
            review="" if review is None else str(review),
            classes=[str(c) for c in classes],
            stars=metadata.get("stars"),
        ),
    )


class PineconeRetriever:
    """Queries one namespace of a Pinecone index for the nearest instructors."""

    def __init__(self, settings: Settings, index: Optional[Any] = None):
        self.index_name = settings.pinecone_index_name
        self.namespace = settings.pinecone_namespace
        self.top_k = settings.retrieval_top_k
        self.include_metadata = settings.include_metadata
        self._api_key = settings.pinecone_api_key
        self._index = index

        if self._index is None and not self._api_key:
            raise ValueError("Pinecone API key not configured")

    def _get_index(self) -> Any:
        if self._index is None:
            logger.info("Connecting to Pinecone index: %s", self.index_name)
            self._index = Pinecone(api_key=self._api_key).Index(self.index_name)
        return self._index

    def _query(self, vector: List[float]) -> Any:
        return self._get_index().query(
            vector=vector,
            top_k=self.top_k,
            include_metadata=self.include_metadata,
            namespace=self.namespace,
        )

    async def retrieve(self, vector: List[float]) -> List[RetrievedRecord]:
        try:
            response = await asyncio.to_thread(self._query, vector)
        except NotFoundException as e:
            logger.warning(
                "Index %s/%s not found, continuing without context: %s",
                self.index_name,
                self.namespace,
                e,
            )
            return []
        except Exception as e:
            error = ProviderError.from_exception(STAGE, e)
            logger.error("Vector index query failed: %s", e, extra=error.to_dict())
            raise error from e

        try:
            records = [match_to_record(match) for match in (_field(response, "matches") or [])]
        except Exception as e:
            logger.error("Malformed vector index response: %s", e, extra={"stage": STAGE})
            raise ProviderError(
                f"retrieval request failed: malformed response ({e})",
                stage=STAGE,
                category=ErrorCategory.MALFORMED_RESPONSE,
            ) from e

        logger.info(
            "Retrieved %d records from %s/%s",
            len(records),
            self.index_name,
            self.namespace,
        )
        return records
