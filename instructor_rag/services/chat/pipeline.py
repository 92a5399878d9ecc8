"""Retrieval-augmented chat pipeline.

Parse -> embed -> retrieve -> augment -> complete -> relay, strictly in
sequence. Only the final message is embedded, exactly once per request.
"""

import time
from typing import Any, List

from instructor_rag.core.interfaces import Completer, Embedder, Retriever
from instructor_rag.core.logging import get_logger
from instructor_rag.models.query import ChatMessage, ParsedHistory, RetrievedRecord
from instructor_rag.services.chat.context_assembler import augment_message
from instructor_rag.services.chat.request_parser import parse_history
from instructor_rag.services.chat.stream_adapter import StreamAdapter

logger = get_logger(__name__)


def build_outbound_messages(
    system_prompt: str,
    parsed: ParsedHistory,
    records: List[RetrievedRecord],
) -> List[ChatMessage]:
    """System prompt, prior turns unchanged, then the augmented last message."""
    return [
        ChatMessage(role="system", content=system_prompt),
        *parsed.prior,
        augment_message(parsed.last_message, records),
    ]


class ChatPipeline:
    """Answers a conversation using instructor records as context."""

    def __init__(
        self,
        embedder: Embedder,
        retriever: Retriever,
        completer: Completer,
        system_prompt: str,
    ):
        self.embedder = embedder
        self.retriever = retriever
        self.completer = completer
        self.system_prompt = system_prompt

    async def run(self, payload: Any) -> StreamAdapter:
        """Run every stage up to an open completion stream.

        Raises:
            ValidationError: malformed payload; no provider is called.
            ProviderError: embedding, retrieval or completion start failed.
        """
        started = time.perf_counter()
        parsed = parse_history(payload)
        query = parsed.last_message.content

        vector = await self.embedder.embed(query)
        records = await self.retriever.retrieve(vector)

        messages = build_outbound_messages(self.system_prompt, parsed, records)
        chunks = await self.completer.stream(messages)

        logger.info(
            "Chat pipeline ready in %.3fs",
            time.perf_counter() - started,
            extra={
                "history_length": len(parsed.history),
                "records": len(records),
                "instructors": [record.id for record in records],
            },
        )
        return StreamAdapter(chunks)
