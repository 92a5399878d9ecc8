"""Chat services package for the retrieval-augmented chat pipeline."""

from instructor_rag.services.chat.context_assembler import augment_message, build_context
from instructor_rag.services.chat.pipeline import ChatPipeline, build_outbound_messages
from instructor_rag.services.chat.request_parser import parse_history
from instructor_rag.services.chat.stream_adapter import StreamAdapter, StreamState

__all__ = [
    "ChatPipeline",
    "StreamAdapter",
    "StreamState",
    "augment_message",
    "build_context",
    "build_outbound_messages",
    "parse_history",
]
