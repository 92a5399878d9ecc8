"""Renders retrieved instructor records into the last user message."""

from typing import List

from instructor_rag.models.query import ChatMessage, RetrievedRecord

CONTEXT_LABEL = "\n\nReturned results from vector db (done automatically): "


def render_record(record: RetrievedRecord) -> str:
    classes = ", ".join(record.metadata.classes)
    stars = record.metadata.stars
    # Pinecone returns numeric metadata as floats
    if isinstance(stars, float) and stars.is_integer():
        stars = int(stars)
    return (
        f"\nProfessor: {record.id}"
        f"\nReview: {record.metadata.review}"
        f"\nClasses: {classes}"
        f"\nStars: {stars}"
        "\n\n"
    )


def build_context(records: List[RetrievedRecord]) -> str:
    """Label followed by one block per record, in retrieval order."""
    return CONTEXT_LABEL + "".join(render_record(record) for record in records)


def augment_message(message: ChatMessage, records: List[RetrievedRecord]) -> ChatMessage:
    """Return a copy of ``message`` with the retrieved context appended."""
    return ChatMessage(role="user", content=message.content + build_context(records))
