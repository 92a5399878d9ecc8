"""Text extraction for chunks yielded by ``ChatOpenAI.astream``."""

from __future__ import annotations

from typing import Any, List, Union

ChunkContent = Union[str, List[Union[str, dict]]]


def _content_text(content: ChunkContent) -> str:
    if isinstance(content, str):
        return content

    # Content blocks; only text blocks carry completion tokens
    fragments = []
    for block in content:
        if isinstance(block, str):
            fragments.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            fragments.append(block.get("text") or "")
    return "".join(fragments)


def extract_chunk_text(chunk: Any) -> str:
    """Return the completion text carried by a streamed message chunk.

    Role-only and tool-call chunks have empty content and yield ``""``.
    """

    if chunk is None:
        return ""
    if isinstance(chunk, str):
        return chunk

    content = getattr(chunk, "content", None)
    if content is None:
        return ""
    return _content_text(content)
