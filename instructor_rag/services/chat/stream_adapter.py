"""Relays completion text to the HTTP response body."""

from enum import Enum
from typing import AsyncIterator, Optional

from instructor_rag.core.errors import StreamError
from instructor_rag.core.logging import get_logger

logger = get_logger(__name__)


class StreamState(str, Enum):
    """Lifecycle of a relayed response stream."""
    OPEN = "open"
    EMITTING = "emitting"
    CLOSED = "closed"
    ERRORED = "errored"


TERMINAL_STATES = frozenset({StreamState.CLOSED, StreamState.ERRORED})


class StreamAdapter:
    """Single-pass async iterator of UTF-8 encoded completion chunks.

    Chunks are forwarded one at a time in arrival order; empty chunks are
    dropped. An upstream failure is logged and re-raised as StreamError so
    the server aborts the response instead of appending an error payload.
    The upstream iterator is closed exactly once on every exit path,
    including consumer disconnects.
    """

    def __init__(self, chunks: AsyncIterator[str], encoding: str = "utf-8"):
        self._chunks = chunks
        self._encoding = encoding
        self._consumed = False
        self._finalized = False
        self.state = StreamState.OPEN
        self.chunks_sent = 0
        self.error: Optional[BaseException] = None

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise RuntimeError("Response stream can only be consumed once")
        self._consumed = True
        return self._relay()

    async def _relay(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._chunks:
                if not chunk:
                    continue
                self.state = StreamState.EMITTING
                self.chunks_sent += 1
                yield chunk.encode(self._encoding)
        except Exception as e:
            self.state = StreamState.ERRORED
            self.error = e
            logger.error(
                "Error while streaming response: %s",
                e,
                exc_info=True,
                extra={"chunks_sent": self.chunks_sent},
            )
            raise StreamError(f"Completion stream failed: {e}", chunks_sent=self.chunks_sent) from e
        finally:
            await self._finalize()

    async def _finalize(self) -> None:
        if self._finalized:
            return
        self._finalized = True

        if self.state not in TERMINAL_STATES:
            self.state = StreamState.CLOSED

        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            try:
                await aclose()
            except Exception as e:
                logger.warning("Error closing upstream stream: %s", e)

        logger.info(
            "Response stream %s after %d chunks",
            self.state.value,
            self.chunks_sent,
        )

    async def aclose(self) -> None:
        """Release the upstream without consuming it."""
        await self._finalize()
