"""Writes semantic SSE events (connection, heartbeat, stream, error) to a sink."""

import asyncio
import time
from collections.abc import AsyncGenerator, Callable, Mapping
from typing import Any, Protocol

from .errors import StructuredError, normalize_error
from .sse import SSEEvent, format_sse_event


class SSESink(Protocol):
    """Destination for formatted SSE chunks, owned by the HTTP layer."""

    def accept(self, chunk: str) -> None: ...


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class SSEWriter:
    """
    Formats events and hands each one to the sink as a single chunk.

    The writer keeps no buffer between calls: every ``write_*`` method produces
    exactly one ``sink.accept`` call, in call order. Serialization and sink
    errors propagate to the caller untouched.

    Usage::

        writer = SSEWriter(sink)
        writer.write_connection(operation_id, last_event_id)
        writer.write_stream_event({"type": "progress", "percent": 40})
        writer.write_heartbeat()
    """

    def __init__(self, sink: SSESink, clock: Callable[[], int] | None = None):
        self._sink = sink
        self._clock = clock or now_ms

    def _timestamp(self, timestamp: int | None) -> int:
        return self._clock() if timestamp is None else timestamp

    def write_event(self, event: SSEEvent) -> None:
        self._sink.accept(format_sse_event(event))

    def write_connection(
        self,
        operation_id: str,
        last_event_id: str,
        timestamp: int | None = None,
    ) -> None:
        ts = self._timestamp(timestamp)
        self.write_event(SSEEvent(
            id=f"conn_{ts}",
            event="connected",
            data={
                "type": "connected",
                "operationId": operation_id,
                "lastEventId": last_event_id,
                "timestamp": ts,
            },
        ))

    def write_heartbeat(self, timestamp: int | None = None) -> None:
        ts = self._timestamp(timestamp)
        self.write_event(SSEEvent(
            id=f"heartbeat_{ts}",
            event="heartbeat",
            data={"timestamp": ts, "type": "heartbeat"},
        ))

    def write_stream_event(
        self,
        event_data: Mapping[str, Any],
        event_id: str | None = None,
        timestamp: int | None = None,
    ) -> None:
        """Emit ``event_data`` as-is; its ``type`` key names the event when it is a string."""
        if event_id is None:
            event_id = f"event_{self._timestamp(timestamp)}"

        event_type = event_data.get("type")
        self.write_event(SSEEvent(
            id=event_id,
            event=event_type if isinstance(event_type, str) else "stream",
            data=event_data,
        ))

    def write_error(
        self,
        err: Any,
        operation_id: str,
        phase: str | None = None,
        timestamp: int | None = None,
    ) -> None:
        ts = self._timestamp(timestamp)
        normalized = normalize_error(err)

        payload: dict[str, Any] = {
            "type": "error",
            "operationId": operation_id,
            "error": normalized.text,
            "phase": phase if phase is not None else "unknown",
            "timestamp": ts,
        }
        if isinstance(normalized, StructuredError) and normalized.stack is not None:
            payload["stack"] = normalized.stack

        self.write_event(SSEEvent(id=f"error_{ts}", event="error", data=payload))


_CLOSED = object()


class QueueSink:
    """
    Sink backed by an asyncio queue, bridging the synchronous writer to an
    async response body.

    The queue is unbounded; ``accept`` never blocks.
    """

    def __init__(self, queue: asyncio.Queue | None = None):
        self._queue: asyncio.Queue = queue if queue is not None else asyncio.Queue()

    def accept(self, chunk: str) -> None:
        self._queue.put_nowait(chunk)

    def close(self) -> None:
        self._queue.put_nowait(_CLOSED)

    async def drain(self) -> AsyncGenerator[str, None]:
        """Yield queued chunks until ``close`` is called."""
        while True:
            chunk = await self._queue.get()
            if chunk is _CLOSED:
                return
            yield chunk
