"""
Adapter for converting an operation's event source into an SSE stream.

It manages the stream lifecycle (connected → events/heartbeats → end or error)
and writes every frame through an SSEWriter into a QueueSink that the response
body drains.

Usage:
    adapter = OperationStreamAdapter(operation_id, last_event_id=last_event_id)
    async for chunk in adapter.stream(operation_events):
        yield chunk
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator, Callable, Mapping
from typing import Any

from eventstream.settings import stream_settings

from .writer import QueueSink, SSEWriter

logger = logging.getLogger(__name__)


_EXHAUSTED = object()


async def _next_event(iterator: AsyncIterator[Mapping[str, Any]]) -> Any:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return _EXHAUSTED


async def _close_source(iterator: AsyncIterator[Any]) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is not None:
        await aclose()


class OperationStreamAdapter:
    """
    Converts an async iterable of event mappings into SSE chunks.

    Responsibilities:
    - Lifecycle: a connection event first, the stream ends with the source
    - Keep-alive: heartbeats while the source is idle
    - Error boundary: source failures are logged and surfaced as an error event
    """

    def __init__(
        self,
        operation_id: str,
        last_event_id: str = "",
        heartbeat_interval: float | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self._operation_id = operation_id
        self._last_event_id = last_event_id
        if heartbeat_interval is None:
            heartbeat_interval = stream_settings.heartbeat_interval_seconds
        self._heartbeat_interval = heartbeat_interval if heartbeat_interval > 0 else None
        self._clock = clock

    async def stream(self, events: AsyncIterable[Mapping[str, Any]]) -> AsyncGenerator[str, None]:
        """Main entry point. Yields SSE chunks until the source is exhausted or fails."""
        sink = QueueSink()
        writer = SSEWriter(sink, clock=self._clock)
        pump = asyncio.create_task(self._pump(events, writer, sink))

        try:
            async for chunk in sink.drain():
                yield chunk
            await pump
        finally:
            # Client went away before the source finished
            if not pump.done():
                pump.cancel()
                await asyncio.wait({pump})
                # Failures while closing the source still reach the caller
                if not pump.cancelled() and pump.exception() is not None:
                    raise pump.exception()

    async def _pump(
        self,
        events: AsyncIterable[Mapping[str, Any]],
        writer: SSEWriter,
        sink: QueueSink,
    ) -> None:
        iterator = events.__aiter__()
        pending: asyncio.Task | None = None
        try:
            writer.write_connection(self._operation_id, self._last_event_id)

            while True:
                if pending is None:
                    pending = asyncio.create_task(_next_event(iterator))

                done, _ = await asyncio.wait({pending}, timeout=self._heartbeat_interval)
                if not done:
                    writer.write_heartbeat()
                    continue

                task, pending = pending, None
                event_data = task.result()
                if event_data is _EXHAUSTED:
                    break

                event_id = event_data.get("id")
                writer.write_stream_event(
                    event_data,
                    event_id=event_id if isinstance(event_id, str) else None,
                )

            logger.debug("Operation %s stream finished", self._operation_id)

        except Exception as e:
            logger.exception("Operation %s stream failed", self._operation_id)
            writer.write_error(e, self._operation_id, phase="streaming")

        finally:
            sink.close()
            if pending is not None:
                pending.cancel()
                await asyncio.gather(pending, return_exceptions=True)
            await _close_source(iterator)
