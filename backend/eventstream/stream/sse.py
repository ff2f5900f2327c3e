"""Server-Sent Events (SSE) wire formatting and response headers."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, field_validator


class SSEEvent(BaseModel):
    """A single SSE message before serialization.

    Optional fields left as ``None`` are not rendered. An empty string is a
    value and still renders its line.
    """

    data: Any
    id: str | None = None
    event: str | None = None
    retry: int | None = None

    @field_validator("retry", mode="before")
    @classmethod
    def _reject_bool_retry(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("retry must be an integer number of milliseconds")
        return value


def _json_default(value: Any) -> Any:
    # Non-dict mappings (MappingProxyType, UserDict, ...) serialize as objects
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_data(data: Any) -> list[str]:
    if isinstance(data, str):
        return data.split("\n")
    return [json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=_json_default)]


def format_sse_event(event: SSEEvent) -> str:
    """Serialize an event into an SSE block terminated by a blank line."""
    lines: list[str] = []

    if event.id is not None:
        lines.append(f"id: {event.id}")
    if event.event is not None:
        lines.append(f"event: {event.event}")
    if event.retry is not None:
        lines.append(f"retry: {event.retry}")

    lines.extend(f"data: {segment}" for segment in _encode_data(event.data))

    return "\n".join(lines) + "\n\n"


def build_sse_headers() -> dict[str, str]:
    """Headers for a non-buffered, CORS-enabled GET event stream."""
    return {
        "Content-Type": "text/event-stream",
        "Cache-Control": "no-cache, no-transform",
        "Connection": "keep-alive",
        # Disables proxy buffering in nginx
        "X-Accel-Buffering": "no",
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET",
        "Access-Control-Allow-Headers": "Cache-Control, Last-Event-ID",
    }
