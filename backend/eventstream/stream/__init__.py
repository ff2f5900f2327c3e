"""Server-Sent Events formatting, writing and streaming."""

from .adapter import OperationStreamAdapter
from .errors import OpaqueError, StructuredError, normalize_error
from .response import sse_response
from .sse import SSEEvent, build_sse_headers, format_sse_event
from .writer import QueueSink, SSESink, SSEWriter

__all__ = [
    "OperationStreamAdapter",
    "OpaqueError",
    "QueueSink",
    "SSEEvent",
    "SSESink",
    "SSEWriter",
    "StructuredError",
    "build_sse_headers",
    "format_sse_event",
    "normalize_error",
    "sse_response",
]
