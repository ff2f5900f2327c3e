from collections.abc import AsyncIterable

from fastapi.responses import StreamingResponse

from .sse import build_sse_headers


def sse_response(chunks: AsyncIterable[str]) -> StreamingResponse:
    """Wrap SSE chunks in a streaming response carrying the SSE header set."""
    return StreamingResponse(chunks, headers=build_sse_headers())
