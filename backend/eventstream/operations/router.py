import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from eventstream.operations.registry import OperationNotFound, OperationRegistry
from eventstream.stream import OperationStreamAdapter, sse_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/operations", tags=["operations"])


def get_registry(request: Request) -> OperationRegistry:
    return request.app.state.operations


@router.get("/{operation_id}/events")
async def stream_operation_events(
    operation_id: str,
    request: Request,
    registry: OperationRegistry = Depends(get_registry),
) -> StreamingResponse:
    try:
        source_factory = registry.get(operation_id)
    except OperationNotFound:
        raise HTTPException(status_code=404, detail="Operation not found")

    last_event_id = request.headers.get("Last-Event-ID", "")
    logger.info(
        "Opening event stream for operation %s (Last-Event-ID=%r)",
        operation_id, last_event_id,
    )

    adapter = OperationStreamAdapter(operation_id, last_event_id=last_event_id)
    return sse_response(adapter.stream(source_factory()))
