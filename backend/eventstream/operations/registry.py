"""In-memory registry of operation event sources served over SSE."""

import logging
from collections.abc import AsyncIterable, Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

EventSourceFactory = Callable[[], AsyncIterable[Mapping[str, Any]]]


class OperationNotFound(KeyError):
    """Raised when no event source is registered for an operation id."""

    def __init__(self, operation_id: str):
        super().__init__(operation_id)
        self.operation_id = operation_id


class OperationRegistry:
    """Maps operation ids to factories producing that operation's events.

    Each subscriber calls the factory to get its own event iterable.
    """

    def __init__(self):
        self._sources: dict[str, EventSourceFactory] = {}

    def __contains__(self, operation_id: str) -> bool:
        return operation_id in self._sources

    def register(self, operation_id: str, source_factory: EventSourceFactory) -> None:
        if operation_id in self._sources:
            logger.warning("Replacing event source for operation %s", operation_id)
        self._sources[operation_id] = source_factory

    def unregister(self, operation_id: str) -> None:
        self._sources.pop(operation_id, None)

    def get(self, operation_id: str) -> EventSourceFactory:
        try:
            return self._sources[operation_id]
        except KeyError:
            raise OperationNotFound(operation_id) from None
