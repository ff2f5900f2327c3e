"""Normalizes arbitrary error values into the shape sent in SSE error events."""

import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StructuredError:
    """An error that carries a message and, when available, a stack trace."""

    message: str
    stack: str | None = None

    @property
    def text(self) -> str:
        return self.message


@dataclass(frozen=True)
class OpaqueError:
    """Any other value reported as an error, kept only as its string form."""

    value: str

    @property
    def text(self) -> str:
        return self.value


NormalizedError = StructuredError | OpaqueError


def _format_traceback(exc: BaseException) -> str | None:
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def normalize_error(err: Any) -> NormalizedError:
    """
    Classify ``err`` as a structured error or an opaque value.

    Exceptions use ``str(exc)`` as their message and only get a stack once they
    have been raised. Other objects (or mappings) count as structured when they
    expose a string ``message``; their ``stack`` is kept if it is a string.
    """
    if isinstance(err, BaseException):
        return StructuredError(message=str(err), stack=_format_traceback(err))

    if isinstance(err, Mapping):
        message = err.get("message")
        stack = err.get("stack")
    else:
        message = getattr(err, "message", None)
        stack = getattr(err, "stack", None)

    if isinstance(message, str):
        return StructuredError(
            message=message,
            stack=stack if isinstance(stack, str) else None,
        )

    return OpaqueError(value=str(err))
