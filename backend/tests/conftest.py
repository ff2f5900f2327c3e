import pytest
from fastapi.testclient import TestClient

from eventstream.main import app
from eventstream.operations.registry import OperationRegistry


class RecordingSink:
    """Collects every chunk handed to it."""

    def __init__(self):
        self.chunks: list[str] = []

    def accept(self, chunk: str) -> None:
        self.chunks.append(chunk)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def clock():
    """Deterministic clock returning a fixed millisecond timestamp."""
    return lambda: 1_700_000_000_000


@pytest.fixture
def registry():
    """Replace the app registry with a fresh one for each test."""
    original = app.state.operations
    app.state.operations = OperationRegistry()
    yield app.state.operations
    app.state.operations = original


@pytest.fixture
def client(registry):
    return TestClient(app)
