import pytest

from eventstream.operations.registry import OperationNotFound, OperationRegistry


async def empty_source():
    return
    yield


def test_register_and_get():
    registry = OperationRegistry()
    registry.register("op_1", empty_source)

    assert "op_1" in registry
    assert registry.get("op_1") is empty_source


def test_get_unknown_operation():
    registry = OperationRegistry()

    with pytest.raises(OperationNotFound) as exc_info:
        registry.get("nope")

    assert exc_info.value.operation_id == "nope"
    assert isinstance(exc_info.value, KeyError)


def test_unregister():
    registry = OperationRegistry()
    registry.register("op_1", empty_source)
    registry.unregister("op_1")
    registry.unregister("op_1")

    assert "op_1" not in registry


def test_register_replaces_existing_source():
    async def other_source():
        yield {"type": "x"}

    registry = OperationRegistry()
    registry.register("op_1", empty_source)
    registry.register("op_1", other_source)

    assert registry.get("op_1") is other_source
