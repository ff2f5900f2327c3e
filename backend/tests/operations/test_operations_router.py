import json

from fastapi.testclient import TestClient

from eventstream.stream.sse import build_sse_headers


def make_source(*items):
    async def source():
        for item in items:
            yield item
    return source


def parse_events(body: str) -> list[dict]:
    events = []
    for block in body.strip("\n").split("\n\n"):
        fields = {}
        for line in block.split("\n"):
            name, _, value = line.partition(": ")
            fields[name] = value
        events.append(fields)
    return events


def test_stream_unknown_operation(client: TestClient):
    response = client.get("/operations/missing/events")

    assert response.status_code == 404
    assert response.json()["detail"] == "Operation not found"


def test_stream_operation_events(client: TestClient, registry):
    registry.register("op_1", make_source(
        {"type": "progress", "percent": 10},
        {"type": "result", "value": 42},
    ))

    response = client.get("/operations/op_1/events", headers={"Last-Event-ID": "event_1"})

    assert response.status_code == 200
    events = parse_events(response.text)
    assert [e["event"] for e in events] == ["connected", "progress", "result"]

    connected = json.loads(events[0]["data"])
    assert connected["operationId"] == "op_1"
    assert connected["lastEventId"] == "event_1"
    assert json.loads(events[2]["data"]) == {"type": "result", "value": 42}


def test_stream_without_last_event_id(client: TestClient, registry):
    registry.register("op_2", make_source())

    response = client.get("/operations/op_2/events")

    events = parse_events(response.text)
    assert len(events) == 1
    assert json.loads(events[0]["data"])["lastEventId"] == ""


def test_stream_response_headers(client: TestClient, registry):
    registry.register("op_3", make_source({"type": "done"}))

    response = client.get("/operations/op_3/events")

    for name, value in build_sse_headers().items():
        assert response.headers[name] == value


def test_stream_source_failure(client: TestClient, registry):
    async def failing():
        yield {"type": "progress"}
        raise ValueError("bad input")

    registry.register("op_4", failing)

    response = client.get("/operations/op_4/events")

    events = parse_events(response.text)
    assert events[-1]["event"] == "error"
    error = json.loads(events[-1]["data"])
    assert error["error"] == "bad input"
    assert error["phase"] == "streaming"
