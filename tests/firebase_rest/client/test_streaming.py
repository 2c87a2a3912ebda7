"""Tests for the streaming (SSE) client."""

from unittest.mock import patch

import httpx
import pytest
import respx
from sseclient import Event

from firebase_rest.client import ChangeEvent, EventType, StreamingClient, streaming_client, to_change_event
from firebase_rest.client import streaming as streaming_module
from firebase_rest.errors import DecodeError, StreamConnectionError, StreamStateError

BASE_URL = "https://test-db.firebaseio.com"
TOKEN = "test-token"

SSE_HEADERS = {"Content-Type": "text/event-stream"}


def _sse(*events: tuple[str, str]) -> bytes:
    return "".join(f"event: {name}\ndata: {data}\n\n" for name, data in events).encode()


def _run(stream: StreamingClient) -> tuple[list, list]:
    """Open a stream against a finite mocked body and collect what it delivers."""
    events: list = []
    errors: list = []
    stream.on_event(events.append)
    stream.on_error(errors.append)

    stream.open()
    assert stream.wait(timeout=5)
    stream.close()
    return events, errors


class TestToChangeEvent:
    """Conversion from raw SSE events."""

    def test_path_is_split(self):
        event = to_change_event(Event(event="put", data='{"path":"/a/b","other":1}'))
        assert event == ChangeEvent(name="put", data={"path": ["a", "b"], "other": 1})

    def test_root_path(self):
        event = to_change_event(Event(event="put", data='{"path":"/","data":{"x":1}}'))
        assert event.data == {"path": [], "data": {"x": 1}}

    def test_null_data_passes_through(self):
        event = to_change_event(Event(event="keep-alive", data="null"))
        assert event == ChangeEvent(name=EventType.KEEP_ALIVE.value, data=None)

    def test_string_data_passes_through(self):
        event = to_change_event(Event(event="auth_revoked", data='"credential is no longer valid"'))
        assert event.name == EventType.AUTH_REVOKED
        assert event.data == "credential is no longer valid"

    def test_invalid_json_raises(self):
        with pytest.raises(DecodeError) as exc_info:
            to_change_event(Event(event="put", data="{not json"))
        assert exc_info.value.body == "{not json"


@pytest.mark.respx(base_url=BASE_URL)
def test_events_delivered_in_order(respx_mock: respx.MockRouter):
    """Each server event reaches the callback once, in arrival order."""
    route = respx_mock.get("/rooms.json", params={"auth": TOKEN}).mock(
        return_value=httpx.Response(
            200,
            headers=SSE_HEADERS,
            content=_sse(
                ("put", '{"path":"/","data":{"lobby":{}}}'),
                ("put", '{"path":"/a/b","other":1}'),
                ("patch", '{"path":"/lobby","data":{"topic":"hi"}}'),
                ("keep-alive", "null"),
            ),
        )
    )

    events, errors = _run(streaming_client(BASE_URL, ["rooms"], TOKEN))

    assert events == [
        ChangeEvent("put", {"path": [], "data": {"lobby": {}}}),
        ChangeEvent("put", {"path": ["a", "b"], "other": 1}),
        ChangeEvent("patch", {"path": ["lobby"], "data": {"topic": "hi"}}),
        ChangeEvent("keep-alive", None),
    ]
    assert route.calls.last.request.headers["Accept"] == "text/event-stream"

    # The finite body ends the stream, which is reported as a disconnect
    assert len(errors) == 1
    assert isinstance(errors[0], StreamConnectionError)
    assert "ended by server" in str(errors[0])


@pytest.mark.respx(base_url=BASE_URL)
def test_every_callback_receives_events(respx_mock: respx.MockRouter):
    respx_mock.get("/.json").mock(
        return_value=httpx.Response(200, headers=SSE_HEADERS, content=_sse(("put", '{"path":"/","data":1}')))
    )
    stream = streaming_client(BASE_URL, [], TOKEN)
    second: list = []
    stream.on_event(second.append)

    events, _ = _run(stream)

    assert events == second == [ChangeEvent("put", {"path": [], "data": 1})]


@pytest.mark.respx(base_url=BASE_URL)
def test_cancelled_subscription_receives_nothing(respx_mock: respx.MockRouter):
    respx_mock.get("/.json").mock(
        return_value=httpx.Response(200, headers=SSE_HEADERS, content=_sse(("put", '{"path":"/","data":1}')))
    )
    stream = streaming_client(BASE_URL, [], TOKEN)
    cancelled: list = []
    subscription = stream.on_event(cancelled.append)
    subscription.cancel()

    events, _ = _run(stream)

    assert cancelled == []
    assert len(events) == 1
    assert subscription.active is False


@pytest.mark.respx(base_url=BASE_URL)
def test_failing_callback_does_not_stop_delivery(respx_mock: respx.MockRouter):
    """An exception in one callback is logged; other callbacks and later events still run."""
    respx_mock.get("/.json").mock(
        return_value=httpx.Response(
            200,
            headers=SSE_HEADERS,
            content=_sse(("put", '{"path":"/","data":1}'), ("put", '{"path":"/","data":2}')),
        )
    )

    def broken(event):
        raise RuntimeError("boom")

    stream = streaming_client(BASE_URL, [], TOKEN)
    stream.on_event(broken)

    events, _ = _run(stream)

    assert [e.data["data"] for e in events] == [1, 2]


@pytest.mark.respx(base_url=BASE_URL)
def test_invalid_event_json_is_reported_and_skipped(respx_mock: respx.MockRouter):
    respx_mock.get("/.json").mock(
        return_value=httpx.Response(
            200,
            headers=SSE_HEADERS,
            content=_sse(("put", "{broken"), ("put", '{"path":"/x","data":2}')),
        )
    )

    events, errors = _run(streaming_client(BASE_URL, [], TOKEN))

    assert events == [ChangeEvent("put", {"path": ["x"], "data": 2})]
    assert isinstance(errors[0], DecodeError)


@pytest.mark.respx(base_url=BASE_URL)
def test_http_error_is_reported(respx_mock: respx.MockRouter):
    """A rejected stream request reaches the error callbacks with its status."""
    respx_mock.get("/private.json").mock(return_value=httpx.Response(401, text="Permission denied"))

    events, errors = _run(streaming_client(BASE_URL, ["private"], TOKEN))

    assert events == []
    assert len(errors) == 1
    assert isinstance(errors[0], StreamConnectionError)
    assert "HTTP 401" in str(errors[0])
    assert "Permission denied" in str(errors[0])


@pytest.mark.respx(base_url=BASE_URL)
def test_transport_error_is_reported(respx_mock: respx.MockRouter):
    respx_mock.get("/.json").mock(side_effect=httpx.ConnectError("connection refused"))

    events, errors = _run(streaming_client(BASE_URL, [], TOKEN))

    assert events == []
    assert isinstance(errors[0], StreamConnectionError)
    assert "connection refused" in str(errors[0])


def test_redirect_is_followed(respx_mock: respx.MockRouter):
    """The stream follows the redirect to the server owning the data."""
    respx_mock.get(f"{BASE_URL}/rooms.json").mock(
        return_value=httpx.Response(
            307, headers={"Location": "https://s-usc1.firebaseio.com/rooms.json?auth=test-token"}
        )
    )
    respx_mock.get("https://s-usc1.firebaseio.com/rooms.json").mock(
        return_value=httpx.Response(200, headers=SSE_HEADERS, content=_sse(("put", '{"path":"/","data":1}')))
    )

    events, _ = _run(streaming_client(BASE_URL, ["rooms"], TOKEN))

    assert events == [ChangeEvent("put", {"path": [], "data": 1})]


class TestLifecycle:
    """Open/closed state handling (listener replaced, no network)."""

    @pytest.fixture(autouse=True)
    def idle_listener(self):
        def listen(self, listener):
            listener.stop.wait(5)

        with patch.object(StreamingClient, "_listen", listen):
            yield

    def test_initially_closed(self):
        stream = streaming_client(BASE_URL, ["rooms"], TOKEN)
        assert stream.is_open is False
        assert stream.resource == "rooms.json"

    def test_open_then_close(self):
        stream = streaming_client(BASE_URL, [], TOKEN)

        stream.open()
        assert stream.is_open is True

        stream.close()
        assert stream.is_open is False

    def test_open_twice_raises(self):
        stream = streaming_client(BASE_URL, [], TOKEN)
        stream.open()
        try:
            with pytest.raises(StreamStateError):
                stream.open()
        finally:
            stream.close()

    def test_close_is_idempotent(self):
        stream = streaming_client(BASE_URL, [], TOKEN)
        stream.close()
        stream.open()
        stream.close()
        stream.close()
        assert stream.is_open is False

    def test_reopen_after_close(self):
        stream = streaming_client(BASE_URL, [], TOKEN)
        stream.open()
        stream.close()

        stream.open()
        assert stream.is_open is True
        stream.close()

    def test_context_manager_closes(self):
        with streaming_client(BASE_URL, [], TOKEN) as stream:
            stream.open()
            assert stream.is_open is True
        assert stream.is_open is False

    def test_module_level_helpers(self):
        stream = streaming_client(BASE_URL, [], TOKEN)
        received: list = []
        streaming_module.on_event(stream, received.append)

        streaming_module.open(stream)
        assert stream.is_open is True
        streaming_module.close(stream)
        assert stream.is_open is False

    def test_wait_without_open_returns_immediately(self):
        assert streaming_client(BASE_URL, [], TOKEN).wait(timeout=0) is True
