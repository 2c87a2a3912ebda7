"""Real-time change stream client (Server-Sent Events)."""

import json
import logging
import socket
import threading
from typing import Callable, Iterable, Iterator

import httpx
from sseclient import Event, SSEClient

from firebase_rest.client.models import ChangeEvent, ClientConfig, Subscription
from firebase_rest.client.transport import build_http_client
from firebase_rest.errors import DecodeError, FirebaseError, StreamConnectionError, StreamStateError
from firebase_rest.paths import decode_path, encode_path

logger = logging.getLogger(__name__)

EVENT_STREAM = "text/event-stream"
CLOSE_JOIN_TIMEOUT = 5.0

EventCallback = Callable[[ChangeEvent], None]
ErrorCallback = Callable[[FirebaseError], None]


def read_events(chunks: Iterable[bytes]) -> Iterator[Event]:
    """
    Parse a raw event-stream body into SSE events.

    Events without data (e.g. a lone "data:" line) are skipped.
    """
    for sse in SSEClient(chunks).events():
        if sse.data:
            yield sse


def to_change_event(sse: Event) -> ChangeEvent:
    """
    Convert a raw SSE event into a ChangeEvent.

    The data is JSON-decoded and, when it is an object with a string "path",
    that path is split into segments.

    Raises:
        DecodeError: If the event data is not valid JSON
    """
    try:
        data = json.loads(sse.data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON in {sse.event} event: {e}", body=sse.data) from e

    if isinstance(data, dict) and isinstance(data.get("path"), str):
        data = {**data, "path": decode_path(data["path"])}

    return ChangeEvent(name=sse.event, data=data)


class _Listener:
    """State of one open(): its own stop flag, HTTP client, response and thread."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http
        self.stop = threading.Event()
        self.response: httpx.Response | None = None
        self.thread: threading.Thread | None = None

    @property
    def stopped(self) -> bool:
        return self.stop.is_set()

    def interrupt(self) -> None:
        """Set the stop flag and wake a read blocked on the socket."""
        self.stop.set()

        response = self.response
        if response is None:
            return
        network_stream = response.extensions.get("network_stream")
        sock = network_stream.get_extra_info("socket") if network_stream is not None else None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug("Socket already shut down: %s", e)


class StreamingClient:
    """
    Subscription to changes under one database path.

    Lifecycle is Closed -> open() -> Open -> close() -> Closed. While open, a
    single background thread reads the stream and calls every registered
    event callback, in arrival order, on that thread. A slow callback delays
    later events.

    Register callbacks with on_event() before open(), or the first events
    (including the initial snapshot) may be missed.

    Connection failures are reported to on_error() callbacks and close the
    stream. There is no reconnection; open() again or build a new client.
    A closed connection never delivers to callbacks, even after a reopen.
    """

    def __init__(
        self,
        root_url: str,
        path: Iterable[object],
        token: str | None,
        config: ClientConfig | None = None,
    ) -> None:
        self.root_url = root_url
        self.path = list(path)
        self.resource = encode_path(self.path)
        self._token = token
        self._config = config
        self._event_callbacks: tuple[EventCallback, ...] = ()
        self._error_callbacks: tuple[ErrorCallback, ...] = ()
        self._listener: _Listener | None = None

    @property
    def is_open(self) -> bool:
        listener = self._listener
        return (
            listener is not None
            and listener.thread is not None
            and listener.thread.is_alive()
            and not listener.stopped
        )

    def on_event(self, callback: EventCallback) -> Subscription:
        """
        Register a callback for every change event.

        Returns:
            Subscription whose cancel() stops delivery to this callback
        """
        self._event_callbacks = self._event_callbacks + (callback,)

        def unsubscribe() -> None:
            self._event_callbacks = tuple(cb for cb in self._event_callbacks if cb is not callback)

        return Subscription(unsubscribe)

    def on_error(self, callback: ErrorCallback) -> Subscription:
        """Register a callback for connection failures and undecodable events."""
        self._error_callbacks = self._error_callbacks + (callback,)

        def unsubscribe() -> None:
            self._error_callbacks = tuple(cb for cb in self._error_callbacks if cb is not callback)

        return Subscription(unsubscribe)

    def open(self) -> None:
        """
        Connect and start delivering events on a background thread.

        Raises:
            StreamStateError: If the stream is already open
        """
        if self.is_open:
            raise StreamStateError(f"Stream {self.resource} is already open")

        listener = _Listener(build_http_client(self.root_url, self._token, self._config, streaming=True))
        listener.thread = threading.Thread(
            target=self._listen,
            args=(listener,),
            name=f"firebase-stream:{self.resource}",
            daemon=True,
        )
        self._listener = listener
        listener.thread.start()

    def close(self) -> None:
        """Stop listening and release the connection (no-op if already closed)."""
        listener, self._listener = self._listener, None
        if listener is None:
            return

        listener.interrupt()
        thread = listener.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=CLOSE_JOIN_TIMEOUT)
            if thread.is_alive():
                # Still connecting; the stop flag keeps it from delivering anything
                listener.http.close()

        logger.info("Stream %s closed", self.resource)

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until the listener thread exits.

        Returns:
            True if no listener is running when this returns
        """
        listener = self._listener
        if listener is None or listener.thread is None:
            return True
        listener.thread.join(timeout)
        return not listener.thread.is_alive()

    def __enter__(self) -> "StreamingClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _listen(self, listener: _Listener) -> None:
        try:
            with listener.http.stream("GET", self.resource, headers={"Accept": EVENT_STREAM}) as response:
                listener.response = response
                if listener.stopped:
                    return
                if response.is_error:
                    response.read()
                    self._report_error(listener, StreamConnectionError(
                        f"HTTP {response.status_code} opening stream {self.resource}: {response.text}"
                    ))
                    return

                logger.info("Stream %s opened", self.resource)
                for sse in read_events(response.iter_bytes()):
                    if listener.stopped:
                        return
                    self._dispatch(listener, sse)

            self._report_error(listener, StreamConnectionError(f"Stream {self.resource} ended by server"))
        except (httpx.HTTPError, httpx.StreamError) as e:
            self._report_error(listener, StreamConnectionError(f"Stream {self.resource} failed: {e}"))
        finally:
            listener.http.close()

    def _dispatch(self, listener: _Listener, sse: Event) -> None:
        try:
            event = to_change_event(sse)
        except DecodeError as e:
            self._report_error(listener, e)
            return

        for callback in self._event_callbacks:
            if listener.stopped:
                return
            try:
                callback(event)
            except Exception:
                logger.exception("Event callback failed for %s event on %s", event.name, self.resource)

    def _report_error(self, listener: _Listener, error: FirebaseError) -> None:
        # Failures caused by close() itself are expected
        if listener.stopped:
            logger.debug("Ignoring %s after close: %s", type(error).__name__, error)
            return

        logger.warning("%s", error)
        for callback in self._error_callbacks:
            try:
                callback(error)
            except Exception:
                logger.exception("Error callback failed on %s", self.resource)


def streaming_client(
    root_url: str,
    path: Iterable[object],
    token: str | None,
    config: ClientConfig | None = None,
) -> StreamingClient:
    """Create a (closed) streaming client for changes under path."""
    return StreamingClient(root_url, path, token, config)


def open(client: StreamingClient) -> None:  # noqa: A001
    client.open()


def close(client: StreamingClient) -> None:
    client.close()


def on_event(client: StreamingClient, callback: EventCallback) -> Subscription:
    return client.on_event(callback)
