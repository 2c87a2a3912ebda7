"""Exception hierarchy for the Firebase REST client."""


class FirebaseError(Exception):
    """Base class for every error raised by firebase_rest."""


class RequestError(FirebaseError):
    """
    REST call failed at the transport layer or returned a non-2xx status.

    Attributes:
        status_code: HTTP status code (None for transport failures)
        body: Response body text (None when no response was received)
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DecodeError(FirebaseError):
    """Response or event body is not valid JSON."""

    def __init__(self, message: str, body: str) -> None:
        super().__init__(message)
        self.body = body


class StreamConnectionError(FirebaseError):
    """Streaming connection dropped, failed, or was ended by the server."""


class StreamStateError(FirebaseError):
    """Lifecycle call is not valid in the stream's current state."""
