"""Client configuration, change events, and callback subscriptions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class EventType(str, Enum):
    """Event names sent on the change stream."""
    PUT = "put"
    PATCH = "patch"
    KEEP_ALIVE = "keep-alive"
    CANCEL = "cancel"
    AUTH_REVOKED = "auth_revoked"


@dataclass
class ClientConfig:
    """
    Transport settings shared by the REST and streaming clients.

    Fields:
    - timeout: Seconds allowed for connecting and (REST only) reading a response.
      Streaming reads never time out.
    - headers: Extra headers sent with every request
    - verify: Verify TLS certificates
    """
    timeout: float | None = 10.0
    headers: dict[str, str] = field(default_factory=dict)
    verify: bool = True


@dataclass(frozen=True)
class ChangeEvent:
    """
    One event from the change stream.

    name is the SSE event name (see EventType). For put/patch events data is
    {"path": [...segments], "data": ...} with the path already split.
    """
    name: str
    data: Any


class Subscription:
    """Handle returned when registering a stream callback."""

    def __init__(self, unsubscribe: Callable[[], None]) -> None:
        self._unsubscribe = unsubscribe
        self.active = True

    def cancel(self) -> None:
        """Stop delivering to this callback (idempotent)."""
        if self.active:
            self.active = False
            self._unsubscribe()
