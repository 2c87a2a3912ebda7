"""
REST and streaming clients.

- rest.py: blocking get/set/push/update over HTTP
- streaming.py: change stream over Server-Sent Events, delivered to callbacks
- transport.py: httpx client construction (auth parameter, timeouts)
"""

from firebase_rest.client.models import (
    ChangeEvent,
    ClientConfig,
    EventType,
    Subscription,
)
from firebase_rest.client.rest import RestClient, rest_client
from firebase_rest.client.streaming import StreamingClient, read_events, streaming_client, to_change_event

__all__ = [
    # Models
    "ChangeEvent",
    "ClientConfig",
    "EventType",
    "Subscription",
    # REST
    "RestClient",
    "rest_client",
    # Streaming
    "StreamingClient",
    "streaming_client",
    "read_events",
    "to_change_event",
]
