"""
Client for the Firebase realtime database REST API.

Generate a token, then read and write over HTTP or subscribe to changes:

    token = create_token("user-1", {"role": "admin"}, secret, TokenOptions(exp=24))

    with rest_client(url, token) as client:
        client.set(["users", "user-1"], {"name": "Ada"})
        client.get(["users", "user-1"])

    stream = streaming_client(url, ["users"], token)
    stream.on_event(print)
    stream.open()
    ...
    stream.close()
"""

import logging

from firebase_rest.auth import TokenOptions, create_token, decode_token
from firebase_rest.client import (
    ChangeEvent,
    ClientConfig,
    EventType,
    RestClient,
    StreamingClient,
    Subscription,
    rest_client,
    streaming_client,
)
from firebase_rest.errors import (
    DecodeError,
    FirebaseError,
    RequestError,
    StreamConnectionError,
    StreamStateError,
)
from firebase_rest.paths import decode_path, encode_path

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Auth
    "TokenOptions",
    "create_token",
    "decode_token",
    # Paths
    "encode_path",
    "decode_path",
    # Clients
    "ChangeEvent",
    "ClientConfig",
    "EventType",
    "RestClient",
    "StreamingClient",
    "Subscription",
    "rest_client",
    "streaming_client",
    # Errors
    "FirebaseError",
    "RequestError",
    "DecodeError",
    "StreamConnectionError",
    "StreamStateError",
]
