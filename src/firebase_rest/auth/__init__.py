"""
Auth token generation.

Tokens are HS256-signed JWTs carrying {v, d: {..., uid}, iat} plus optional
exp/nbf/admin/debug claims. They are passed as the auth query parameter on
every REST and streaming request.
"""

from firebase_rest.auth.models import TokenOptions
from firebase_rest.auth.generator import (
    MAX_TOKEN_LENGTH,
    MAX_UID_LENGTH,
    create_token,
    decode_token,
)

__all__ = [
    "TokenOptions",
    "MAX_TOKEN_LENGTH",
    "MAX_UID_LENGTH",
    "create_token",
    "decode_token",
]
