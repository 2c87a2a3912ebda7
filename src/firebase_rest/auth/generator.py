"""Signed token generation for authenticating REST and streaming requests."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import jwt

from firebase_rest.auth.models import TokenOptions

logger = logging.getLogger(__name__)

TOKEN_VERSION = 0
MAX_UID_LENGTH = 256
MAX_TOKEN_LENGTH = 1024
ALGORITHM = "HS256"


def _timestamp(moment: datetime) -> int:
    return int(moment.timestamp())


def create_token(
    uid: str,
    data: Mapping[str, Any],
    secret: str,
    options: TokenOptions | None = None,
) -> str | None:
    """
    Generate a signed auth token.

    Args:
        uid: Unique user identifier (must be shorter than 256 characters)
        data: Extra claims, readable in security rules as auth (not encrypted!)
        secret: Database secret used to sign the token
        options: Optional exp/nbf/admin/debug claims

    Returns:
        Compact HS256 token, or None if the uid is too long or the signed
        token would be 1024 characters or more. Callers must check for None.

    Notes:
        - A "uid" key in data is overwritten by the uid argument
        - exp and nbf are both measured from a single captured "now"
    """
    options = options or TokenOptions()
    now = datetime.now(timezone.utc)

    if len(uid) >= MAX_UID_LENGTH:
        logger.debug("Token rejected: uid too long (%d characters)", len(uid))
        return None

    payload: dict[str, Any] = {
        "v": TOKEN_VERSION,
        "d": {**data, "uid": uid},
        "iat": _timestamp(now),
    }
    if options.exp is not None:
        payload["exp"] = _timestamp(now + timedelta(hours=options.exp))
    if options.nbf is not None:
        payload["nbf"] = _timestamp(now + timedelta(hours=options.nbf))
    if options.admin:
        payload["admin"] = True
    if options.debug:
        payload["debug"] = True

    token = jwt.encode(payload, secret, algorithm=ALGORITHM)

    if len(token) >= MAX_TOKEN_LENGTH:
        logger.debug("Token rejected: token too large (%d characters)", len(token))
        return None

    return token


def decode_token(token: str, secret: str | None = None) -> dict[str, Any]:
    """
    Read the claims of a generated token.

    With a secret the signature is checked (time claims are not, a token
    generated with nbf is legitimately not yet valid). Without a secret the
    payload is returned unverified.

    Raises:
        jwt.InvalidTokenError: If the token is malformed or the signature is wrong
    """
    if secret is None:
        return jwt.decode(token, options={"verify_signature": False})

    return jwt.decode(
        token,
        secret,
        algorithms=[ALGORITHM],
        options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
    )
