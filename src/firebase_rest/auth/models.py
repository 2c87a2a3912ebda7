"""Token generation options."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenOptions:
    """
    Optional claims for a generated token.

    Fields:
    - exp: Hours from generation until the token expires (None: no expiry claim)
    - nbf: Hours from generation until the token becomes valid (None: no claim)
    - admin: Grant complete read/write access to the whole database
    - debug: Ask the server for verbose security rule errors
    """
    exp: float | None = None
    nbf: float | None = None
    admin: bool = False
    debug: bool = False
