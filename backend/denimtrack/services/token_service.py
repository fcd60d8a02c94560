# Overview: Service-layer operations for signed session tokens (issue and verify).

"""
Stateless session tokens.

Tokens are HS256-signed JWTs carrying the user's id, username and role, so
the authorization gate never needs a database round-trip. Validity window
is TOKEN_TTL_SECONDS (one hour by default); there is no server-side
revocation list.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from ..errors import UnauthorizedError


ALGORITHM = "HS256"
TOKEN_FAILED_MESSAGE = "Not authorized, token failed"


@dataclass(frozen=True)
class Identity:
    """Decoded token payload attached to the request as g.identity."""
    id: int
    username: str
    role: str


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def issue_token(user, *, now: datetime | None = None) -> str:
    """Sign a token for user, valid for TOKEN_TTL_SECONDS from now."""
    now = now or datetime.now(timezone.utc)
    ttl = timedelta(seconds=current_app.config["TOKEN_TTL_SECONDS"])
    payload = {
        "userId": user.id,
        "username": user.username,
        "role": user.role,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, _secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> Identity:
    """
    Verify signature and expiry and return the embedded identity.

    Raises UnauthorizedError for any invalid, tampered or expired token.
    """
    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError as exc:
        raise UnauthorizedError(TOKEN_FAILED_MESSAGE) from exc

    try:
        return Identity(
            id=int(payload["userId"]),
            username=str(payload["username"]),
            role=str(payload["role"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise UnauthorizedError(TOKEN_FAILED_MESSAGE) from exc
