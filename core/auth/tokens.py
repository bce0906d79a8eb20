"""
Signed, time-limited login tokens (HS256 JWT).
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict

import jwt

from core.auth.config import get_auth_config

TOKEN_EXPIRY = timedelta(days=30)
ALGORITHM = "HS256"


class TokenError(Exception):
    pass


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


def issue_token(username: str, now: datetime | None = None) -> str:
    secret = get_auth_config()["jwt_secret"]
    now = now or datetime.now(timezone.utc)
    payload = {
        "username": username,
        "iat": now,
        "exp": now + TOKEN_EXPIRY,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict:
    """Return the token payload; raise TokenExpired / TokenInvalid."""
    secret = get_auth_config()["jwt_secret"]
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "username"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenInvalid("Invalid token") from exc
    return payload


__all__ = [
    "TOKEN_EXPIRY",
    "TokenError",
    "TokenExpired",
    "TokenInvalid",
    "issue_token",
    "decode_token",
]
