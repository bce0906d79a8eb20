"""
Helpers for the login token (Bearer header or cookie) and current-user lookup.
"""
from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import Response

from app.errors import ApiError
from app.security import SECURE_COOKIES
from core.auth import TOKEN_EXPIRY, AuthConfigError, TokenExpired, TokenInvalid, decode_token

log = logging.getLogger("auth")

AUTH_COOKIE_NAME = "auth_token"
AUTH_COOKIE_MAX_AGE = int(TOKEN_EXPIRY.total_seconds())


def extract_token(request: Request) -> str | None:
    """Bearer token from the Authorization header, else the login cookie."""
    header = request.headers.get("authorization") or ""
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return request.cookies.get(AUTH_COOKIE_NAME) or None


def get_current_user(request: Request):
    """
    Return (user_dict, token) or (None, token) for the HTML pages.
    Never raises: an expired or forged token just means "not signed in".
    """
    token = extract_token(request)
    if not token:
        return None, None
    try:
        payload = decode_token(token)
    except (TokenExpired, TokenInvalid):
        return None, token
    except AuthConfigError:
        log.error("Auth configuration missing while checking a session")
        return None, token
    return {"username": payload["username"]}, token


def require_api_user(request: Request) -> dict:
    """FastAPI dependency guarding every /api route except login."""
    token = extract_token(request)
    if not token:
        raise ApiError(401, "Authorization token required")
    try:
        payload = decode_token(token)
    except TokenExpired:
        raise ApiError(401, "Token expired")
    except TokenInvalid:
        raise ApiError(401, "Invalid token")
    except AuthConfigError as exc:
        log.error("Auth middleware error: %s", exc)
        raise ApiError(500, "Internal server error")
    user = {"username": payload["username"]}
    request.state.user = user
    return user


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=AUTH_COOKIE_MAX_AGE,
        samesite="lax",
        secure=SECURE_COOKIES,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(AUTH_COOKIE_NAME)
