"""
CSRF tokens for the HTML forms, login rate limiting and response hardening.
"""
from __future__ import annotations

import hmac
import os
import secrets
import time
from typing import Dict, Tuple

CSRF_COOKIE_NAME = "csrf_token"
SECURE_COOKIES = (
    os.getenv("COOKIE_SECURE", "").lower() in ("1", "true", "yes")
    or os.getenv("PUBLIC_BASE_URL", "").lower().startswith("https://")
)

LOGIN_ATTEMPTS = 10
LOGIN_WINDOW_SECONDS = 300

# Product images are hot-linked from vendor sites, hence the open img-src.
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Content-Security-Policy": (
        "default-src 'self'; img-src 'self' data: https: http:; style-src 'self' 'unsafe-inline'; "
        "script-src 'self' 'unsafe-inline'; font-src 'self' data:; connect-src 'self';"
    ),
}


def apply_security_headers(response) -> None:
    """Add the hardening headers without overriding ones a route already set."""
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)


def issue_csrf_token(existing: str | None = None) -> str:
    """Re-use the token already in the cookie so open tabs stay valid."""
    return existing or secrets.token_urlsafe(16)


def attach_csrf_cookie(response, token: str) -> None:
    """Double-submit cookie: readable by the page, echoed back in a hidden field."""
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=False,
        samesite="lax",
        secure=SECURE_COOKIES,
    )


def validate_csrf(request, form_token: str | None) -> bool:
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME) or ""
    form_token = form_token or ""
    if not cookie_token or not form_token:
        return False
    return hmac.compare_digest(cookie_token, form_token)


def client_ip(request) -> str:
    client = getattr(request, "client", None)
    return getattr(client, "host", None) or "unknown"


# -------- Rate limiting (in-memory, per process) --------
_rate_state: Dict[str, list[float]] = {}


def allow_request_with_remaining(key: str, limit: int = 5, window_seconds: int = 60) -> Tuple[bool, int]:
    """
    Sliding-window limiter.
    Returns (allowed, attempts left in the current window).
    """
    now = time.time()
    window_start = now - window_seconds
    history = [t for t in _rate_state.get(key, []) if t > window_start]
    if len(history) >= limit:
        _rate_state[key] = history
        return False, 0
    history.append(now)
    _rate_state[key] = history
    return True, max(0, limit - len(history))


def allow_login_attempt(request) -> Tuple[bool, int]:
    return allow_request_with_remaining(
        f"login:{client_ip(request)}",
        limit=LOGIN_ATTEMPTS,
        window_seconds=LOGIN_WINDOW_SECONDS,
    )


def reset_rate_limits() -> None:
    _rate_state.clear()


__all__ = [
    "CSRF_COOKIE_NAME",
    "SECURITY_HEADERS",
    "apply_security_headers",
    "issue_csrf_token",
    "attach_csrf_cookie",
    "validate_csrf",
    "client_ip",
    "allow_request_with_remaining",
    "allow_login_attempt",
    "reset_rate_limits",
]
