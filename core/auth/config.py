"""
Single-user credentials, read from the environment on every call.
"""
from __future__ import annotations

import hmac
import logging
import os
from typing import Dict

from core.auth.passwords import verify_password

log = logging.getLogger("auth")

REQUIRED_VARS = ("ADMIN_USERNAME", "ADMIN_PASSWORD_HASH", "JWT_SECRET")


class AuthConfigError(RuntimeError):
    pass


def get_auth_config() -> Dict[str, str]:
    values = {name: (os.getenv(name) or "").strip() for name in REQUIRED_VARS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise AuthConfigError(f"Missing required auth environment variables: {', '.join(missing)}")
    return {
        "username": values["ADMIN_USERNAME"],
        "password_hash": values["ADMIN_PASSWORD_HASH"],
        "jwt_secret": values["JWT_SECRET"],
    }


def validate_auth_config() -> None:
    """Fail fast at startup when the login cannot possibly work."""
    get_auth_config()
    log.info("Auth configuration validated")


def check_credentials(username: str, password: str) -> bool:
    config = get_auth_config()
    if not hmac.compare_digest(username.encode("utf-8"), config["username"].encode("utf-8")):
        log.warning("Failed login attempt for username: %s", username)
        return False
    if not verify_password(password, config["password_hash"]):
        log.warning("Failed login attempt - invalid password for username: %s", username)
        return False
    return True


__all__ = [
    "REQUIRED_VARS",
    "AuthConfigError",
    "get_auth_config",
    "validate_auth_config",
    "check_credentials",
]
