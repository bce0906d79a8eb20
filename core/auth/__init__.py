"""
Single-user authentication helpers.
"""
from core.auth.config import (
    AuthConfigError,
    check_credentials,
    get_auth_config,
    validate_auth_config,
)
from core.auth.passwords import hash_password, verify_password
from core.auth.tokens import (
    TOKEN_EXPIRY,
    TokenError,
    TokenExpired,
    TokenInvalid,
    decode_token,
    issue_token,
)

__all__ = [
    "AuthConfigError",
    "check_credentials",
    "get_auth_config",
    "validate_auth_config",
    "hash_password",
    "verify_password",
    "TOKEN_EXPIRY",
    "TokenError",
    "TokenExpired",
    "TokenInvalid",
    "decode_token",
    "issue_token",
]
