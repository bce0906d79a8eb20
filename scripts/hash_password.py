"""
Print a bcrypt hash for ADMIN_PASSWORD_HASH.

Usage:
  python scripts/hash_password.py                 # prompts for the password
  python scripts/hash_password.py "my password"
"""
from __future__ import annotations

import getpass
import sys

from core.auth import hash_password


def main() -> None:
    password = " ".join(sys.argv[1:])
    if not password:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat password: "):
            raise SystemExit("Passwords do not match")
    if not password:
        raise SystemExit("Password must not be empty")
    print(hash_password(password))


if __name__ == "__main__":
    main()
