"""
URL validation for the import endpoint (blocks requests to private/local hosts).
"""
from __future__ import annotations

import ipaddress
import socket
from typing import Optional, Tuple
from urllib.parse import urlsplit

_LOCAL_NAMES = {"localhost", "localhost.localdomain"}
_SHORTHAND_CHARS = set("0123456789abcdefx.")


def _parse_ip(host: str):
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        pass
    # Shorthand IPv4 forms the resolver accepts: "127.1", "2130706433", "0x7f000001"
    if set(host) <= _SHORTHAND_CHARS:
        try:
            return ipaddress.IPv4Address(socket.inet_aton(host))
        except OSError:
            return None
    return None


def is_private_host(hostname: str) -> bool:
    """
    True for loopback/private/link-local/unspecified addresses and localhost
    names. Hostnames that are not IP literals are only checked by name.
    """
    host = (hostname or "").strip().lower().rstrip(".")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not host:
        return True
    if host in _LOCAL_NAMES or host.endswith(".localhost"):
        return True

    addr = _parse_ip(host)
    if addr is None:
        return False

    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped

    return (
        addr.is_loopback
        or addr.is_private
        or addr.is_link_local
        or addr.is_unspecified
        or addr.is_reserved
        or addr.is_multicast
    )


def validate_url_for_ssrf(url) -> Tuple[bool, Optional[str]]:
    """Return (True, None) if `url` may be fetched, else (False, reason)."""
    if not isinstance(url, str) or not url.strip():
        return False, "URL cannot be empty"

    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
        # .port raises for garbage like "http://host:notaport"
        _ = parts.port
    except ValueError:
        return False, "Invalid URL format"

    if not parts.scheme:
        return False, "Invalid URL format"
    if parts.scheme.lower() not in ("http", "https"):
        return False, "Only HTTP/HTTPS URLs are allowed"
    if not hostname:
        return False, "Invalid URL format: missing hostname"
    if is_private_host(hostname):
        return False, "Cannot scrape private/local URLs"
    return True, None


__all__ = ["is_private_host", "validate_url_for_ssrf"]
