"""
Request sanitization helpers for the dashboard API.

Kept free of FastAPI imports so the CLI can validate ``--host`` before the
optional server stack is imported.
"""

from __future__ import annotations

import ipaddress
from urllib.parse import parse_qsl, urlencode

_SENSITIVE_PARAMS = frozenset({"token", "access_token", "api_key", "key", "secret", "password"})


def is_loopback(host: str) -> bool:
    """Check if a host string is a loopback address."""
    if host == "localhost":
        return True
    try:
        addr = ipaddress.ip_address(host)
        return addr.is_loopback
    except ValueError:
        return False


def redact_query_params(query_string: str) -> str:
    """Replace values of credential-like query parameters with ``[REDACTED]``."""
    if not query_string:
        return query_string
    pairs = parse_qsl(query_string, keep_blank_values=True)
    safe = [
        (key, "[REDACTED]" if key.lower() in _SENSITIVE_PARAMS else value) for key, value in pairs
    ]
    return urlencode(safe)
