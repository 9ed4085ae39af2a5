"""Utility functions and constants for logging serialization."""

from typing import Dict, Iterable, List, Tuple

SENSITIVE_HEADER_KEYS: List[str] = [
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "api-key",
    "secret",
    "token",
]
REDACTED_PLACEHOLDER: str = "[REDACTED]"


def sanitize_headers(headers: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Sanitizes sensitive information from HTTP headers.

    Args:
        headers: HTTP headers as (name, value) pairs.

    Returns:
        A dictionary of headers with sensitive values redacted.
    """
    sanitized = {}

    for key, value in headers:
        if key.lower() in SENSITIVE_HEADER_KEYS:
            sanitized[key] = REDACTED_PLACEHOLDER
        else:
            sanitized[key] = value

    return sanitized
