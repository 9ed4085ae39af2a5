"""Authorization header values."""

import base64


def basic_authentication(username: str, password: str) -> str:
    """Gets the Basic auth header value.

    The credentials are encoded as ISO-8859-1 before base64 encoding, which is
    what most servers expect for Basic auth.
    """
    credentials = f"{username}:{password}".encode("iso-8859-1")
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


def bearer_token(auth_token: str) -> str:
    """Gets the Bearer auth header value for an OAuth token."""
    return f"Bearer {auth_token}"
