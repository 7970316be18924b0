"""Optional bearer-token gate for the wake endpoint."""

import secrets
from typing import Optional

SCHEME = "bearer"


def generate_token() -> str:
    """Generate a cryptographically secure URL-safe bearer token."""
    return secrets.token_urlsafe(32)


def verify_bearer(header: Optional[str], token: str) -> bool:
    """
    Check an ``Authorization`` header value against the configured token.

    Args:
        header: Raw header value from the request, if any.
        token: Token from config (auth_token).

    Returns:
        True if the header carries the expected bearer token.
    """
    if not header:
        return False
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() != SCHEME:
        return False
    return secrets.compare_digest(credentials.strip().encode(), token.encode())
