"""Derive storage keys from login endpoint URLs."""

from urllib.parse import urlsplit

import structlog

from .exceptions import InternalError

logger = structlog.get_logger(__name__)

INVALID_SERVER_URL = "Invalid serverUrl for retrieving host name"


def extract_host_from_server_url(server_url: str) -> str:
    """Extract the host name from a fully qualified server URL.

    Scheme, port, path and query are discarded. The result is stable for a
    given URL, so it can be used directly as the host part of a cache key.

    Args:
        server_url: Endpoint URL, e.g. ``https://acct.example.com:443/``.

    Returns:
        The host component of the URL's authority.

    Raises:
        InternalError: If the URL cannot be parsed or has no host.
    """
    if not isinstance(server_url, str):
        logger.error("invalid_server_url", reason="not a string")
        raise InternalError(INVALID_SERVER_URL)

    try:
        parts = urlsplit(server_url.strip())
        # Accessing port validates it; urlsplit defers that check.
        parts.port
    except ValueError as e:
        logger.error("invalid_server_url", reason=str(e))
        raise InternalError(INVALID_SERVER_URL) from e

    if not parts.scheme or not parts.netloc or not parts.hostname:
        logger.error("invalid_server_url", reason="missing scheme or host")
        raise InternalError(INVALID_SERVER_URL)

    return parts.hostname
