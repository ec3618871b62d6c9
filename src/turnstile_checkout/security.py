"""Client address and rate limiting helpers for the API."""

import logging
from typing import Callable, Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)


def get_client_ip(request: Request, header_name: str) -> Optional[str]:
    """Return the caller address set by the trusted proxy, if any.

    Args:
        request: Incoming request.
        header_name: Header the proxy writes the original address into.

    Returns:
        The stripped header value, or None when the header is absent or blank.
    """
    value = request.headers.get(header_name, "").strip()
    return value or None


def client_ip_key_func(header_name: str) -> Callable[[Request], str]:
    """Build a slowapi key function that prefers the proxy header."""

    def key_func(request: Request) -> str:
        return get_client_ip(request, header_name) or get_remote_address(request)

    return key_func


def create_limiter(header_name: str) -> Limiter:
    return Limiter(key_func=client_ip_key_func(header_name))
