"""
Request throttling for the login endpoint (slowapi).

Counters are kept in process memory, so each worker counts on its own.
Tests switch the limiter off with RATE_LIMIT_ENABLED=false.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from chef_site.config import settings


def client_address(request: Request) -> str:
    """
    Key requests by client IP.

    Behind the hosting proxy the socket address is the proxy's, so the left-most
    X-Forwarded-For entry is used when present.
    """
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    client = forwarded_for.split(",")[0].strip()
    return client or get_remote_address(request)


limiter = Limiter(
    key_func=client_address,
    enabled=settings.RATE_LIMIT_ENABLED,
    storage_uri="memory://",
)

RATE_LIMITS = {
    "login": settings.LOGIN_RATE_LIMIT,
}
