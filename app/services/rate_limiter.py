"""
Rate Limiting

slowapi limiter shared by the book routes. Clients are keyed by IP.
Reads and writes have separate budgets (RATE_LIMIT_DEFAULT and
RATE_LIMIT_WRITE); RATE_LIMIT_ENABLED=false turns both off.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

READ_LIMIT = settings.rate_limit_default
WRITE_LIMIT = settings.rate_limit_write


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else X-Real-IP, else the peer address."""
    forwarded_for = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP", "").strip()
    return forwarded_for or real_ip or get_remote_address(request)


limiter = Limiter(
    key_func=get_client_ip,
    default_limits=[READ_LIMIT],
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)
logger.info(f"Book rate limits: read {READ_LIMIT}, write {WRITE_LIMIT} (enabled: {settings.rate_limit_enabled})")


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 with the usual {"message": ...} body and a Retry-After for the window."""
    window = exc.limit.limit.get_expiry()
    logger.warning(f"Rate limit {exc.detail} exceeded by {get_client_ip(request)}")
    return JSONResponse(
        status_code=429,
        content={"message": f"Too many requests: {exc.detail}"},
        headers={"Retry-After": str(window), "X-RateLimit-Limit": str(exc.detail)},
    )
