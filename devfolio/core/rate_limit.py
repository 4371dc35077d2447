"""
Per-client rate limiting with slowapi.

Routers decorate endpoints with ``@limiter.limit(...)``; the app installs
the same limiter on ``app.state`` together with rate_limit_exceeded_handler.
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from devfolio.config import settings
from devfolio.core.exceptions import error_body

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Report an exhausted limit in the shared error envelope."""
    logger.info(f"Rate limit hit by {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body("Too many requests, please try again later", str(exc.detail)),
    )
