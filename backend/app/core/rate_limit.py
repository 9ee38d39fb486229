"""Rate limiting for the login endpoint using SlowAPI.

Requests are keyed by the socket peer address. Behind a reverse proxy,
uvicorn's ``--proxy-headers`` together with ``--forwarded-allow-ips`` rewrites
that address from trusted forwarding headers only.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def init_rate_limiter(app: FastAPI) -> None:
    """Attach the limiter, starting from empty counters, and the 429 handler."""

    limiter.reset()
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
        logger.bind(
            path=str(request.url.path), client=get_remote_address(request), limit=str(exc.detail)
        ).warning("rate_limited")
        return JSONResponse(status_code=429, content={"error": "Too many requests"})

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
