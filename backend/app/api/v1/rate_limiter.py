"""
Fixed-window rate limiting.

One counter per client IP per window. Used as a router dependency:

    limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=900)
    app.include_router(auth.router, dependencies=[Depends(limiter)])

Every response carries X-RateLimit-Limit / -Remaining / -Reset; requests over
the limit get 429 with retry_after (seconds until the window resets).
"""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict

from fastapi import Request, Response

from backend.app.api.v1.responses import APIError
from backend.app.logging_config import get_logger
from backend.app.utils.datetime_utils import utcnow

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


@dataclass
class _Window:
    count: int
    reset_at: datetime


class FixedWindowRateLimiter:
    """In-process counter store; state is per limiter instance."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], datetime] = utcnow,
        ):
        self.max_requests = max_requests
        self.window = timedelta(seconds=window_seconds)
        self.clock = clock
        self._windows: Dict[str, _Window] = {}

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _purge_expired(self, now: datetime) -> None:
        expired = [key for key, window in self._windows.items() if window.reset_at <= now]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> _Window:
        """Count one request for key and return its current window."""
        now = self.clock()
        window = self._windows.get(key)
        if window is None or window.reset_at <= now:
            self._purge_expired(now)
            window = _Window(count=0, reset_at=now + self.window)
            self._windows[key] = window
        window.count += 1
        return window

    async def __call__(self, request: Request, response: Response) -> None:
        key = self.client_key(request)
        window = self.hit(key)

        headers = {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(0, self.max_requests - window.count)),
            "X-RateLimit-Reset": window.reset_at.isoformat(),
            }
        response.headers.update(headers)

        if window.count > self.max_requests:
            retry_after = max(0, math.ceil((window.reset_at - self.clock()).total_seconds()))
            logger.warning("Rate limit exceeded", client=key, count=window.count, limit=self.max_requests)
            raise APIError(
                429,
                RATE_LIMIT_MESSAGE,
                headers={**headers, "Retry-After": str(retry_after)},
                extra={"retry_after": retry_after},
                )
