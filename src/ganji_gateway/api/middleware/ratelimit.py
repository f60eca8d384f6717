"""Per-client sliding window rate limiting.

One :class:`SlidingWindowRateLimiter` lives for the process lifetime on
``app.state.rate_limiter``. Each client key (the remote IP) keeps the
timestamps of its requests inside the current window; stale timestamps are
dropped on access and :meth:`SlidingWindowRateLimiter.prune` sweeps keys
that have gone quiet.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from ganji_gateway.api.responses import error_response
from ganji_gateway.errors.definitions import ErrRateLimited

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)

# Sweep idle clients every N checks
_PRUNE_EVERY = 1000


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` per ``window_seconds`` per client key.

    All mutation happens synchronously on the event loop thread, so no
    locking is needed.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._checks = 0

    def check(self, key: str) -> bool:
        """Record a request from *key*. Returns False if it is over the limit.

        Rejected requests are not recorded.
        """
        now = self._clock()
        hits = self._hits.setdefault(key, deque())
        self._evict(hits, now)

        self._checks += 1
        if self._checks % _PRUNE_EVERY == 0:
            self.prune()

        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def remaining(self, key: str) -> int:
        hits = self._hits.get(key)
        if hits is None:
            return self.max_requests
        self._evict(hits, self._clock())
        return max(self.max_requests - len(hits), 0)

    def prune(self) -> int:
        """Drop clients with no requests in the current window.

        Returns:
            Number of client keys removed.
        """
        now = self._clock()
        stale = []
        for key, hits in self._hits.items():
            self._evict(hits, now)
            if not hits:
                stale.append(key)
        for key in stale:
            del self._hits[key]
        return len(stale)

    def clear(self) -> None:
        """Clear all rate limit state."""
        self._hits.clear()

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    def _evict(self, hits: deque[float], now: float) -> None:
        start = now - self.window_seconds
        while hits and hits[0] <= start:
            hits.popleft()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over the limit with a 429 envelope."""

    def __init__(self, app: object, *, limiter: SlidingWindowRateLimiter) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._limiter = limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        client = request.client.host if request.client else "unknown"
        if not self._limiter.check(client):
            logger.warning("Rate limit exceeded for %s", client)
            return error_response(
                ErrRateLimited.status_code,
                ErrRateLimited.message,
                code=ErrRateLimited.code,
            )
        return await call_next(request)
