"""
Rate limiting middleware - in-memory sliding window per client IP.

Only /api and paths under /api/ are limited; /health and / stay open for uptime
checks. State lives in this process, so each worker keeps its own counters.
Buckets of clients that went quiet are swept once per window.
"""

import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        max_requests: int = 100,
        window_seconds: int = 15 * 60,
        path_prefix: str = "/api",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, max_requests)
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix.rstrip("/")
        self.clock = clock
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_sweep = clock()

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _is_limited_path(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    def _sweep(self, now: float) -> None:
        """Drop every client whose newest request is older than the window."""
        cutoff = now - self.window_seconds
        stale = [key for key, bucket in self._requests.items() if not bucket or bucket[-1] <= cutoff]
        for key in stale:
            del self._requests[key]
        self._last_sweep = now

    def _check(self, key: str) -> Tuple[bool, int]:
        now = self.clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)
        bucket = self._requests[key]
        cutoff = now - self.window_seconds
        while bucket and bucket[0] <= cutoff:
            bucket.popleft()
        if len(bucket) >= self.max_requests:
            retry_after = max(1, int(self.window_seconds - (now - bucket[0])))
            return False, retry_after
        bucket.append(now)
        return True, 0

    async def dispatch(self, request: Request, call_next):
        if not self._is_limited_path(request.url.path):
            return await call_next(request)

        allowed, retry_after = self._check(self._client_key(request))
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE},
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
