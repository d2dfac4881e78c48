"""In-memory fixed-window rate limiting for the submission endpoints.

Each client address gets a counter that resets when its window expires. The
limiter is shared by every worker thread and guards its table with a lock.
Counts are per process and are lost on restart.
"""

import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from fastapi import Request

from formmail.config.models import DEFAULT_RATE_LIMIT_MESSAGE, RateLimitConfig
from formmail.logging import get_logger

logger = get_logger(__name__, component="api")


@dataclass
class RateLimitDecision:
    """Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the request may proceed
        count: Requests counted in the current window, including this one
        retry_after: Whole seconds until the window resets
    """

    allowed: bool
    count: int
    retry_after: int


class RateLimitExceeded(Exception):
    """Raised by the rate limit dependency; rendered as HTTP 429."""

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message)
        self.message = message
        self.retry_after = retry_after


class FixedWindowRateLimiter:
    """Counts requests per key in fixed windows.

    A key's window starts with its first request. Requests beyond
    max_requests inside the window are refused and do not extend it.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError(f"max_requests must be at least 1, got: {max_requests}")
        if window_seconds < 1:
            raise ValueError(f"window_seconds must be at least 1, got: {window_seconds}")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock

        # key -> [count, window_reset_time]
        self._windows: Dict[str, list] = {}
        self._lock = Lock()
        self._last_purge = clock()

    def hit(self, key: str) -> RateLimitDecision:
        """Count a request for key and decide whether it may proceed."""
        now = self.clock()

        with self._lock:
            self._purge_expired(now)

            window = self._windows.get(key)
            if window is None or now >= window[1]:
                window = [0, now + self.window_seconds]
                self._windows[key] = window

            retry_after = max(0, math.ceil(window[1] - now))

            if window[0] >= self.max_requests:
                return RateLimitDecision(allowed=False, count=window[0], retry_after=retry_after)

            window[0] += 1
            return RateLimitDecision(allowed=True, count=window[0], retry_after=retry_after)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _purge_expired(self, now: float) -> None:
        # At most once per window; caller holds the lock
        if now - self._last_purge < self.window_seconds:
            return
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]
        self._last_purge = now


def client_address(request: Request, trust_forwarded_for: bool = False) -> str:
    """Return the address used as the rate limit key.

    The first X-Forwarded-For hop is only honoured when the service is known
    to sit behind a proxy that sets it.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
    return request.client.host if request.client else "unknown"


def create_rate_limiter(
    config: RateLimitConfig, clock: Optional[Callable[[], float]] = None
) -> Optional[FixedWindowRateLimiter]:
    """Build the limiter described by config, or None when disabled."""
    if not config.enabled:
        return None
    return FixedWindowRateLimiter(
        max_requests=config.max_requests,
        window_seconds=config.window_seconds,
        clock=clock or time.monotonic,
    )


def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency applied to the submission routes.

    Raises:
        RateLimitExceeded: When the client has used up its window
    """
    limiter: Optional[FixedWindowRateLimiter] = request.app.state.rate_limiter
    if limiter is None:
        return

    config: RateLimitConfig = request.app.state.app_config.rate_limit
    address = client_address(request, config.trust_forwarded_for)
    decision = limiter.hit(address)

    if not decision.allowed:
        logger.warning(
            f"Rate limit exceeded for {address} on {request.url.path}",
            extra={
                "event": "rate_limit.exceeded",
                "client": address,
                "count": decision.count,
                "limit": limiter.max_requests,
                "retry_after_seconds": decision.retry_after,
            },
        )
        raise RateLimitExceeded(
            config.message or DEFAULT_RATE_LIMIT_MESSAGE, decision.retry_after
        )
