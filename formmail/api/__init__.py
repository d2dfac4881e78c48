"""HTTP surface: FastAPI app factory, form routes and rate limiting."""

from .app import build_app, create_app, create_app_from_environment
from .rate_limit import FixedWindowRateLimiter, RateLimitExceeded, create_rate_limiter

__all__ = [
    "create_app",
    "build_app",
    "create_app_from_environment",
    "FixedWindowRateLimiter",
    "RateLimitExceeded",
    "create_rate_limiter",
]
