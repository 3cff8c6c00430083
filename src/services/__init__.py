"""
Services module.

Cross-cutting request services such as rate limiting.
"""

from src.services.rate_limiter import RateLimiter, RateLimitResult

__all__ = [
    "RateLimiter",
    "RateLimitResult",
]
