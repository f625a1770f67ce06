from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# Manual visibility runs hit the hosted database; keep them per-client limited
limiter = Limiter(key_func=get_remote_address, default_limits=["120/minute"])

__all__ = [
    "limiter",
    "RateLimitExceeded",
    "SlowAPIMiddleware",
]
