from fastapi import Request
from slowapi import Limiter


def rate_limit_dependency(limiter: Limiter, limit: str):
    """Router dependency enforcing ``limit`` per client across the router's routes."""

    @limiter.limit(limit)
    async def enforce_rate_limit(request: Request):
        return None

    return enforce_rate_limit
