"""
Shared dependencies for the HTTP routes.

The cache repository is a process-scoped resource created once in the
application lifespan and stored on app.state; routes receive it through
Depends() so tests can override it.
"""

from fastapi import Request

from ..services.cache_repository import CacheRepository


def get_cache_repository(request: Request) -> CacheRepository:
    """The cache repository opened at startup."""
    return request.app.state.cache
