"""FastAPI dependencies resolving per-app handles from app.state.

Handles are built in the application lifespan (see src.main.create_app);
tests swap them through app.dependency_overrides.
"""

from fastapi import Request

from src.svc_cache.cache_aside import CacheAside
from src.svc_user.application.service import UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_cache(request: Request) -> CacheAside:
    return request.app.state.cache


def cache_key_for(request: Request) -> str:
    """Cache key: request path plus query string, e.g. /cachedData?page=2."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path
