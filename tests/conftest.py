"""Shared test fixtures and in-memory doubles.

FakeStore/FakeSession mimic the transactional behaviour the service relies on:
rows written inside `session.begin()` become visible only on a clean exit and
are discarded if the block raises. Ids come from a counter that, like a
Postgres sequence, is not rolled back.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import IntegrityError, OperationalError

from src.main import create_app
from src.svc_cache.cache_aside import CacheAside
from src.svc_common.database import get_db_session
from src.svc_user.api.dependencies import get_cache, get_user_service
from src.svc_user.application.service import UserService
from src.svc_user.domain.models import NewUser, User


class FakeStore:
    def __init__(self) -> None:
        self.rows: list[User] = []
        self.next_id = 1
        self.commits = 0
        self.rollbacks = 0
        self.list_calls = 0
        self.fail_reads = False
        self.sessions_opened = 0
        self.sessions_closed = 0


class FakeSession:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.pending: list[User] | None = None

    @asynccontextmanager
    async def begin(self) -> AsyncGenerator["FakeSession", None]:
        self.pending = []
        try:
            yield self
        except BaseException:
            self.pending = None
            self.store.rollbacks += 1
            raise
        self.store.rows.extend(self.pending)
        self.pending = None
        self.store.commits += 1


class FakeUserRepository:
    """Enforces the unique username/email constraints of the users table."""

    async def insert_user(self, db: FakeSession, user: NewUser) -> int:
        visible = db.store.rows + (db.pending or [])
        for row in visible:
            if row.username == user.username or row.email == user.email:
                raise IntegrityError(
                    "INSERT INTO users", {}, Exception("duplicate key value")
                )
        user_id = db.store.next_id
        db.store.next_id += 1
        assert db.pending is not None, "insert outside a transaction"
        db.pending.append(User(id=user_id, username=user.username, email=user.email))
        return user_id

    async def list_users(self, db: FakeSession) -> list[User]:
        db.store.list_calls += 1
        if db.store.fail_reads:
            raise OperationalError("SELECT", {}, Exception("connection refused"))
        return list(db.store.rows)


class FakeRedis:
    """Subset of redis.asyncio.Redis used by CacheAside, with a manual clock."""

    def __init__(self) -> None:
        self.data: dict[str, tuple[str, float]] = {}
        self.now = 0.0
        self.down = False
        self.get_calls = 0
        self.set_calls = 0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def get(self, key: str) -> str | None:
        self.get_calls += 1
        if self.down:
            raise RedisConnectionError("Error connecting to localhost:6379")
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.now >= expires_at:
            del self.data[key]
            return None
        return value

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.set_calls += 1
        if self.down:
            raise RedisConnectionError("Error connecting to localhost:6379")
        expires_at = self.now + ex if ex is not None else float("inf")
        self.data[key] = (value, expires_at)
        return True


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def session(store: FakeStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def user_service(user_repo: FakeUserRepository) -> UserService:
    return UserService(repo=user_repo, timeout_seconds=1.0)


@pytest.fixture
def cache(fake_redis: FakeRedis) -> CacheAside:
    return CacheAside(fake_redis, ttl_seconds=10)  # type: ignore[arg-type]


@pytest.fixture
async def client(
    store: FakeStore, user_service: UserService, cache: CacheAside
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against an app wired to in-memory doubles."""
    app = create_app()

    async def _session() -> AsyncGenerator[Any, None]:
        store.sessions_opened += 1
        try:
            yield FakeSession(store)
        finally:
            store.sessions_closed += 1

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_cache] = lambda: cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
