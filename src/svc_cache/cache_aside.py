"""Cache-aside lookup over Redis.

Read: GET key -> hit returns the decoded payload, store untouched.
Miss: run the loader, then SET key payload EX ttl (best effort).

Cache failures of any kind are logged and treated as a miss, so a read
never fails because Redis is down or holds a corrupt entry. A cached value
that decodes but does not pass the caller's `validate` check counts as
corrupt. Entries are not invalidated on write; they age out after the TTL.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as aioredis
from pydantic import ValidationError as PayloadValidationError
from redis.exceptions import RedisError

from src.svc_common.errors import CacheError

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Any]]
Validator = Callable[[Any], Any]


class CacheAside:
    def __init__(
        self,
        redis: aioredis.Redis,
        ttl_seconds: int = 10,
        single_flight: bool = False,
    ) -> None:
        self._redis = redis
        self._ttl = ttl_seconds
        self._single_flight = single_flight
        # Only keys with a task inside get_or_load have an entry here
        self._key_locks: dict[str, asyncio.Lock] = {}
        self._key_waiters: dict[str, int] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    async def get_or_load(
        self, key: str, loader: Loader, validate: Validator | None = None
    ) -> Any:
        """Return the cached payload for key, or load, cache and return it.

        `validate` is applied to a decoded hit; if it raises a pydantic
        ValidationError, ValueError or TypeError the entry is ignored and
        reloaded. The value written to the cache is the same value returned
        to the caller. Loader exceptions (e.g. StoreError) propagate unchanged.
        """
        cached = await self._read_absorbing(key, validate)
        if cached is not None:
            return cached

        if not self._single_flight:
            return await self._load_and_store(key, loader)

        lock = self._key_locks.setdefault(key, asyncio.Lock())
        self._key_waiters[key] = self._key_waiters.get(key, 0) + 1
        try:
            async with lock:
                # Another task may have populated the key while we waited
                cached = await self._read_absorbing(key, validate)
                if cached is not None:
                    return cached
                return await self._load_and_store(key, loader)
        finally:
            self._key_waiters[key] -= 1
            if not self._key_waiters[key]:
                del self._key_waiters[key]
                del self._key_locks[key]

    async def _load_and_store(self, key: str, loader: Loader) -> Any:
        logger.debug("cache miss: %s", key)
        value = await loader()
        try:
            await self._write(key, value)
        except CacheError as exc:
            logger.warning("cache write skipped for %s: %s", key, exc)
        return value

    async def _read_absorbing(self, key: str, validate: Validator | None) -> Any:
        try:
            return await self._read(key, validate)
        except CacheError as exc:
            logger.warning("cache read failed for %s, treating as miss: %s", key, exc)
            return None

    async def _read(self, key: str, validate: Validator | None) -> Any:
        try:
            raw = await self._redis.get(key)
        except (RedisError, OSError) as exc:
            raise CacheError(f"GET failed: {exc!r}") from exc
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError as exc:
            raise CacheError(f"malformed payload: {exc}") from exc
        if validate is not None:
            try:
                validate(value)
            except (PayloadValidationError, ValueError, TypeError) as exc:
                raise CacheError(f"unexpected payload shape: {exc}") from exc
        logger.debug("cache hit: %s", key)
        return value

    async def _write(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise CacheError(f"payload not serialisable: {exc}") from exc
        try:
            await self._redis.set(key, payload, ex=self._ttl)
        except (RedisError, OSError) as exc:
            raise CacheError(f"SET failed: {exc!r}") from exc
