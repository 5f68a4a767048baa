"""Redis client factory for the read-path cache.

The client owns its own connection pool; one instance is created per
application in the lifespan and handed to CacheAside.
"""

import redis.asyncio as aioredis

from config.settings import Settings


def create_redis(settings: Settings) -> aioredis.Redis:
    return aioredis.from_url(
        settings.redis_url,
        decode_responses=True,
    )


async def close_redis(client: aioredis.Redis) -> None:
    await client.aclose()
