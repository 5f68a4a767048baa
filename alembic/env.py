"""Alembic environment: raw-SQL migrations against the service's own engine.

Online mode reuses create_engine() so migrations see the same URL and pool
settings as the app. Offline mode renders SQL for the same URL.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from config.settings import settings
from src.svc_common.database import create_engine

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**kwargs) -> None:
    # No ORM metadata: migrations are hand-written SQL, autogenerate is unused
    context.configure(target_metadata=None, **kwargs)


def run_offline() -> None:
    _configure(
        url=settings.database_url.render_as_string(hide_password=False),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    engine = create_engine(settings)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
