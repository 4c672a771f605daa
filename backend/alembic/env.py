"""Alembic environment for the market schema.

The database URL always comes from market.config.Settings, so migrations and
the running API agree on the target (including the postgresql:// rewrite).
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from market.config import get_settings
from market.db.base import Base
import market.models  # noqa: F401  (registers users, items, purchases)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda sync_conn: _configure(connection=sync_conn))
    await engine.dispose()


database_url = get_settings().database_url
if context.is_offline_mode():
    _configure(
        url=database_url, literal_binds=True, dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_migrate_online(database_url))
