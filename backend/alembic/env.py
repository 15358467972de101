"""Alembic environment — async migrations for the Cube Timer database.

The URL comes from cubetimer.config (DATABASE_URL / .env, with the same
postgresql:// → postgresql+asyncpg:// rewrite the app uses), so migrations and
the running API always target the same database. alembic.ini only supplies
logging config and an offline fallback URL.

Design Decisions:
    - render_as_batch on SQLite: ALTER TABLE support comes from batch mode
    - NullPool: a migration run opens exactly one connection
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from cubetimer.config import get_settings
from cubetimer.db.base import Base
import cubetimer.models  # noqa: F401  (registers SolveRecord, CustomEventRecord)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return get_settings().database_url or config.get_main_option("sqlalchemy.url")


def _configure(**kwargs) -> None:
    url = _database_url()
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=url.startswith("sqlite"),
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=_database_url(), literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_database_url(), poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
