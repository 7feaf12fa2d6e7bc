from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import DATABASE_URL, DB_TYPE
import ssl

Base = declarative_base()

engine_kwargs = {"echo": False, "future": True}

if DB_TYPE == "postgres":
    # SSL setup for hosted Postgres
    ssl_ctx = ssl.create_default_context()
    ssl_ctx.check_hostname = False
    ssl_ctx.verify_mode = ssl.CERT_NONE

    # PgBouncer-safe: disable prepared statements
    engine_kwargs.update(
        pool_size=5,
        max_overflow=10,
        connect_args={
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            "server_settings": {"prepareThreshold": "0"},
            "ssl": ssl_ctx,
        },
    )

engine = create_async_engine(DATABASE_URL, **engine_kwargs)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if DB_TYPE == "sqlite":
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)

import app.models  # noqa: E402,F401


async def init_models(bind=None):
    """Create all tables defined in app.models (dev / sqlite setups)."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
