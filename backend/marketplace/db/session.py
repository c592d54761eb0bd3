"""
Async engine and per-request session.

Each request gets one session. It is committed when the handler returns and
rolled back on any exception, so multi-step writes (booking creation, vendor
cascade delete) apply all-or-nothing.

Side effects that must not outlive a rollback (cache invalidation, upload
file removal) are queued with `after_commit` and run only once the commit
has succeeded.
"""

import inspect
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable, Union

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from marketplace.core.config import get_settings

settings = get_settings()

AFTER_COMMIT_KEY = "after_commit"

_engine_kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}
if settings.DATABASE_URL.startswith("postgresql"):
    _engine_kwargs.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def after_commit(session: AsyncSession, callback: Callable[[], Union[Awaitable[None], None]]) -> None:
    """Queue a callback (sync or async) to run after the session commits."""
    session.info.setdefault(AFTER_COMMIT_KEY, []).append(callback)


def discard_after_commit(session: AsyncSession) -> None:
    session.info.pop(AFTER_COMMIT_KEY, None)


async def run_after_commit(session: AsyncSession) -> None:
    for callback in session.info.pop(AFTER_COMMIT_KEY, []):
        result = callback()
        if inspect.isawaitable(result):
            await result


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Commit on success and run queued callbacks; roll back and drop them on error."""
    try:
        yield session
        await session.commit()
    except Exception:
        discard_after_commit(session)
        await session.rollback()
        raise
    await run_after_commit(session)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        async with transaction(session):
            yield session
