"""
Store client: one `Database` per process, built by the app factory and kept on
`app.state.db`. Routers get sessions through the `get_db` dependency.
"""

from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from aish.exceptions import InternalError
from aish.observability.logging import get_logger

Base = declarative_base()

logger = get_logger(__name__)


class Database:
    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(url, echo=echo)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session

    async def create_all(self) -> None:
        # Register every model on Base.metadata before creating tables
        import aish.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError):
            logger.warning("database_ping_failed", url=self.engine.url.render_as_string(hide_password=True))
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.db


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with get_database(request).session() as session:
        yield session


@contextmanager
def store_errors(summary: str) -> Iterator[None]:
    """Surface driver failures as `InternalError(summary, details=<driver message>)`."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("store_error", operation=summary)
        raise InternalError(summary, details=str(e)) from e
