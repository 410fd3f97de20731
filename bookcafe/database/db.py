from pathlib import Path
import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bookcafe.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


def ensure_sqlite_directory(url: URL) -> None:
    # sqlite creates the file but not its parent directory
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def _missing_book_columns(sync_conn) -> set[str]:
    columns = {column["name"] for column in inspect(sync_conn).get_columns("books")}
    return {"rating"} - columns


async def init_models(engine: AsyncEngine) -> None:
    """
    Create the tables and bring older databases up to date.

    Tables created before star ratings existed get a ``rating`` column
    defaulting to 0.
    """
    # models must be imported so that Base.metadata knows the tables
    import bookcafe.models  # noqa: F401

    ensure_sqlite_directory(engine.url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        missing = await conn.run_sync(_missing_book_columns)
        if "rating" in missing:
            logger.info("🔧 Adding rating column to books table")
            await conn.execute(
                text("ALTER TABLE books ADD COLUMN rating INTEGER NOT NULL DEFAULT 0")
            )
