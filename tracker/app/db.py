import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TypeVar

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from tracker.app.config import settings
from tracker.app.errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SQLITE_BUSY_TIMEOUT_MS = 5000


class Base(DeclarativeBase):
    pass


engine = create_async_engine(
    settings.database_url,
    echo=False,
    connect_args={"check_same_thread": False} if settings.is_sqlite else {},
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def configure_sqlite(sync_engine) -> None:
    """Per-connection SQLite setup.

    Pragmas such as foreign_keys (needed for ON DELETE CASCADE) and
    busy_timeout only apply to the connection that sets them. The driver's
    own transaction handling is switched off so that every transaction opens
    with BEGIN IMMEDIATE: reads inside a unit of work run under the write
    lock, and concurrent read-modify-write cycles serialise.
    """

    @event.listens_for(sync_engine, "connect")
    def _set_pragmas(dbapi_connection, _record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


if settings.is_sqlite:
    configure_sqlite(engine.sync_engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class UnitOfWork:
    """Transaction boundary around a single ``AsyncSession``.

    ``run_atomic`` commits everything ``fn`` did or nothing at all; ``run`` is
    for reads. Both surface driver failures as ``StorageError``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def run(self, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            return await fn(self.session)
        except SQLAlchemyError as exc:
            logger.exception("Database read failed")
            raise StorageError.from_exception(exc) from exc

    async def run_atomic(self, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            result = await fn(self.session)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Database write failed, transaction rolled back")
            raise StorageError.from_exception(exc) from exc
        except Exception:
            await self.session.rollback()
            raise
        return result


async def init_db() -> None:
    """Create all tables."""
    import tracker.app.models  # noqa: F401 ensure models are registered

    if settings.is_sqlite:
        settings.data_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
