import asyncio
import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from scriptorium.config import StorageConfig
from scriptorium.data.errors import StorageUnavailableError
from scriptorium.data.orm import SCHEMA_VERSION
from scriptorium.migrations import upgrade

__all__ = ["Database"]

logger = logging.getLogger(__name__)


def _install_sqlite_hooks(engine: AsyncEngine) -> None:
    # Let SQLAlchemy own BEGIN so reads get a real transaction (one snapshot)
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """Handle on the embedded database.

    Starts uninitialized; the first call to :meth:`ensure_ready` opens the
    engine and runs the schema upgrade. Concurrent first callers wait on the
    same open. A failed open is remembered and raised again on every later
    call, since persistence cannot proceed without it.
    """

    def __init__(self, config: StorageConfig, schema_version: int = SCHEMA_VERSION):
        self.config = config
        self.schema_version = schema_version
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None
        self._open_error: Optional[StorageUnavailableError] = None
        self._open_lock = asyncio.Lock()

    @property
    def state(self) -> str:
        if self._sessionmaker is not None:
            return "ready"
        if self._open_error is not None:
            return "unavailable"
        return "uninitialized"

    async def ensure_ready(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is not None:
            return self._sessionmaker
        if self._open_error is not None:
            raise self._open_error

        async with self._open_lock:
            if self._sessionmaker is not None:
                return self._sessionmaker
            if self._open_error is not None:
                raise self._open_error
            try:
                await self._open()
            except StorageUnavailableError as e:
                self._open_error = e
                logger.error("Storage unavailable: %s", e)
                raise
            except Exception as e:
                self._open_error = StorageUnavailableError(
                    f"Could not open store: {e}", cause=e
                )
                logger.error("Storage unavailable: %s", e)
                raise self._open_error from e
        return self._sessionmaker

    async def _open(self) -> None:
        connect_args = {}
        is_sqlite = self.config.db_uri.startswith("sqlite")
        if is_sqlite:
            connect_args["timeout"] = self.config.busy_timeout

        engine = create_async_engine(self.config.db_uri, connect_args=connect_args)
        if is_sqlite:
            _install_sqlite_hooks(engine)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(upgrade, self.schema_version)
        except BaseException:
            await engine.dispose()
            raise

        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
        logger.info("Store ready (%s, schema v%s)", self.config.db_uri, self.schema_version)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Store engine disposed")
        self._engine = None
        self._sessionmaker = None

    def __str__(self):
        return "sqlite database in " + str(self.config.db_uri)
