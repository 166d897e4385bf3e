"""
aiosqlite connection pool for the ledger database.

Every store takes a ConnectionPool in its constructor. The default pool
below is built from settings and used by application wiring and the API.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stock_ledger.config import get_logger, get_settings
from stock_ledger.core.exceptions import DatabaseError

logger = get_logger(__name__)

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """
    Fixed number of connections to one SQLite file, handed out in turn.

    Nothing is opened until initialize() or the first acquire(). WAL mode
    lets reports read while a movement is being appended.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float | None = None,
    ):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout  # ms, passed to SQLite
        self.acquire_timeout = acquire_timeout  # s, None waits forever

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._ready = False
        self._lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._ready

    @property
    def in_use(self) -> int:
        """Connections currently checked out."""
        return len(self._connections) - self._idle.qsize()

    async def initialize(self) -> None:
        async with self._lock:
            if self._ready:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._open()
                self._connections.append(conn)
                self._idle.put_nowait(conn)

            self._ready = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        try:
            conn = await aiosqlite.connect(self.db_path)
            for pragma in _PRAGMAS:
                await conn.execute(pragma)
            await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        except aiosqlite.Error as e:
            raise DatabaseError("connect", str(e)) from e

        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection; it goes back to the pool on exit.

        Raises:
            DatabaseError: No connection became free within acquire_timeout.
        """
        if not self._ready:
            await self.initialize()

        try:
            conn = await asyncio.wait_for(self._idle.get(), timeout=self.acquire_timeout)
        except TimeoutError as e:
            logger.warning(
                "connection_acquire_timeout",
                db_path=str(self.db_path),
                timeout=self.acquire_timeout,
            )
            raise DatabaseError("acquire", "timed out waiting for a free connection") from e

        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection and commit on exit, or roll back if the block raises."""
        async with self.acquire() as conn:
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def ping(self) -> bool:
        """True when the database answers a trivial query."""
        try:
            async with self.acquire() as conn:
                await conn.execute("SELECT 1")
        except (aiosqlite.Error, DatabaseError, OSError) as e:
            logger.warning("database_ping_failed", db_path=str(self.db_path), error=str(e))
            return False
        return True

    async def close(self) -> None:
        """Close every connection. The pool can be initialized again afterwards."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections = []
            self._idle = asyncio.Queue(maxsize=self.pool_size)
            self._ready = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Default pool for the configured database, opened on first use."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
            acquire_timeout=storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
