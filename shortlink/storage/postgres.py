"""PostgreSQL implementation of the mapping store."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, List

import asyncpg

from .base import MappingStoreBase
from .exceptions import CodeExistsError, NotFoundError, StorageError
from .migrations import apply_migrations
from .models import URLMapping, as_utc


_BACKEND_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


def _affected_rows(status: str) -> int:
    """Row count from a command tag such as 'UPDATE 1' or 'DELETE 0'."""
    try:
        return int(status.split()[-1])
    except (ValueError, IndexError):
        return 0


class PostgresStore(MappingStoreBase):
    """Durable store on an asyncpg connection pool.

    Build instances with ``await PostgresStore.create(dsn)``: pending schema
    migrations are applied before the pool is created, so every operation
    runs against a current schema.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        query_timeout: float = 5.0,
        bulk_timeout: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Wrap an existing pool.

        Args:
            pool: asyncpg connection pool
            query_timeout: Timeout in seconds for point operations
            bulk_timeout: Timeout in seconds for list and cleanup
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.query_timeout = query_timeout
        self.bulk_timeout = bulk_timeout
        self._pool: Optional[asyncpg.Pool] = pool

    @classmethod
    async def create(
        cls,
        dsn: str,
        pool_min_size: int = 1,
        pool_max_size: int = 10,
        query_timeout: float = 5.0,
        bulk_timeout: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ) -> "PostgresStore":
        """Migrate the schema, then open the connection pool.

        Raises:
            StorageError: If migrations fail or the pool cannot be created
        """
        logger = logger or logging.getLogger(__name__)

        await apply_migrations(dsn, timeout=bulk_timeout, logger=logger)

        try:
            pool = await asyncpg.create_pool(
                dsn,
                min_size=pool_min_size,
                max_size=pool_max_size,
                timeout=query_timeout,
                command_timeout=bulk_timeout,
            )
        except _BACKEND_ERRORS as e:
            raise StorageError(f"failed to create connection pool: {e}") from e

        logger.info(f"PostgreSQL store ready (pool {pool_min_size}-{pool_max_size})")
        return cls(pool, query_timeout=query_timeout, bulk_timeout=bulk_timeout, logger=logger)

    @asynccontextmanager
    async def _unit_of_work(self, timeout: float):
        """Acquire a pooled connection and open a transaction on it.

        The connection goes back to the pool on every exit path; backend
        failures surface as StorageError and roll the transaction back.
        """
        if self._pool is None:
            raise StorageError("store is closed")

        try:
            async with self._pool.acquire(timeout=timeout) as conn:
                async with conn.transaction():
                    yield conn
        except asyncpg.UniqueViolationError as e:
            raise CodeExistsError(f"short code already exists: {getattr(e, 'detail', None) or e}") from e
        except _BACKEND_ERRORS as e:
            self.logger.error(f"Storage operation failed: {e}")
            raise StorageError(str(e) or type(e).__name__) from e

    async def save(self, mapping: URLMapping) -> None:
        async with self._unit_of_work(self.query_timeout) as conn:
            await conn.execute(
                """
                INSERT INTO url_mappings (code, original_url, user_id, created_at, expires_at, clicks)
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                mapping.code,
                mapping.original_url,
                mapping.user_id,
                as_utc(mapping.created_at),
                as_utc(mapping.expires_at) if mapping.expires_at else None,
                mapping.clicks,
                timeout=self.query_timeout,
            )
        self.logger.debug(f"Saved mapping: {mapping.code} -> {mapping.original_url}")

    async def get(self, code: str) -> Optional[str]:
        async with self._unit_of_work(self.query_timeout) as conn:
            return await conn.fetchval(
                """
                SELECT original_url FROM url_mappings
                WHERE code = $1 AND (expires_at IS NULL OR expires_at > NOW())
                """,
                code,
                timeout=self.query_timeout,
            )

    async def get_mapping(self, code: str) -> Optional[URLMapping]:
        async with self._unit_of_work(self.query_timeout) as conn:
            row = await conn.fetchrow(
                """
                SELECT code, original_url, user_id, created_at, expires_at, clicks
                FROM url_mappings
                WHERE code = $1 AND (expires_at IS NULL OR expires_at > NOW())
                """,
                code,
                timeout=self.query_timeout,
            )
        return URLMapping.from_record(row) if row else None

    async def increment_click_count(self, code: str) -> None:
        async with self._unit_of_work(self.query_timeout) as conn:
            status = await conn.execute(
                "UPDATE url_mappings SET clicks = clicks + 1 WHERE code = $1",
                code,
                timeout=self.query_timeout,
            )
        if _affected_rows(status) == 0:
            raise NotFoundError(f"no URL mapping found for code: {code}")

    async def list_by_user(self, user_id: str) -> List[URLMapping]:
        async with self._unit_of_work(self.bulk_timeout) as conn:
            rows = await conn.fetch(
                """
                SELECT code, original_url, user_id, created_at, expires_at, clicks
                FROM url_mappings
                WHERE user_id = $1
                ORDER BY created_at DESC
                """,
                user_id,
                timeout=self.bulk_timeout,
            )
        return [URLMapping.from_record(row) for row in rows]

    async def delete(self, code: str) -> None:
        async with self._unit_of_work(self.query_timeout) as conn:
            status = await conn.execute(
                "DELETE FROM url_mappings WHERE code = $1",
                code,
                timeout=self.query_timeout,
            )
        if _affected_rows(status) == 0:
            raise NotFoundError(f"no URL mapping found for code: {code}")
        self.logger.debug(f"Deleted mapping: {code}")

    async def cleanup_expired(self) -> int:
        async with self._unit_of_work(self.bulk_timeout) as conn:
            status = await conn.execute(
                "DELETE FROM url_mappings WHERE expires_at IS NOT NULL AND expires_at <= NOW()",
                timeout=self.bulk_timeout,
            )
        removed = _affected_rows(status)
        if removed:
            self.logger.info(f"Removed {removed} expired mappings")
        return removed

    async def health_check(self) -> bool:
        try:
            async with self._unit_of_work(self.query_timeout) as conn:
                await conn.fetchval("SELECT 1", timeout=self.query_timeout)
            return True
        except StorageError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        self.logger.debug("Closed connection pool")
