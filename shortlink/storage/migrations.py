"""Versioned schema migrations for the PostgreSQL store.

Migrations are applied in version order over a single connection, inside one
transaction that holds an advisory lock, so concurrent starters serialise and
a failure leaves the schema untouched.
"""

import asyncio
import logging
from typing import Optional, List, Tuple

import asyncpg

from .exceptions import StorageError


# Arbitrary key shared by every process migrating the same database
MIGRATION_LOCK_ID = 7_310_442_118

MIGRATIONS: Tuple[Tuple[int, str, str], ...] = (
    (
        1,
        "create_url_mappings",
        """
        CREATE TABLE IF NOT EXISTS url_mappings (
            code TEXT PRIMARY KEY,
            original_url TEXT NOT NULL,
            user_id TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            expires_at TIMESTAMPTZ NULL,
            clicks INTEGER NOT NULL DEFAULT 0 CHECK (clicks >= 0)
        )
        """,
    ),
    (
        2,
        "index_url_mappings_user_id",
        """
        CREATE INDEX IF NOT EXISTS idx_url_mappings_user_created
        ON url_mappings (user_id, created_at DESC)
        """,
    ),
    (
        3,
        "index_url_mappings_expires_at",
        """
        CREATE INDEX IF NOT EXISTS idx_url_mappings_expires_at
        ON url_mappings (expires_at)
        WHERE expires_at IS NOT NULL
        """,
    ),
)

CREATE_VERSION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


async def apply_migrations(
    dsn: str,
    timeout: float = 30.0,
    logger: Optional[logging.Logger] = None,
) -> List[int]:
    """Apply every pending migration.

    Args:
        dsn: PostgreSQL connection string
        timeout: Connect and statement timeout in seconds
        logger: Optional logger instance

    Returns:
        Versions applied by this call (empty when already current)

    Raises:
        StorageError: If connecting or any migration fails
    """
    logger = logger or logging.getLogger(__name__)
    applied_now: List[int] = []

    try:
        conn = await asyncpg.connect(dsn, timeout=timeout, command_timeout=timeout)
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
        raise StorageError(f"failed to run migrations: {e}") from e

    try:
        async with conn.transaction():
            await conn.execute("SELECT pg_advisory_xact_lock($1)", MIGRATION_LOCK_ID)
            await conn.execute(CREATE_VERSION_TABLE_SQL)

            rows = await conn.fetch("SELECT version FROM schema_migrations")
            already_applied = {row["version"] for row in rows}

            for version, name, sql in MIGRATIONS:
                if version in already_applied:
                    continue
                logger.info(f"Applying migration {version}: {name}")
                await conn.execute(sql)
                await conn.execute(
                    "INSERT INTO schema_migrations (version, name) VALUES ($1, $2)",
                    version,
                    name,
                )
                applied_now.append(version)
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
        logger.error(f"Migration failed: {e}")
        raise StorageError(f"failed to run migrations: {e}") from e
    finally:
        await conn.close()

    if applied_now:
        logger.info(f"Schema migrated to version {applied_now[-1]}")
    else:
        logger.debug("Schema already current")
    return applied_now


async def drop_schema(dsn: str, timeout: float = 30.0) -> None:
    """Drop every table the migrations create. Intended for test databases."""
    conn = await asyncpg.connect(dsn, timeout=timeout)
    try:
        await conn.execute("DROP TABLE IF EXISTS url_mappings")
        await conn.execute("DROP TABLE IF EXISTS schema_migrations")
    finally:
        await conn.close()
