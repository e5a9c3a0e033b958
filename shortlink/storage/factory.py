"""Backend selection for the mapping store."""

import logging
from typing import Optional

from .base import MappingStoreBase
from .exceptions import UnsupportedBackendError
from .memory import MemoryStore


SUPPORTED_BACKENDS = ("memory", "postgres")


async def create_store(
    db_type: str,
    database_url: Optional[str] = None,
    pool_min_size: int = 1,
    pool_max_size: int = 10,
    query_timeout: float = 5.0,
    bulk_timeout: float = 30.0,
    logger: Optional[logging.Logger] = None,
) -> MappingStoreBase:
    """Build the store named by db_type.
    
    Args:
        db_type: "memory" or "postgres" ("redis" is reserved)
        database_url: PostgreSQL DSN, required for "postgres"
        pool_min_size: Minimum pool size (postgres)
        pool_max_size: Maximum pool size (postgres)
        query_timeout: Point operation timeout in seconds (postgres)
        bulk_timeout: Bulk operation timeout in seconds (postgres)
        logger: Optional logger instance
        
    Returns:
        Ready-to-use store
        
    Raises:
        UnsupportedBackendError: If db_type is unknown or not implemented
        ValueError: If postgres is selected without a database_url
        StorageError: If the postgres store cannot be constructed
    """
    logger = logger or logging.getLogger(__name__)
    backend = (db_type or "").strip().lower()
    
    if backend == "memory":
        logger.info("Using in-memory storage backend")
        return MemoryStore(logger=logger)
    
    if backend == "postgres":
        if not database_url:
            raise ValueError("DATABASE_URL is required for postgres backend")
        # Local import keeps asyncpg off the memory-only path
        from .postgres import PostgresStore
        
        logger.info("Using PostgreSQL storage backend")
        return await PostgresStore.create(
            database_url,
            pool_min_size=pool_min_size,
            pool_max_size=pool_max_size,
            query_timeout=query_timeout,
            bulk_timeout=bulk_timeout,
            logger=logger,
        )
    
    if backend == "redis":
        raise UnsupportedBackendError("redis storage not yet implemented")
    
    raise UnsupportedBackendError(f"unknown database type: {db_type}")
