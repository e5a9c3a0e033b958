"""In-process implementation of the mapping store."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, List, Dict

from .base import MappingStoreBase
from .exceptions import CodeExistsError, NotFoundError
from .locks import AsyncRWLock
from .models import URLMapping


class MemoryStore(MappingStoreBase):
    """Volatile store backed by a dict guarded by a reader-writer lock.

    Mappings are copied on the way in and on the way out, so callers never
    share objects with the table. Growth is unbounded.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize empty store.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._data: Dict[str, URLMapping] = {}
        self._lock = AsyncRWLock()

    async def save(self, mapping: URLMapping) -> None:
        async with self._lock.write():
            if mapping.code in self._data:
                raise CodeExistsError(f"short code already exists: {mapping.code}")
            self._data[mapping.code] = replace(mapping)
        self.logger.debug(f"Saved mapping: {mapping.code} -> {mapping.original_url}")

    async def get(self, code: str) -> Optional[str]:
        async with self._lock.read():
            mapping = self._data.get(code)
            if mapping is None or mapping.is_expired():
                return None
            return mapping.original_url

    async def get_mapping(self, code: str) -> Optional[URLMapping]:
        async with self._lock.read():
            mapping = self._data.get(code)
            if mapping is None or mapping.is_expired():
                return None
            return replace(mapping)

    async def increment_click_count(self, code: str) -> None:
        async with self._lock.write():
            mapping = self._data.get(code)
            if mapping is None:
                raise NotFoundError(f"no URL mapping found for code: {code}")
            mapping.clicks += 1

    async def list_by_user(self, user_id: str) -> List[URLMapping]:
        async with self._lock.read():
            return [
                replace(mapping)
                for mapping in self._data.values()
                if mapping.user_id == user_id
            ]

    async def delete(self, code: str) -> None:
        async with self._lock.write():
            if code not in self._data:
                raise NotFoundError(f"no URL mapping found for code: {code}")
            del self._data[code]
        self.logger.debug(f"Deleted mapping: {code}")

    async def cleanup_expired(self) -> int:
        now = datetime.now(timezone.utc)
        async with self._lock.write():
            expired = [code for code, mapping in self._data.items() if mapping.is_expired(now)]
            for code in expired:
                del self._data[code]
        if expired:
            self.logger.info(f"Removed {len(expired)} expired mappings")
        return len(expired)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        pass
