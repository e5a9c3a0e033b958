"""Business logic service for URL shortener."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, List, Set

from .shortcode import ShortCodeGenerator
from .storage.base import MappingStoreBase
from .storage.exceptions import CodeExistsError, NotFoundError
from .storage.models import URLMapping


class URLShortenerService:
    """Service layer for URL shortening business logic."""

    def __init__(
        self,
        store: MappingStoreBase,
        base_url: str = "",
        short_code_length: int = 6,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
    ):
        """Initialize URL shortener service.

        Args:
            store: Mapping store instance
            base_url: Public base URL short links are built on
            short_code_length: Length of generated codes
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Extra attempts after a code collision

        Raises:
            ValueError: If max_collision_retries is negative
        """
        if max_collision_retries < 0:
            raise ValueError(f"max_collision_retries must be >= 0, got {max_collision_retries}")
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.generator = short_code_generator or ShortCodeGenerator(default_length=short_code_length)
        self.short_code_length = short_code_length
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self._pending_clicks: Set[asyncio.Task] = set()

    def short_url(self, code: str) -> str:
        """Public short URL for a code."""
        return f"{self.base_url}/{code}"

    async def shorten(self, user_id: str, original_url: str) -> str:
        """Create a new short code for a URL.

        Args:
            user_id: Owner of the mapping
            original_url: The original long URL

        Returns:
            The generated short code

        Raises:
            CodeExistsError: If every attempt collided with a stored code
            StorageError: On any other store failure
        """
        self.logger.info(f"Shortening new url: {original_url}")

        for attempt in range(self.max_collision_retries + 1):
            mapping = URLMapping(
                code=self.generator.generate(self.short_code_length),
                original_url=original_url,
                user_id=user_id,
                created_at=datetime.now(timezone.utc),
            )
            try:
                await self.store.save(mapping)
            except CodeExistsError:
                self.logger.debug(f"Code collision on attempt {attempt + 1}: {mapping.code}")
                if attempt == self.max_collision_retries:
                    self.logger.error(
                        f"Shorten failed: no free code after {attempt + 1} attempts "
                        f"(user={user_id}, url={original_url})"
                    )
                    raise
                continue
            except Exception as e:
                self.logger.error(f"Shorten failed for user={user_id} url={original_url}: {e}")
                raise

            self.logger.info(f"Created short URL: {mapping.code} -> {original_url}")
            return mapping.code

    async def resolve(self, code: str) -> str:
        """Get the original URL for a code and count the click.

        The click is recorded by a background task; this call returns
        without waiting for it and never sees its outcome.

        Args:
            code: The short code to lookup

        Returns:
            Original URL

        Raises:
            NotFoundError: If the code is unknown or expired
            StorageError: If the lookup itself failed
        """
        try:
            original_url = await self.store.get(code)
        except Exception as e:
            self.logger.error(f"Resolve failed for code={code}: {e}")
            raise

        if original_url is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError("code not found")

        # Increment in background (fire and forget)
        task = asyncio.create_task(self._record_click(code))
        self._pending_clicks.add(task)
        task.add_done_callback(self._pending_clicks.discard)

        self.logger.debug(f"Resolved URL: {code} -> {original_url}")
        return original_url

    async def _record_click(self, code: str) -> None:
        try:
            await self.store.increment_click_count(code)
        except Exception as e:
            self.logger.warning(f"Failed to increment click count for {code}: {e}")

    async def list_mappings(self, user_id: str) -> List[URLMapping]:
        """List all mappings owned by a user."""
        try:
            return await self.store.list_by_user(user_id)
        except Exception as e:
            self.logger.error(f"ListMappings failed for user={user_id}: {e}")
            raise

    async def delete_mapping(self, code: str) -> None:
        """Delete a mapping.

        Raises:
            NotFoundError: If the code is not stored
        """
        await self.store.delete(code)
        self.logger.info(f"Deleted short URL: {code}")

    async def cleanup_expired(self) -> int:
        """Remove expired mappings from the store."""
        return await self.store.cleanup_expired()

    async def health_check(self) -> bool:
        return await self.store.health_check()

    @property
    def pending_clicks(self) -> int:
        """Number of click increments still in flight."""
        return len(self._pending_clicks)

    async def wait_for_pending_clicks(self) -> None:
        """Wait until every scheduled click increment has finished."""
        while self._pending_clicks:
            await asyncio.gather(*list(self._pending_clicks))

    async def close(self) -> None:
        """Let in-flight clicks land, then close the store."""
        await self.wait_for_pending_clicks()
        await self.store.close()
