"""Pytest configuration and fixtures."""

import logging

import pytest
from typing import AsyncGenerator

from shortlink.service import URLShortenerService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.storage.memory import MemoryStore
from shortlink.common.logging_config import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to a test's captured stdout."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def memory_store(logger) -> AsyncGenerator[MemoryStore, None]:
    """Create in-memory store."""
    store = MemoryStore(logger=logger)
    
    yield store
    
    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
async def service(memory_store, short_code_generator, logger) -> AsyncGenerator[URLShortenerService, None]:
    """Create service instance on the in-memory store."""
    service = URLShortenerService(
        store=memory_store,
        base_url="http://testserver",
        short_code_length=6,
        short_code_generator=short_code_generator,
        logger=logger,
    )
    
    yield service
    
    await service.close()


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
