#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Usage:
    python app.py

Environment variables:
    BASE_URL - Base URL for short links (required)
    DB_TYPE - memory (default) or postgres
    DATABASE_URL - PostgreSQL connection URL when DB_TYPE=postgres
    SHORT_CODE_LENGTH - Length of generated codes (3-20)
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortlink.service import URLShortenerService
from shortlink.storage.factory import create_store
from shortlink.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and service on startup, release them on shutdown."""
    config = app.state.config
    logger = logging.getLogger("shortlink")

    logger.info("Starting URL shortener service...")

    # Schema migrations run here for postgres; failure aborts startup
    store = await create_store(
        config.db_type,
        database_url=config.database_url,
        pool_min_size=config.db_pool_min_size,
        pool_max_size=config.db_pool_max_size,
        query_timeout=config.db_query_timeout_seconds,
        bulk_timeout=config.db_bulk_timeout_seconds,
    )

    service = URLShortenerService(
        store=store,
        base_url=config.base_url,
        short_code_length=config.short_code_length,
        max_collision_retries=config.max_collision_retries,
    )

    app.state.store = store
    app.state.service = service

    logger.info("Service started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down URL shortener service...")
        await service.close()
        logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url'})}")

    app = create_app(
        store_instance=None,  # Will be set in lifespan
        service_instance=None,
        config=config,
        lifespan=lifespan,
    )

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)

    try:
        logger.info(f"Starting server on http://{config.server_address}")
        logger.info(f"API docs available at http://{config.server_address}/api/docs")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    logger.info("Server exited")


if __name__ == "__main__":
    main()
