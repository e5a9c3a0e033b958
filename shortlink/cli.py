"""
Command-line interface for URL shortener service.

Usage:
    shortlink shorten <user_id> <url>
    shortlink resolve <code>
    shortlink list <user_id>
    shortlink delete <code>
    shortlink cleanup
    shortlink migrate
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional, List

from .common.logging_config import setup_logging
from .service import URLShortenerService
from .storage.exceptions import StoreError
from .storage.factory import create_store
from .storage.migrations import apply_migrations


def _emit(payload: dict) -> int:
    print(json.dumps({"success": True, **payload}, indent=2))
    return 0


def _fail(error: str) -> int:
    print(json.dumps({"success": False, "error": error}, indent=2), file=sys.stderr)
    return 1


class ShortlinkCLI:
    """Command-line interface for URL shortener."""

    def __init__(
        self,
        db_type: str,
        database_url: Optional[str] = None,
        base_url: str = "",
        short_code_length: int = 6,
        verbose: bool = False,
    ):
        """Initialize CLI."""
        self.db_type = db_type
        self.database_url = database_url
        self.base_url = base_url
        self.short_code_length = short_code_length
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service: Optional[URLShortenerService] = None

    async def initialize(self):
        """Build the store and service."""
        store = await create_store(
            self.db_type,
            database_url=self.database_url,
            logger=self.logger,
        )
        self.service = URLShortenerService(
            store=store,
            base_url=self.base_url,
            short_code_length=self.short_code_length,
            logger=self.logger,
        )

    async def cleanup(self):
        """Flush pending clicks and release the store."""
        if self.service:
            await self.service.close()

    async def shorten(self, user_id: str, url: str) -> int:
        code = await self.service.shorten(user_id, url)
        return _emit({
            "short_code": code,
            "short_url": self.service.short_url(code),
            "original_url": url,
        })

    async def resolve(self, code: str) -> int:
        original_url = await self.service.resolve(code)
        return _emit({"short_code": code, "original_url": original_url})

    async def list_mappings(self, user_id: str) -> int:
        mappings = await self.service.list_mappings(user_id)
        return _emit({
            "count": len(mappings),
            "urls": [m.to_dict() for m in mappings],
        })

    async def delete(self, code: str) -> int:
        await self.service.delete_mapping(code)
        return _emit({"short_code": code, "deleted": True})

    async def cleanup_expired(self) -> int:
        removed = await self.service.cleanup_expired()
        return _emit({"removed": removed})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlink",
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s --db-type postgres shorten user123 https://example.com/long/url

  # Resolve a code (counts a click)
  %(prog)s --db-type postgres resolve abc123

  # Remove expired links
  %(prog)s --db-type postgres cleanup
        """
    )

    parser.add_argument(
        "--db-type",
        default=os.getenv("DB_TYPE", "memory"),
        help="Storage backend (default: from DB_TYPE env or memory)"
    )

    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL"),
        help="PostgreSQL connection URL (default: from DATABASE_URL env)"
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:3000"),
        help="Base URL for short links (default: from BASE_URL env)"
    )

    parser.add_argument(
        "--length",
        type=int,
        default=int(os.getenv("SHORT_CODE_LENGTH", "6")),
        help="Generated code length"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("user_id", help="Owner of the short link")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Get original URL")
    resolve_parser.add_argument("code", help="Short code to lookup")

    list_parser = subparsers.add_parser("list", help="List a user's URLs")
    list_parser.add_argument("user_id", help="Owner to list")

    delete_parser = subparsers.add_parser("delete", help="Delete a short URL")
    delete_parser.add_argument("code", help="Short code to delete")

    subparsers.add_parser("cleanup", help="Remove expired URLs")
    subparsers.add_parser("migrate", help="Apply pending schema migrations (postgres)")

    return parser


async def run(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and execute one command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "migrate":
        if not args.database_url:
            return _fail("DATABASE_URL is required for migrate")
        logger = setup_logging(level="DEBUG" if args.verbose else "INFO")
        try:
            applied = await apply_migrations(args.database_url, logger=logger)
        except StoreError as e:
            return _fail(str(e))
        return _emit({"applied": applied})

    cli = ShortlinkCLI(
        db_type=args.db_type,
        database_url=args.database_url,
        base_url=args.base_url,
        short_code_length=args.length,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.user_id, args.url)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "list":
            return await cli.list_mappings(args.user_id)
        elif args.command == "delete":
            return await cli.delete(args.code)
        elif args.command == "cleanup":
            return await cli.cleanup_expired()
        else:
            parser.print_help()
            return 1

    except (StoreError, ValueError) as e:
        return _fail(str(e))
    finally:
        await cli.cleanup()


def main() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
