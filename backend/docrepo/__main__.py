"""docrepo CLI entry point."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from docrepo import __version__
from docrepo.config import get_settings
from docrepo.connection import (
    check_connection,
    close_client,
    get_connection_info,
    get_database,
    init_client,
)
from docrepo.indexes import ensure_timestamp_indexes

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from docrepo.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _print_config_error(error: ValidationError) -> None:
    print("\n❌ Configuration Error:\n")
    for detail in error.errors():
        print(f"  • {'.'.join(str(x) for x in detail['loc'])}: {detail['msg']}")
    print()


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    settings = get_settings()
    info = get_connection_info(settings)

    print("\n=== docrepo Configuration ===\n")
    print(f"Environment: {settings.environment}")
    print(f"Log Level: {settings.log_level}\n")

    print("MongoDB:")
    print(f"  URL: {info['url']}")
    print(f"  Database: {settings.mongo.database}")
    print(f"  Server Selection Timeout: {settings.mongo.server_selection_timeout_ms} ms\n")

    print("Repository:")
    print(f"  Default Page Size: {settings.repository.default_page_size}")
    print(f"  Atomic Upsert: {settings.repository.atomic_upsert}\n")

    print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
    return 0


async def _ping() -> bool:
    init_client(get_settings())
    try:
        return await check_connection()
    finally:
        close_client()


def cmd_ping(args: argparse.Namespace) -> int:
    """Check that MongoDB is reachable."""
    info = get_connection_info()
    if asyncio.run(_ping()):
        print(f"\n✓ MongoDB reachable at {info['url']} (database: {info['database']})\n")
        return 0

    print(f"\n❌ MongoDB not reachable at {info['url']}\n")
    return 1


async def _ensure_indexes(collection_name: str) -> list[str]:
    init_client(get_settings())
    try:
        return await ensure_timestamp_indexes(get_database()[collection_name])
    finally:
        close_client()


def cmd_indexes(args: argparse.Namespace) -> int:
    """Create the timestamp indexes on a collection."""
    try:
        names = asyncio.run(_ensure_indexes(args.collection))
    except Exception as e:
        logger.error(f"Failed to create indexes: {e}")
        print(f"\n❌ Failed to create indexes on '{args.collection}': {e}\n")
        return 1

    print(f"\n✓ Indexes on '{args.collection}': {', '.join(names)}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="docrepo: generic MongoDB repository tooling",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"docrepo {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_ping = subparsers.add_parser(
        "ping",
        help="Check the MongoDB connection",
    )
    parser_ping.set_defaults(func=cmd_ping)

    parser_indexes = subparsers.add_parser(
        "indexes",
        help="Create createTime/updateTime indexes on a collection",
    )
    parser_indexes.add_argument(
        "--collection",
        required=True,
        help="Collection name",
    )
    parser_indexes.set_defaults(func=cmd_indexes)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = get_settings()
    except ValidationError as e:
        _print_config_error(e)
        return 1

    logging.getLogger().setLevel(settings.log_level)
    _init_logfire()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
