#!/usr/bin/env python3
"""
kv-collections Command Line Entry Point

Inspect and edit record collections stored in Redis.

Usage:
    python -m kvcollections dump users
    python -m kvcollections find users --where '{"username": "A"}'
    python -m kvcollections find users --where '{"id": 1}' --operator NOT
    python -m kvcollections find-one users --id 1
    python -m kvcollections save users '{"id": 1, "username": "C"}' --comparator '{"id": 1}'
    python -m kvcollections delete users --id 1
    python -m kvcollections --prefix EX_ delete users --where '{"username": "A"}'

Environment Variables:
    KV_COLLECTIONS_REDIS_URL    - Redis URL (overrides host/port/db)
    KV_COLLECTIONS_REDIS_HOST   - Redis host
    KV_COLLECTIONS_REDIS_PORT   - Redis port
    KV_COLLECTIONS_KEY_PREFIX   - Prefix applied to every key
    KV_COLLECTIONS_DEBUG        - Enable debug logging (true/false)
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from .backends.redis_backend import RedisBackend
from .collection import NOT_FOUND, CollectionStore
from .config.settings import settings
from .errors import CollectionError
from .query.operators import Operator

logger = logging.getLogger(__name__)


def _json_arg(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kv-collections",
        description="kv-collections: query record collections stored in Redis",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("--url", type=str, default=settings.REDIS_URL, help="Redis URL")
    parser.add_argument("--host", type=str, default=settings.REDIS_HOST, help="Redis host")
    parser.add_argument("--port", type=int, default=settings.REDIS_PORT, help="Redis port")
    parser.add_argument("--db", type=int, default=settings.REDIS_DB, help="Redis database number")
    parser.add_argument("--prefix", type=str, default=settings.KEY_PREFIX, help="Key prefix")
    parser.add_argument("--debug", action="store_true", default=settings.DEBUG, help="Enable debug logging")

    operators = [op.value for op in Operator]
    commands = parser.add_subparsers(dest="command", required=True)

    dump = commands.add_parser("dump", help="Print the whole collection")
    dump.add_argument("key")

    find = commands.add_parser("find", help="Print every matching record")
    find.add_argument("key")
    find.add_argument("--where", type=_json_arg, default={}, help="Where clause as JSON")
    find.add_argument("--operator", choices=operators, default="AND")

    find_one = commands.add_parser("find-one", help="Print the first matching record")
    find_one.add_argument("key")
    group = find_one.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", type=_json_arg, default=argparse.SUPPRESS, help="Identity value as JSON")
    group.add_argument("--where", type=_json_arg, help="Where clause as JSON")
    find_one.add_argument("--operator", choices=operators, default="AND")

    save = commands.add_parser("save", help="Save a record, replacing the one matching --comparator")
    save.add_argument("key")
    save.add_argument("record", type=_json_arg, help="Record as JSON")
    save.add_argument("--comparator", type=_json_arg, default=None,
                      help="Comparator as JSON (default: the record's id)")

    delete = commands.add_parser("delete", help="Delete records by id or where clause")
    delete.add_argument("key")
    group = delete.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", type=_json_arg, default=argparse.SUPPRESS, help="Identity value as JSON")
    group.add_argument("--where", type=_json_arg, help="Where clause as JSON")

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def build_backend(args: argparse.Namespace):
    """Create the store client described by the connection arguments."""
    if args.url:
        return RedisBackend.from_url(args.url, key_prefix=args.prefix)
    return RedisBackend(host=args.host, port=args.port, db=args.db, key_prefix=args.prefix)


async def run_command(store: CollectionStore, args: argparse.Namespace) -> Any:
    """Execute the selected subcommand and return its JSON-serializable result."""
    if args.command == "dump":
        return await store.get_all(args.key) or []

    if args.command == "find":
        return await store.find(args.key, {"where": args.where, "operator": args.operator})

    if args.command == "find-one":
        if "id" in args:
            found = await store.find_one(args.key, args.id)
        else:
            found = await store.find_one(args.key, {"where": args.where, "operator": args.operator})
        return None if found is NOT_FOUND else found

    if args.command == "save":
        if not isinstance(args.record, dict):
            raise CollectionError("record must be a JSON object")
        comparator = args.comparator if args.comparator is not None else {"id": args.record.get("id")}
        return await store.save_or_update(args.key, args.record, comparator)

    if args.command == "delete":
        if "id" in args:
            return await store.delete(args.key, args.id)
        return await store.delete(args.key, {"where": args.where})

    raise CollectionError(f"unknown command: {args.command}")


async def _run(args: argparse.Namespace) -> Any:
    try:
        backend = build_backend(args)
    except Exception as e:
        raise CollectionError(f"cannot create store client: {e}") from e
    try:
        return await run_command(CollectionStore(backend), args)
    finally:
        close = getattr(backend, "close", None)
        if close is not None:
            await close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line tool."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    logger.debug(f"Running {args.command} on {args.prefix}{args.key}")

    try:
        result = asyncio.run(_run(args))
    except CollectionError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
