#!/usr/bin/env python3
"""
Example Walkthrough for kv-collections

Saves a record, queries it back, deletes by where clause and queries
again.

Usage:
    python scripts/example.py                   # Redis at 127.0.0.1:6379
    python scripts/example.py --host 1.2.3.4    # Specific host
    python scripts/example.py --memory          # No server, in-process backend
"""

import argparse
import asyncio

from kvcollections import CollectionError, CollectionStore, MemoryBackend, RedisBackend

KEY = "EXAMPLE"


async def walkthrough(store: CollectionStore) -> None:
    """Run the save / find / delete / find sequence."""
    saved = await store.save_or_update(KEY, {"id": 1, "username": "Jeffyter"}, {"id": 1})
    if not saved:
        print("Save was not acknowledged")
        return

    search = await store.find(KEY, {"where": {"username": "Jeffyter"}})
    print(search)

    # Removes every record whose username or id matches
    await store.delete(KEY, {"where": {"username": "Jeffyter", "id": 2}})

    search_two = await store.find(KEY, {"where": {"id": 1}})
    print(search_two)


async def run(args: argparse.Namespace) -> None:
    if args.memory:
        backend = MemoryBackend(key_prefix=args.prefix)
    else:
        backend = RedisBackend(host=args.host, port=args.port, key_prefix=args.prefix)

    try:
        await walkthrough(CollectionStore(backend))
    finally:
        if isinstance(backend, RedisBackend):
            await backend.close()


def main():
    parser = argparse.ArgumentParser(description="kv-collections example")
    parser.add_argument("--host", default="127.0.0.1", help="Redis host")
    parser.add_argument("--port", type=int, default=6379, help="Redis port")
    parser.add_argument("--prefix", default="EX_", help="Key prefix")
    parser.add_argument("--memory", action="store_true", help="Use the in-process backend")
    args = parser.parse_args()

    try:
        asyncio.run(run(args))
    except CollectionError as e:
        print(f"Error: {e}")
    except KeyboardInterrupt:
        print("\n\nInterrupted.")


if __name__ == "__main__":
    main()
