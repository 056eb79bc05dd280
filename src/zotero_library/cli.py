"""CLI for zotero-library - inspect a Zotero library.

Usage:
    zotero-library status        # Show which credentials are configured
    zotero-library test          # Connect and count items
    zotero-library show          # List collections and items with their metadata
    zotero-library tags          # List tag names

Credentials come from ZOTERO_API_KEY, ZOTERO_LIBRARY_ID and
ZOTERO_LIBRARY_TYPE, or from the .env file in the repository root.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from zotero_library.exceptions import ZoteroError


def cmd_status() -> int:
    """Show status of the configured credentials."""
    from zotero_library.config import get_credential_status

    status = get_credential_status()

    print("=" * 60)
    print("ZOTERO CREDENTIAL STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {status['repo_root']}")
    print(f".env file:  {'[x]' if status['env_file'] else '[ ]'}")
    print()
    print("Zotero:")
    print(f"  API key:      {'[x]' if status['zotero']['api_key'] else '[ ]'}")
    print(f"  Library ID:   {'[x]' if status['zotero']['library_id'] else '[ ]'}")
    print(f"  Library type: {status['zotero']['library_type']}")
    print(f"  API URL:      {status['zotero']['api_url']}")
    print()

    return 0


def _open_library():
    """Create a Library from the environment."""
    from zotero_library.library import Library

    return Library()


async def _test() -> int:
    async with _open_library() as library:
        await library.connect()
        items = await library.get_all_items()
        print(f"  [✓] connected to {library.name} - {len(items)} items")
    return 0


async def _show() -> int:
    async with _open_library() as library:
        await library.connect()
        print(f"Connected to library: {library.name}")

        collections = await library.get_collections()
        print(f"Found {len(collections)} collections")

        items = await library.get_all_items()
        print(f"Found {len(items)} items")

        for item in items:
            print()
            print(f"Item Key:      {item.key}")
            print(f"Title:         {item.title}")
            print(f"Item Type:     {item.item_type}")
            print(f"URL:           {item.url}")
            print(f"Date:          {item.date}")
            print(f"Abstract note: {item.abstract_note}")
            print(f"Language:      {item.language}")
            print(f"Tags:          {', '.join(tag.name for tag in item.tags)}")
    return 0


async def _tags() -> int:
    async with _open_library() as library:
        for name in await library.get_tags():
            print(name)
    return 0


COMMANDS = {
    "test": _test,
    "show": _show,
    "tags": _tags,
}


def run_command(command: str) -> int:
    """Run an API-backed command, reporting Zotero errors instead of raising."""
    try:
        return asyncio.run(COMMANDS[command]())
    except ZoteroError as e:
        print(f"  [✗] {e}")
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="zotero-library",
        description="Inspect a Zotero library through the Web API",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every API request",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show credential status")
    subparsers.add_parser("test", help="Test the configured credentials")
    subparsers.add_parser("show", help="List collections and items")
    subparsers.add_parser("tags", help="List tag names")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    return run_command(args.command)


if __name__ == "__main__":
    sys.exit(main())
