"""Async client library for the Zotero Web API.

Usage:
    from zotero_library import Library, Tag

    async with Library(api_key="...", library_id="12345", library_type="users") as library:
        await library.connect()
        print(library.name)

        item = await library.create_item({"title": "Report", "url": "https://example.com"})
        item.add_tag(Tag("to-read"))
        await item.update()

Credentials may also come from ZOTERO_API_KEY, ZOTERO_LIBRARY_ID and
ZOTERO_LIBRARY_TYPE (see zotero_library.config).
"""

from zotero_library.client import ZoteroClient
from zotero_library.collection import Collection
from zotero_library.creator import Creator
from zotero_library.exceptions import (
    AuthenticationError,
    MalformedResponseError,
    RemoteError,
    ValidationError,
    ZoteroConnectionError,
    ZoteroError,
)
from zotero_library.fields import ITEM_FIELDS
from zotero_library.item import Item
from zotero_library.library import Library
from zotero_library.tag import Tag

__version__ = "0.1.0"

__all__ = [
    "Library",
    "Collection",
    "Item",
    "Creator",
    "Tag",
    "ZoteroClient",
    "ITEM_FIELDS",
    "ZoteroError",
    "ValidationError",
    "RemoteError",
    "AuthenticationError",
    "ZoteroConnectionError",
    "MalformedResponseError",
]
