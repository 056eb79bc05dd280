"""Zotero libraries: the entry point for collections, items and tags."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

import httpx

from zotero_library.client import ZoteroClient, decode_json
from zotero_library.collection import Collection
from zotero_library.config import DEFAULT_LIBRARY_TYPE, get_api_url, normalize_library_type
from zotero_library.exceptions import (
    MalformedResponseError,
    RemoteError,
    ValidationError,
    ZoteroConnectionError,
)
from zotero_library.fields import (
    DEFAULT_ITEM_TYPE,
    extract_created_collection,
    extract_created_item,
    filter_item_fields,
    unwrap_record,
)
from zotero_library.item import Item

logger = logging.getLogger(__name__)


class Library:
    """A Zotero user or group library.

    Metadata (``id``, ``name``, ``type``, ``links``) is only available after
    ``connect()``. Other operations do not require a prior connect: they go
    straight to the API and fail there if the credential is wrong.

    Example:
        >>> async with Library(api_key="your-api-key", library_id="12345") as library:
        ...     await library.connect()
        ...     item = await library.create_item({"title": "Report", "url": "https://example.com"})
        ...     collection = await library.create_collection("Reading list")
        ...     await collection.attach_to_item(item)
    """

    def __init__(
        self,
        api_key: str | None = None,
        library_id: str | None = None,
        library_type: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize a library handle.

        Args:
            api_key: Zotero API key. If None, reads from ZOTERO_API_KEY env var.
            library_id: User ID or group ID. If None, reads from ZOTERO_LIBRARY_ID.
            library_type: "users" or "groups" ("user"/"group" accepted). If None,
                reads from ZOTERO_LIBRARY_TYPE (default: "users").
            base_url: API root. If None, reads from ZOTERO_API_URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport for the underlying client.

        Raises:
            ValidationError: If the key or library id is empty, or the type is unknown.
        """
        api_key = api_key if api_key is not None else os.environ.get("ZOTERO_API_KEY")
        library_id = (
            library_id if library_id is not None else os.environ.get("ZOTERO_LIBRARY_ID")
        )
        raw_type = library_type or os.environ.get("ZOTERO_LIBRARY_TYPE", DEFAULT_LIBRARY_TYPE)

        if not api_key or not api_key.strip():
            raise ValidationError("API key is required")
        if not library_id or not str(library_id).strip():
            raise ValidationError("Library ID is required")
        normalized_type = normalize_library_type(raw_type)
        if normalized_type is None:
            raise ValidationError(
                f"Unknown library type: {raw_type!r}. Expected 'users' or 'groups'"
            )

        self._client = ZoteroClient(
            api_key=api_key,
            library_id=str(library_id),
            library_type=normalized_type,
            base_url=base_url or get_api_url(),
            timeout=timeout,
            transport=transport,
        )
        self._library_data: dict[str, Any] | None = None

    @property
    def client(self) -> ZoteroClient:
        """The transport shared with this library's collections and items."""
        return self._client

    @property
    def api_key(self) -> str:
        return self._client.api_key

    @property
    def library_id(self) -> str:
        return self._client.library_id

    @property
    def library_type(self) -> str:
        return self._client.library_type

    @property
    def is_connected(self) -> bool:
        return self._library_data is not None

    @property
    def id(self) -> int | None:
        return self._metadata("id")

    @property
    def name(self) -> str | None:
        return self._metadata("name")

    @property
    def type(self) -> str | None:
        return self._metadata("type")

    @property
    def links(self) -> dict[str, Any] | None:
        return self._metadata("links")

    def _metadata(self, field: str) -> Any:
        if self._library_data is None:
            return None
        return self._library_data.get(field)

    async def connect(self) -> None:
        """Fetch the library record.

        Raises:
            RemoteError: If the API answers with a non-success status.
            ZoteroConnectionError: If the request cannot be made or the body
                cannot be decoded.
        """
        try:
            response = await self._client.send("GET")
        except httpx.HTTPError as e:
            raise self._connection_error(e) from e

        if not response.is_success:
            status, reason = response.status_code, response.reason_phrase
            raise RemoteError(
                f"Failed to connect to Zotero API ({status}): {reason}", status, reason
            )

        try:
            data = response.json()
        except ValueError as e:
            raise self._connection_error(e) from e
        if not isinstance(data, Mapping):
            raise self._connection_error(
                MalformedResponseError("Library record is not an object", payload=data)
            )

        self._library_data = dict(data)
        logger.debug(f"Connected to {self.library_type}/{self.library_id}: {self.name}")

    def _connection_error(self, original: BaseException) -> ZoteroConnectionError:
        return ZoteroConnectionError(
            api_key=self.api_key,
            library_id=self.library_id,
            library_type=self.library_type,
            original=original,
        )

    async def _get_list(self, endpoint: str) -> list[Any]:
        payload = await self._client.get_json(endpoint)
        if not isinstance(payload, list):
            raise MalformedResponseError(f"Expected a list from {endpoint}", payload=payload)
        return payload

    async def get_collections(self) -> list[Collection]:
        """Fetch all collections in the library."""
        payload = await self._get_list("/collections")
        return [Collection(unwrap_record(entry), self._client) for entry in payload]

    async def get_all_items(self) -> list[Item]:
        """Fetch all items in the library."""
        payload = await self._get_list("/items")
        return [Item(unwrap_record(entry), self._client) for entry in payload]

    async def get_tags(self) -> list[str]:
        """Fetch the names of all tags in the library."""
        payload = await self._get_list("/tags")
        return [entry["tag"] if isinstance(entry, Mapping) else entry for entry in payload]

    async def create_collection(
        self, name: str, parent_collection: str | None = None
    ) -> Collection:
        """Create a collection.

        Args:
            name: Collection name.
            parent_collection: Optional parent collection key.

        Raises:
            ValidationError: If the name is empty.
            RemoteError: If the API rejects the collection.
            MalformedResponseError: If the response cannot be decoded.
        """
        if name is None or not str(name).strip():
            raise ValidationError("Collection name is required")

        record: dict[str, Any] = {"name": str(name).strip()}
        if parent_collection is not None:
            record["parentCollection"] = parent_collection

        response = await self._client.request(
            "POST", "/collections", json=[record], error="Failed to create collection"
        )
        created = extract_created_collection(decode_json(response))
        logger.debug(f"Created collection {created.get('key')}")
        return Collection(created, self._client)

    async def create_item(self, fields: Mapping[str, Any]) -> Item:
        """Create an item from a mapping of Zotero field names.

        Fields outside the accepted set are dropped with a warning. The item
        type defaults to "webpage".

        Args:
            fields: Item fields, e.g. {"title": "Report", "url": "https://..."}.

        Raises:
            ValidationError: If no non-empty title is given.
            RemoteError: If the API rejects the item.
            MalformedResponseError: If the response cannot be decoded.
        """
        title = fields.get("title")
        if title is None or not str(title).strip():
            raise ValidationError("A title is required to create a Zotero item")

        valid, unknown = filter_item_fields(fields)
        if unknown:
            logger.warning(f"Unknown fields ignored: {', '.join(unknown)}")

        if valid.get("itemType") is None:
            valid["itemType"] = DEFAULT_ITEM_TYPE

        response = await self._client.request(
            "POST", "/items", json=[{"data": valid}], error="Failed to create item"
        )
        created = extract_created_item(decode_json(response))
        logger.debug(f"Created item {created.get('key')}")
        return Item(created, self._client)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    def __repr__(self) -> str:
        return f"Library({self.library_type}/{self.library_id})"
