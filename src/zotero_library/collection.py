"""Zotero collections."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from zotero_library.client import last_modified_version
from zotero_library.exceptions import MalformedResponseError, ValidationError
from zotero_library.fields import unwrap_record
from zotero_library.item import Item

if TYPE_CHECKING:
    from zotero_library.client import ZoteroClient

logger = logging.getLogger(__name__)


class Collection:
    """A named, optionally nested grouping of items."""

    def __init__(self, data: dict[str, Any], client: ZoteroClient) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data))
        self._client = client

    @property
    def key(self) -> str | None:
        return self._data.get("key")

    @property
    def version(self) -> int | None:
        return self._data.get("version")

    @property
    def name(self) -> str | None:
        return self._data.get("name")

    @name.setter
    def name(self, value: str) -> None:
        if value is None or not str(value).strip():
            raise ValidationError("Collection name cannot be empty")
        self._data["name"] = str(value).strip()

    @property
    def parent_collection(self) -> str | None:
        """Key of the parent collection, or None for a top-level collection."""
        # The API reports top-level collections with parentCollection: false
        return self._data.get("parentCollection") or None

    @parent_collection.setter
    def parent_collection(self, value: str | None) -> None:
        if value is None:
            self._data.pop("parentCollection", None)
        else:
            self._data["parentCollection"] = value

    async def get_items(self) -> list[Item]:
        """Fetch the items in this collection.

        Raises:
            RemoteError: If the request fails.
        """
        payload = await self._client.get_json(
            f"/collections/{self.key}/items",
            error=f"Failed to fetch items for collection {self.key}",
        )
        if not isinstance(payload, list):
            raise MalformedResponseError(
                f"Expected a list of items for collection {self.key}", payload=payload
            )
        return [Item(unwrap_record(entry), self._client) for entry in payload]

    async def update(self) -> None:
        """Write the collection record back to Zotero.

        Raises:
            RemoteError: If the API rejects the update.
        """
        response = await self._client.request(
            "PUT",
            f"/collections/{self.key}",
            json=self._data,
            error=f"Failed to update collection {self.key}",
        )
        new_version = last_modified_version(response)
        if new_version is not None:
            self._data["version"] = new_version
        logger.debug(f"Updated collection {self.key} (version {self.version})")

    async def delete(self) -> None:
        """Delete the collection unconditionally."""
        await self._client.request(
            "DELETE",
            f"/collections/{self.key}",
            error=f"Failed to delete collection {self.key}",
        )
        logger.debug(f"Deleted collection {self.key}")

    async def attach_to_item(self, item: Item) -> None:
        """Add ``item`` to this collection and save it.

        Does nothing, and sends nothing, if the item is already a member.
        Writes through the item's live membership list, so collection lists
        read from the item earlier are stale afterwards. If the update fails
        the membership change is undone.
        """
        membership = item._membership()
        if self.key in membership:
            return
        membership.append(self.key)
        try:
            await item.update()
        except BaseException:
            membership.remove(self.key)
            raise

    def to_record(self) -> dict[str, Any]:
        """Return an independent copy of the collection record."""
        return copy.deepcopy(self._data)

    def __repr__(self) -> str:
        return f"Collection(key={self.key!r}, name={self.name!r})"
