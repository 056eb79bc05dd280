"""Zotero items with update/delete support."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from zotero_library.client import last_modified_version
from zotero_library.creator import Creator
from zotero_library.exceptions import ValidationError
from zotero_library.tag import Tag

if TYPE_CHECKING:
    from zotero_library.client import ZoteroClient

logger = logging.getLogger(__name__)


def _optional_field(field: str, doc: str | None = None, read_only: bool = False) -> property:
    """Build a property over an optional scalar of the item record."""

    def getter(self: Item) -> Any:
        return self._data.get(field)

    def setter(self: Item, value: Any) -> None:
        if value is None:
            self._data.pop(field, None)
        else:
            self._data[field] = value

    return property(getter, None if read_only else setter, doc=doc or f"The `{field}` field.")


def _required_text(value: str | None, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} cannot be empty")
    return str(value).strip()


class Item:
    """A single bibliographic record in a Zotero library.

    The item keeps a private copy of its record; changes made through
    setters stay local until ``update()`` is awaited.

    Example:
        >>> item = (await library.get_all_items())[0]
        >>> item.title = "Revised title"
        >>> item.add_tag(Tag("to-read"))
        >>> await item.update()
    """

    def __init__(self, data: dict[str, Any], client: ZoteroClient) -> None:
        """Initialize an item wrapper.

        Args:
            data: Item record (the ``data`` object of an API item).
            client: Transport for the library the item belongs to.
        """
        self._data: dict[str, Any] = copy.deepcopy(dict(data))
        for field in ("creators", "tags", "collections"):
            self._data.setdefault(field, [])
        self._client = client

    key = _optional_field("key", "Server-assigned item key.", read_only=True)
    version = _optional_field("version", "Optimistic-concurrency version.", read_only=True)
    date_added = _optional_field("dateAdded", read_only=True)
    date_modified = _optional_field("dateModified", read_only=True)

    url = _optional_field("url")
    abstract_note = _optional_field("abstractNote")
    publication_title = _optional_field("publicationTitle")
    volume = _optional_field("volume")
    issue = _optional_field("issue")
    pages = _optional_field("pages")
    date = _optional_field("date")
    language = _optional_field("language")
    doi = _optional_field("DOI")
    isbn = _optional_field("ISBN")
    issn = _optional_field("ISSN")
    short_title = _optional_field("shortTitle")
    access_date = _optional_field("accessDate")
    archive = _optional_field("archive")
    archive_location = _optional_field("archiveLocation")
    library_catalog = _optional_field("libraryCatalog")
    call_number = _optional_field("callNumber")
    rights = _optional_field("rights")
    extra = _optional_field("extra")
    publisher = _optional_field("publisher")
    place = _optional_field("place")
    series = _optional_field("series")
    series_title = _optional_field("seriesTitle")
    series_text = _optional_field("seriesText")
    journal_abbreviation = _optional_field("journalAbbreviation")

    @property
    def title(self) -> str | None:
        return self._data.get("title")

    @title.setter
    def title(self, value: str) -> None:
        self._data["title"] = _required_text(value, "Title")

    @property
    def item_type(self) -> str | None:
        return self._data.get("itemType")

    @item_type.setter
    def item_type(self, value: str) -> None:
        self._data["itemType"] = _required_text(value, "Item type")

    @property
    def collections(self) -> list[str]:
        """Keys of the collections containing this item (a copy)."""
        return list(self._data["collections"])

    @property
    def creators(self) -> list[Creator]:
        """Fresh Creator wrappers; edit them and re-add to change the item."""
        return [Creator.from_record(record) for record in self._data["creators"]]

    @property
    def tags(self) -> list[Tag]:
        """Fresh Tag wrappers over the item's tag records."""
        return [Tag.from_record(record) for record in self._data["tags"]]

    def add_creator(self, creator: Creator) -> None:
        self._data["creators"].append(creator.to_record())

    def remove_creator(self, index: int) -> None:
        """Remove the creator at ``index``. Out-of-range indices are ignored."""
        if 0 <= index < len(self._data["creators"]):
            del self._data["creators"][index]

    def add_tag(self, tag: Tag) -> None:
        self._data["tags"].append(tag.to_record())

    def remove_tag(self, index: int) -> None:
        """Remove the tag at ``index``. Out-of-range indices are ignored."""
        if 0 <= index < len(self._data["tags"]):
            del self._data["tags"][index]

    def _membership(self) -> list[str]:
        # Live list; only Collection.attach_to_item writes through it.
        return self._data["collections"]

    async def update(self) -> None:
        """Write the full record back to Zotero.

        Raises:
            RemoteError: If the API rejects the update.
        """
        response = await self._client.request(
            "PUT",
            f"/items/{self.key}",
            json=self._data,
            error=f"Failed to update item {self.key}",
        )
        new_version = last_modified_version(response)
        if new_version is not None:
            self._data["version"] = new_version
        logger.debug(f"Updated item {self.key} (version {self.version})")

    async def delete(self) -> None:
        """Delete the item, provided it is unchanged since ``version``.

        A version conflict surfaces as an ordinary RemoteError (412); re-fetch
        the item before trying again.

        Raises:
            RemoteError: If the API rejects the deletion.
        """
        await self._client.request(
            "DELETE",
            f"/items/{self.key}",
            headers={"If-Unmodified-Since-Version": str(self.version)},
            error=f"Failed to delete item {self.key}",
        )
        logger.debug(f"Deleted item {self.key}")

    def to_record(self) -> dict[str, Any]:
        """Return an independent copy of the item record."""
        return copy.deepcopy(self._data)

    def __repr__(self) -> str:
        return f"Item(key={self.key!r}, title={self.title!r})"
