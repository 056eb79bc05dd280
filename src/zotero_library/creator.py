"""Creators (authors, editors, ...) credited on Zotero items."""

from __future__ import annotations

from typing import Any

from zotero_library.exceptions import ValidationError


class Creator:
    """A contributor credited on an item.

    A creator is named either by a first/last name pair (people) or by a
    single ``name`` (organisations). Writing one form clears the other.
    Names are not otherwise validated; empty strings are accepted.
    """

    def __init__(
        self,
        creator_type: str = "author",
        first_name: str | None = None,
        last_name: str | None = None,
        name: str | None = None,
    ) -> None:
        if name is not None and (first_name is not None or last_name is not None):
            raise ValidationError(
                "A creator has either a single name or a first/last name, not both"
            )
        self._data: dict[str, Any] = {"creatorType": creator_type}
        if name is not None:
            self.name = name
        if first_name is not None:
            self.first_name = first_name
        if last_name is not None:
            self.last_name = last_name

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Creator:
        """Wrap a creator record as returned by the API."""
        creator = cls.__new__(cls)
        creator._data = dict(record)
        return creator

    @property
    def creator_type(self) -> str:
        return self._data.get("creatorType", "")

    @creator_type.setter
    def creator_type(self, value: str) -> None:
        self._data["creatorType"] = value

    @property
    def first_name(self) -> str | None:
        return self._data.get("firstName")

    @first_name.setter
    def first_name(self, value: str | None) -> None:
        self._set("firstName", value)
        if value is not None:
            self._data.pop("name", None)

    @property
    def last_name(self) -> str | None:
        return self._data.get("lastName")

    @last_name.setter
    def last_name(self, value: str | None) -> None:
        self._set("lastName", value)
        if value is not None:
            self._data.pop("name", None)

    @property
    def name(self) -> str | None:
        """Single-field name, used for organisations."""
        return self._data.get("name")

    @name.setter
    def name(self, value: str | None) -> None:
        self._set("name", value)
        if value is not None:
            self._data.pop("firstName", None)
            self._data.pop("lastName", None)

    def _set(self, field: str, value: str | None) -> None:
        if value is None:
            self._data.pop(field, None)
        else:
            self._data[field] = value

    def to_record(self) -> dict[str, Any]:
        """Return a copy of the creator record."""
        return dict(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Creator):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        if self.name is not None:
            return f"Creator({self.creator_type!r}, name={self.name!r})"
        return f"Creator({self.creator_type!r}, {self.last_name!r}, {self.first_name!r})"
