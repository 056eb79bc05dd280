"""Tags attached to Zotero items."""

from __future__ import annotations

from typing import Any

from zotero_library.exceptions import ValidationError


class Tag:
    """A free-text label on an item.

    ``type`` is Zotero's tag classifier: 0 for manual tags, 1 for tags
    added automatically on import.
    """

    def __init__(self, name: str, type: int | None = None) -> None:
        self._data: dict[str, Any] = {}
        self.name = name
        self.type = type

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Tag:
        """Wrap a tag record as returned by the API."""
        tag = cls.__new__(cls)
        tag._data = dict(record)
        return tag

    @property
    def name(self) -> str:
        return self._data.get("tag", "")

    @name.setter
    def name(self, value: str) -> None:
        if value is None or not str(value).strip():
            raise ValidationError("Tag name cannot be empty")
        self._data["tag"] = str(value).strip()

    @property
    def type(self) -> int | None:
        return self._data.get("type")

    @type.setter
    def type(self, value: int | None) -> None:
        if value is None:
            self._data.pop("type", None)
        else:
            self._data["type"] = value

    def to_record(self) -> dict[str, Any]:
        """Return a copy of the tag record."""
        return dict(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Tag(name={self.name!r}, type={self.type!r})"
