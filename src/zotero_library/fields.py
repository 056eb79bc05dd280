"""Item field policy and creation-response decoding.

Item submissions are checked against a fixed allow-list of Zotero field
names. Write responses come in two shapes: a plain array of created
records, or the Zotero write-status object whose ``successful`` map is
keyed by submission index. Both decode to a single record; any other shape
is rejected.
"""

from collections.abc import Mapping
from typing import Any

from zotero_library.exceptions import MalformedResponseError, RemoteError

# Field names accepted by Library.create_item
ITEM_FIELDS = (
    "itemType",
    "title",
    "creators",
    "abstractNote",
    "publicationTitle",
    "url",
    "tags",
    "date",
    "pages",
    "volume",
    "issue",
    "publisher",
    "place",
    "ISBN",
    "series",
    "seriesTitle",
    "seriesText",
    "journalAbbreviation",
    "language",
    "DOI",
    "ISSN",
    "shortTitle",
    "accessDate",
    "archive",
    "archiveLocation",
    "libraryCatalog",
    "callNumber",
    "rights",
    "extra",
    "collections",
)
ITEM_FIELD_SET = frozenset(ITEM_FIELDS)

DEFAULT_ITEM_TYPE = "webpage"


def filter_item_fields(fields: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Split submitted fields into accepted values and unknown names.

    Args:
        fields: Caller-supplied field mapping.

    Returns:
        Tuple of (accepted fields, unknown field names in submission order).
    """
    valid: dict[str, Any] = {}
    unknown: list[str] = []
    for name, value in fields.items():
        if name in ITEM_FIELD_SET:
            valid[name] = value
        else:
            unknown.append(name)
    return valid, unknown


def unwrap_record(entry: Any) -> Any:
    """Return the record inside an API envelope, or the entry itself.

    List endpoints wrap each record as ``{key, version, library, links,
    meta, data}``.
    """
    if isinstance(entry, Mapping) and isinstance(entry.get("data"), Mapping):
        return entry["data"]
    return entry


def _index_order(index: str) -> tuple[int, int | str]:
    return (0, int(index)) if index.isdigit() else (1, index)


def _first_successful(payload: Mapping[str, Any]) -> Any:
    successful = payload["successful"]
    if not isinstance(successful, Mapping):
        raise MalformedResponseError("'successful' is not an object", payload=payload)

    if not successful:
        failed = payload.get("failed")
        if isinstance(failed, Mapping) and failed:
            failure = failed[min(failed, key=_index_order)]
            code = failure.get("code") if isinstance(failure, Mapping) else None
            message = failure.get("message") if isinstance(failure, Mapping) else failure
            raise RemoteError(f"Zotero API rejected the object: {message}", code, message)
        raise MalformedResponseError("Zotero API reported no created object", payload=payload)

    return successful[min(successful, key=_index_order)]


def extract_created_item(payload: Any) -> dict[str, Any]:
    """Decode the item record from a POST /items response.

    Args:
        payload: Decoded response body.

    Returns:
        The created item record.

    Raises:
        MalformedResponseError: If the payload matches neither known shape.
        RemoteError: If the write-status object reports the item as failed.
    """
    if isinstance(payload, list):
        entry = payload[0] if payload else None
    elif isinstance(payload, Mapping) and "successful" in payload:
        entry = _first_successful(payload)
    else:
        raise MalformedResponseError(
            "Zotero API did not return a valid created item", payload=payload
        )

    if not isinstance(entry, Mapping) or not isinstance(entry.get("data"), Mapping):
        raise MalformedResponseError(
            "Zotero API did not return a valid created item", payload=payload
        )
    return dict(entry["data"])


def extract_created_collection(payload: Any) -> dict[str, Any]:
    """Decode the collection record from a POST /collections response.

    The array shape carries the record directly as element 0; the
    write-status shape carries it under ``data``.
    """
    if isinstance(payload, list):
        entry = payload[0] if payload else None
    elif isinstance(payload, Mapping) and "successful" in payload:
        entry = _first_successful(payload)
    else:
        entry = None

    record = unwrap_record(entry)
    if not isinstance(record, Mapping):
        raise MalformedResponseError(
            "Zotero API did not return a valid created collection", payload=payload
        )
    return dict(record)
