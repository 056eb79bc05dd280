"""Shared fixtures: a scripted Zotero API behind httpx.MockTransport."""

import json

import httpx
import pytest

from zotero_library import Library


class FakeZotero:
    """Answers requests from a queue of canned responses and records them."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list = []

    def respond(self, status_code=200, json_body=None, headers=None, content=None):
        """Queue the next response."""
        self._responses.append(
            {"status_code": status_code, "json": json_body, "headers": headers, "content": content}
        )

    def fail(self, error_class=httpx.ConnectError, message="connection refused"):
        """Queue a transport failure."""
        self._responses.append((error_class, message))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        queued = self._responses.pop(0)
        if isinstance(queued, tuple):
            error_class, message = queued
            raise error_class(message, request=request)
        if queued["content"] is not None:
            return httpx.Response(
                queued["status_code"], content=queued["content"], headers=queued["headers"]
            )
        if queued["json"] is None:
            return httpx.Response(queued["status_code"], headers=queued["headers"])
        return httpx.Response(
            queued["status_code"], json=queued["json"], headers=queued["headers"]
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def fake_api():
    """A scripted Zotero API."""
    return FakeZotero()


@pytest.fixture
def library(fake_api):
    """A user library wired to the scripted API."""
    return Library(
        api_key="test-api-key-123",
        library_id="123",
        library_type="users",
        base_url="https://api.zotero.org",
        transport=httpx.MockTransport(fake_api.handler),
    )


@pytest.fixture
def client(library):
    """The transport shared by the library's wrappers."""
    return library.client


@pytest.fixture
def item_data():
    """An item record as found in the ``data`` field of the API."""
    return {
        "key": "TESTITEM123",
        "version": 7,
        "itemType": "journalArticle",
        "title": "Test Article",
        "creators": [{"creatorType": "author", "firstName": "John", "lastName": "Doe"}],
        "tags": [{"tag": "science"}],
        "collections": ["COLLECTION123"],
        "url": "https://example.com",
        "abstractNote": "Test abstract",
        "date": "2023-01-15",
        "language": "en",
        "relations": {},
    }


@pytest.fixture
def api_item(item_data):
    """A full API item envelope."""
    return {
        "key": item_data["key"],
        "version": item_data["version"],
        "library": {"type": "user", "id": 123, "name": "Test Library"},
        "links": {"self": {"href": "https://api.zotero.org/users/123/items/TESTITEM123"}},
        "meta": {},
        "data": item_data,
    }


@pytest.fixture
def collection_data():
    """A collection record."""
    return {
        "key": "COLLECTION123",
        "version": 3,
        "name": "Test Collection",
        "parentCollection": False,
        "relations": {},
    }
