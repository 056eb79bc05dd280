"""Tests for Library."""

import logging
import os
from unittest.mock import patch

import httpx
import pytest

from zotero_library import (
    AuthenticationError,
    Collection,
    Item,
    Library,
    MalformedResponseError,
    RemoteError,
    ValidationError,
    ZoteroConnectionError,
)


class TestLibraryConstruction:
    """Test constructor validation and environment fallback."""

    def test_init_with_params(self):
        library = Library(api_key="test-key", library_id="456", library_type="groups")
        assert library.api_key == "test-key"
        assert library.library_id == "456"
        assert library.library_type == "groups"
        assert library.client.library_url == "https://api.zotero.org/groups/456"

    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_empty_api_key(self, api_key):
        with pytest.raises(ValidationError, match="API key is required"):
            Library(api_key=api_key, library_id="123")

    @pytest.mark.parametrize("library_id", ["", "   "])
    def test_empty_library_id(self, library_id):
        with pytest.raises(ValidationError, match="Library ID is required"):
            Library(api_key="test-key", library_id=library_id)

    def test_missing_credentials(self):
        """Should raise when neither arguments nor env vars are set."""
        with (
            patch.dict(os.environ, {}, clear=True),
            pytest.raises(ValidationError, match="API key is required"),
        ):
            Library()

    def test_init_from_env(self):
        env = {
            "ZOTERO_API_KEY": "env-api-key",
            "ZOTERO_LIBRARY_ID": "67890",
            "ZOTERO_LIBRARY_TYPE": "group",
            "ZOTERO_API_URL": "http://localhost:8080/",
        }
        with patch.dict(os.environ, env, clear=True):
            library = Library()
        assert library.api_key == "env-api-key"
        assert library.library_id == "67890"
        assert library.library_type == "groups"
        assert library.client.library_url == "http://localhost:8080/groups/67890"

    @pytest.mark.parametrize("value,expected", [("user", "users"), ("Groups", "groups")])
    def test_library_type_normalised(self, value, expected):
        library = Library(api_key="k", library_id="1", library_type=value)
        assert library.library_type == expected

    def test_unknown_library_type(self):
        with pytest.raises(ValidationError, match="Unknown library type"):
            Library(api_key="k", library_id="1", library_type="teams")


class TestLibraryConnect:
    """Test library.connect()."""

    def test_metadata_unset_before_connect(self, library):
        assert library.is_connected is False
        assert library.id is None
        assert library.name is None
        assert library.type is None
        assert library.links is None

    @pytest.mark.asyncio
    async def test_connect(self, library, fake_api):
        fake_api.respond(
            200, {"id": 123, "name": "Test Library", "type": "user", "links": {}}
        )

        await library.connect()

        assert str(fake_api.last.url) == "https://api.zotero.org/users/123"
        assert fake_api.last.headers["Zotero-API-Key"] == "test-api-key-123"
        assert fake_api.last.headers["Zotero-API-Version"] == "3"
        assert library.is_connected
        assert library.id == 123
        assert library.name == "Test Library"
        assert library.type == "user"
        assert library.links == {}

    @pytest.mark.asyncio
    async def test_connect_forbidden(self, library, fake_api):
        fake_api.respond(403)
        with pytest.raises(
            RemoteError, match=r"Failed to connect to Zotero API \(403\): Forbidden"
        ) as exc:
            await library.connect()
        assert exc.value.status_code == 403
        assert library.name is None

    @pytest.mark.asyncio
    async def test_connect_malformed_body(self, library, fake_api):
        fake_api.respond(200, content=b"not json")
        with pytest.raises(ZoteroConnectionError, match="Connection failed") as exc:
            await library.connect()
        assert exc.value.api_key == "test-api-key-123"
        assert exc.value.library_id == "123"
        assert exc.value.library_type == "users"
        assert isinstance(exc.value.original, ValueError)

    @pytest.mark.asyncio
    async def test_connect_network_failure(self, library, fake_api):
        fake_api.fail(httpx.ConnectError, "connection refused")
        with pytest.raises(ZoteroConnectionError, match="connection refused") as exc:
            await library.connect()
        assert isinstance(exc.value.original, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_connection_error_masks_key(self, library, fake_api):
        fake_api.fail()
        with pytest.raises(ZoteroConnectionError) as exc:
            await library.connect()
        assert "test-api-key-123" not in str(exc.value)
        assert "-123" in str(exc.value)


class TestLibraryListing:
    """Test collection, item and tag listing."""

    @pytest.mark.asyncio
    async def test_get_collections(self, library, fake_api, collection_data):
        fake_api.respond(
            200,
            [
                {"key": "COLLECTION123", "version": 3, "data": collection_data},
                {"key": "DEF456", "version": 1, "data": {
                    "key": "DEF456", "version": 1, "name": "Child", "parentCollection": "COLLECTION123",
                }},
            ],
        )

        collections = await library.get_collections()

        assert str(fake_api.last.url) == "https://api.zotero.org/users/123/collections"
        assert all(isinstance(c, Collection) for c in collections)
        assert [c.name for c in collections] == ["Test Collection", "Child"]
        assert collections[1].parent_collection == "COLLECTION123"

    @pytest.mark.asyncio
    async def test_get_all_items(self, library, fake_api, api_item):
        fake_api.respond(200, [api_item])

        items = await library.get_all_items()

        assert str(fake_api.last.url) == "https://api.zotero.org/users/123/items"
        assert len(items) == 1
        assert isinstance(items[0], Item)
        assert items[0].title == "Test Article"

    @pytest.mark.asyncio
    async def test_get_tags(self, library, fake_api):
        fake_api.respond(200, [{"tag": "science", "meta": {"numItems": 2}}, {"tag": "physics"}])

        assert await library.get_tags() == ["science", "physics"]

    @pytest.mark.asyncio
    async def test_listing_failure(self, library, fake_api):
        fake_api.respond(500)
        with pytest.raises(RemoteError, match=r"\(500\)"):
            await library.get_all_items()

    @pytest.mark.asyncio
    async def test_unauthorised(self, library, fake_api):
        fake_api.respond(401)
        with pytest.raises(AuthenticationError):
            await library.get_collections()

    @pytest.mark.asyncio
    async def test_listing_not_a_list(self, library, fake_api):
        fake_api.respond(200, {"unexpected": "x"})
        with pytest.raises(MalformedResponseError):
            await library.get_tags()


class TestCreateCollection:
    """Test library.create_collection()."""

    @pytest.mark.asyncio
    async def test_create_collection(self, library, fake_api):
        fake_api.respond(200, [{"key": "NEW1", "version": 1, "name": "Reading"}])

        collection = await library.create_collection("  Reading  ")

        assert fake_api.last.method == "POST"
        assert str(fake_api.last.url) == "https://api.zotero.org/users/123/collections"
        assert fake_api.last.headers["Content-Type"] == "application/json"
        assert fake_api.last_json() == [{"name": "Reading"}]
        assert collection.key == "NEW1"
        assert collection.name == "Reading"

    @pytest.mark.asyncio
    async def test_create_subcollection(self, library, fake_api):
        fake_api.respond(
            200,
            {"successful": {"0": {"key": "NEW2", "data": {
                "key": "NEW2", "version": 2, "name": "Child", "parentCollection": "NEW1",
            }}}},
        )

        collection = await library.create_collection("Child", parent_collection="NEW1")

        assert fake_api.last_json() == [{"name": "Child", "parentCollection": "NEW1"}]
        assert collection.parent_collection == "NEW1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_empty_name(self, library, fake_api, name):
        with pytest.raises(ValidationError, match="Collection name is required"):
            await library.create_collection(name)
        assert fake_api.requests == []


class TestCreateItem:
    """Test library.create_item()."""

    @pytest.mark.asyncio
    async def test_filters_unknown_fields_and_defaults_type(self, library, fake_api, caplog):
        """Unknown fields are dropped with a single warning; itemType defaults."""
        fake_api.respond(
            200,
            [{"data": {"key": "NEWITEM", "version": 1, "itemType": "webpage", "title": "Report"}}],
        )

        with caplog.at_level(logging.WARNING, logger="zotero_library"):
            item = await library.create_item({"title": "Report", "unknownField": "x"})

        assert fake_api.last_json() == [{"data": {"title": "Report", "itemType": "webpage"}}]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "unknownField" in warnings[0].getMessage()
        assert item.key == "NEWITEM"

    @pytest.mark.asyncio
    async def test_warning_lists_fields_in_order(self, library, fake_api, caplog):
        fake_api.respond(200, [{"data": {"key": "K", "title": "T", "itemType": "book"}}])

        with caplog.at_level(logging.WARNING, logger="zotero_library"):
            await library.create_item(
                {"zeta": 1, "title": "T", "alpha": 2, "itemType": "book", "mid": 3}
            )

        assert "zeta, alpha, mid" in caplog.records[-1].getMessage()
        assert fake_api.last_json() == [{"data": {"title": "T", "itemType": "book"}}]

    @pytest.mark.asyncio
    async def test_no_warning_for_known_fields(self, library, fake_api, caplog):
        fake_api.respond(200, [{"data": {"key": "K", "title": "T", "itemType": "book"}}])
        fields = {"title": "T", "itemType": "book", "DOI": "10.1/x", "collections": ["C1"]}

        with caplog.at_level(logging.WARNING, logger="zotero_library"):
            await library.create_item(fields)

        assert caplog.records == []
        assert fake_api.last_json() == [{"data": fields}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [{}, {"title": ""}, {"title": "   "}, {"title": None}])
    async def test_missing_title(self, library, fake_api, fields):
        """Should fail before any request is made."""
        with pytest.raises(ValidationError, match="title is required"):
            await library.create_item(fields)
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_successful_map_response(self, library, fake_api):
        fake_api.respond(
            200,
            {
                "successful": {
                    "1": {"data": {"key": "SECOND", "title": "Second", "itemType": "book"}},
                    "0": {"data": {
                        "key": "FIRST", "version": 4, "title": "Report", "itemType": "report",
                        "url": "https://example.com",
                    }},
                },
                "success": {"0": "FIRST", "1": "SECOND"},
                "unchanged": {},
                "failed": {},
            },
        )

        item = await library.create_item({"title": "Report", "itemType": "report"})

        assert item.key == "FIRST"
        assert item.version == 4
        assert item.title == "Report"
        assert item.item_type == "report"
        assert item.url == "https://example.com"

    @pytest.mark.asyncio
    async def test_malformed_response(self, library, fake_api):
        fake_api.respond(200, {"unexpected": "x"})
        with pytest.raises(MalformedResponseError):
            await library.create_item({"title": "Report"})

    @pytest.mark.asyncio
    async def test_failed_write_status(self, library, fake_api):
        fake_api.respond(
            200,
            {
                "successful": {},
                "failed": {"0": {"key": "", "code": 400, "message": "Invalid item type"}},
            },
        )
        with pytest.raises(RemoteError, match="Invalid item type") as exc:
            await library.create_item({"title": "Report", "itemType": "nonsense"})
        assert exc.value.status_code == 400

    @pytest.mark.asyncio
    async def test_http_failure(self, library, fake_api):
        fake_api.respond(400)
        with pytest.raises(RemoteError, match=r"Failed to create item \(400\)"):
            await library.create_item({"title": "Report"})

    @pytest.mark.asyncio
    async def test_created_item_can_be_updated(self, library, fake_api):
        """The returned item should share the library's transport."""
        fake_api.respond(200, [{"data": {"key": "NEW", "version": 1, "title": "R", "itemType": "webpage"}}])
        fake_api.respond(204)

        item = await library.create_item({"title": "R"})
        await item.update()

        assert str(fake_api.last.url) == "https://api.zotero.org/users/123/items/NEW"


class TestLibraryLifecycle:
    """Test async context manager support."""

    @pytest.mark.asyncio
    async def test_context_manager(self, fake_api):
        async with Library(
            api_key="k", library_id="1", transport=httpx.MockTransport(fake_api.handler)
        ) as library:
            assert library.library_id == "1"
        assert library.client._client.is_closed
