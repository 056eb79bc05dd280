"""HTTP transport for the Zotero Web API.

Every Library, Collection and Item created from the same library shares one
ZoteroClient, which carries the credential and library identity needed to
address the library's endpoints.
"""

import logging
from typing import Any

import httpx

from zotero_library.config import DEFAULT_API_URL
from zotero_library.exceptions import AuthenticationError, MalformedResponseError, RemoteError

logger = logging.getLogger(__name__)


class ZoteroClient:
    """Authenticated async access to one Zotero library.

    Example:
        >>> client = ZoteroClient(
        ...     api_key="your-api-key",
        ...     library_id="12345",
        ...     library_type="users",
        ... )
        >>> response = await client.request("GET", "/items")
        >>> await client.aclose()
    """

    API_VERSION = "3"

    def __init__(
        self,
        api_key: str,
        library_id: str,
        library_type: str = "users",
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the transport.

        Args:
            api_key: Zotero API key.
            library_id: Library ID (user ID or group ID).
            library_type: "users" or "groups".
            base_url: API root, e.g. https://api.zotero.org.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        self.api_key = api_key
        self.library_id = library_id
        self.library_type = library_type
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def library_url(self) -> str:
        """Get the base URL of this library's endpoints."""
        return f"{self.base_url}/{self.library_type}/{self.library_id}"

    def _get_headers(self, has_body: bool = False) -> dict[str, str]:
        """Get headers for API requests."""
        headers = {
            "Zotero-API-Key": self.api_key,
            "Zotero-API-Version": self.API_VERSION,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def send(
        self,
        method: str,
        endpoint: str = "",
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request without checking the response status.

        Args:
            method: HTTP method.
            endpoint: Path below the library URL (e.g., "/items").
            json: JSON body for POST/PUT.
            headers: Extra headers, merged over the defaults.

        Returns:
            The raw httpx response.

        Raises:
            httpx.HTTPError: On transport failure.
        """
        url = f"{self.library_url}{endpoint}"
        request_headers = self._get_headers(has_body=json is not None)
        if headers:
            request_headers.update(headers)

        logger.debug(f"{method} {url}")
        return await self._client.request(method, url, headers=request_headers, json=json)

    async def request(
        self,
        method: str,
        endpoint: str = "",
        json: Any = None,
        headers: dict[str, str] | None = None,
        error: str = "API request failed",
    ) -> httpx.Response:
        """Send one request and require a 2xx response.

        Args:
            method: HTTP method.
            endpoint: Path below the library URL.
            json: JSON body for POST/PUT.
            headers: Extra headers.
            error: Message prefix used when the request fails.

        Returns:
            The successful httpx response.

        Raises:
            AuthenticationError: On 401/403.
            RemoteError: On any other non-2xx status or transport failure.
        """
        try:
            response = await self.send(method, endpoint, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteError(f"{error}: {e}") from e

        if response.is_success:
            return response

        status, reason = response.status_code, response.reason_phrase
        logger.debug(f"{method} {endpoint or '/'} failed ({status}): {reason}")
        if status in (401, 403):
            raise AuthenticationError(f"{error} ({status}): {reason}", status, reason)
        raise RemoteError(f"{error} ({status}): {reason}", status, reason)

    async def get_json(self, endpoint: str, error: str = "API request failed") -> Any:
        """GET an endpoint and decode its JSON body."""
        response = await self.request("GET", endpoint, error=error)
        return decode_json(response)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()


def decode_json(response: httpx.Response) -> Any:
    """Decode a response body, raising MalformedResponseError if it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Zotero API returned a non-JSON body for {response.request.url}",
            payload=response.text,
        ) from e


def last_modified_version(response: httpx.Response) -> int | None:
    """Read the object or library version Zotero reports after a write."""
    value = response.headers.get("Last-Modified-Version")
    if value and value.isdigit():
        return int(value)
    return None
