"""Resource clients for the Apple Music catalog API.

A resource client is bound to one collection (``albums``, ``songs``, ...)
and performs exactly one GET per call. The response body is always decoded
with :func:`parse_json_with_dates` and inspected for an error envelope,
whatever the HTTP status code was.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Generic, Self, TypeVar, cast

import httpx

from applemusic.api.base import AppleMusicError, ConfigurationError, error_objects
from applemusic.api.helpers import parse_json_with_dates
from applemusic.config import ClientConfiguration
from applemusic.models import ResponseRoot

T = TypeVar("T", bound=ResponseRoot)

QueryValue = str | int | float | bool
QueryParams = Mapping[str, QueryValue]

# Reserved query parameter carrying the language tag
LANGUAGE_PARAM = "l"


class BaseResourceClient(Generic[T]):
    """Request building and envelope handling shared by sync and async clients.

    Subclasses own the transport and implement ``get``/``query``.
    """

    BASE_URL = "https://api.music.apple.com/v1"
    DEFAULT_TIMEOUT = 30.0

    def __init__(self, url_name: str, configuration: ClientConfiguration) -> None:
        self.url_name = url_name
        self.configuration = configuration

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.configuration.developer_token}",
        }

    def _resolve_storefront(self, storefront: str | None) -> str:
        resolved = storefront or self.configuration.default_storefront
        if not resolved:
            raise ConfigurationError(
                "Specify storefront with function parameter "
                "or default one with the client's configuration"
            )
        return resolved

    def _resolve_language_tag(self, language_tag: str | None) -> str | None:
        return language_tag or self.configuration.default_language_tag

    def _resource_path(self, storefront: str, resource_id: str) -> str:
        return f"/catalog/{storefront}/{self.url_name}/{resource_id}"

    def _collection_path(self, storefront: str) -> str:
        return f"/catalog/{storefront}/{self.url_name}"

    def _language_params(self, language_tag: str | None) -> dict[str, QueryValue]:
        if not language_tag:
            return {}
        return {LANGUAGE_PARAM: language_tag}

    def _merge_query(
        self, query_params: QueryParams | None, language_tag: str | None
    ) -> dict[str, QueryValue]:
        """Copy the caller's params; the resolved language tag always wins."""
        params = dict(query_params or {})
        params.pop(LANGUAGE_PARAM, None)
        params.update(self._language_params(language_tag))
        return params

    def _handle_response(self, response: httpx.Response) -> T:
        """Decode the body and raise if it carries an error envelope.

        The status code is attached to the error but never inspected.
        """
        body = parse_json_with_dates(response.text)

        if isinstance(body, dict):
            errors = error_objects(body)
            if errors:
                # https://developer.apple.com/documentation/applemusicapi/handling_requests_and_responses
                first = errors[0]
                title = first.get("title", "") if isinstance(first, dict) else str(first)
                raise AppleMusicError(title, body, response.status_code)

        return cast(T, body)


class ResourceClient(BaseResourceClient[T]):
    """Synchronous client for one catalog collection.

    Example:
        ```python
        config = ClientConfiguration(developer_token="...", default_storefront="us")
        with ResourceClient[AlbumResponse]("albums", config) as albums:
            response = albums.get("1440857781")
        ```
    """

    def __init__(
        self,
        url_name: str,
        configuration: ClientConfiguration,
        *,
        timeout: float = BaseResourceClient.DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the resource client.

        Args:
            url_name: Path segment of the collection, e.g. "albums".
            configuration: Token and storefront/language defaults.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        super().__init__(url_name, configuration)
        self._client = httpx.Client(
            base_url=self.BASE_URL,
            timeout=timeout,
            headers=self._headers(),
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def get(
        self,
        resource_id: str,
        storefront: str | None = None,
        language_tag: str | None = None,
    ) -> T:
        """Fetch a single resource by identifier.

        Args:
            resource_id: Catalog identifier of the resource.
            storefront: Storefront override; defaults to the configuration's.
            language_tag: Language override; defaults to the configuration's.

        Returns:
            The decoded response body.

        Raises:
            ConfigurationError: If no storefront can be resolved.
            AppleMusicError: If the body contains an error envelope.
        """
        resolved_storefront = self._resolve_storefront(storefront)
        params = self._language_params(self._resolve_language_tag(language_tag))

        response = self._client.get(
            self._resource_path(resolved_storefront, resource_id), params=params
        )
        return self._handle_response(response)

    def query(
        self,
        query_params: QueryParams | None = None,
        storefront: str | None = None,
        language_tag: str | None = None,
    ) -> T:
        """Query the collection with filter or search parameters.

        Args:
            query_params: Arbitrary parameters, e.g. ``{"ids": "1,2"}``. The
                ``l`` key is reserved and always replaced by the resolved
                language tag. The mapping is not modified.
            storefront: Storefront override; defaults to the configuration's.
            language_tag: Language override; defaults to the configuration's.

        Returns:
            The decoded response body.

        Raises:
            ConfigurationError: If no storefront can be resolved.
            AppleMusicError: If the body contains an error envelope.
        """
        resolved_storefront = self._resolve_storefront(storefront)
        params = self._merge_query(query_params, self._resolve_language_tag(language_tag))

        response = self._client.get(self._collection_path(resolved_storefront), params=params)
        return self._handle_response(response)


class AsyncResourceClient(BaseResourceClient[T]):
    """Asynchronous client for one catalog collection.

    Same semantics as :class:`ResourceClient`; ``get`` and ``query`` are
    coroutines. Concurrent calls on one instance are independent.
    """

    def __init__(
        self,
        url_name: str,
        configuration: ClientConfiguration,
        *,
        timeout: float = BaseResourceClient.DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(url_name, configuration)
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=timeout,
            headers=self._headers(),
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def get(
        self,
        resource_id: str,
        storefront: str | None = None,
        language_tag: str | None = None,
    ) -> T:
        """Fetch a single resource by identifier. See :meth:`ResourceClient.get`."""
        resolved_storefront = self._resolve_storefront(storefront)
        params = self._language_params(self._resolve_language_tag(language_tag))

        response = await self._client.get(
            self._resource_path(resolved_storefront, resource_id), params=params
        )
        return self._handle_response(response)

    async def query(
        self,
        query_params: QueryParams | None = None,
        storefront: str | None = None,
        language_tag: str | None = None,
    ) -> T:
        """Query the collection. See :meth:`ResourceClient.query`."""
        resolved_storefront = self._resolve_storefront(storefront)
        params = self._merge_query(query_params, self._resolve_language_tag(language_tag))

        response = await self._client.get(
            self._collection_path(resolved_storefront), params=params
        )
        return self._handle_response(response)
