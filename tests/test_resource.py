"""Tests for the resource clients."""

import asyncio
import json
from datetime import UTC, date, datetime
from unittest.mock import MagicMock, patch

import httpx
import pytest

from applemusic import ClientConfiguration
from applemusic.api import (
    AppleMusicError,
    AsyncResourceClient,
    ConfigurationError,
    ResourceClient,
)

ALBUM_RESPONSE = {
    "data": [
        {
            "id": "1441164426",
            "type": "albums",
            "href": "/v1/catalog/us/albums/1441164426",
            "attributes": {
                "name": "Abbey Road (Remastered)",
                "artistName": "The Beatles",
                "releaseDate": "1969-09-26",
                "trackCount": 17,
                "isSingle": False,
            },
        }
    ]
}

PLAYLIST_RESPONSE = {
    "data": [
        {
            "id": "pl.f4d106fed2bd41149aaacabb233eb5eb",
            "type": "playlists",
            "attributes": {
                "name": "Today's Hits",
                "lastModifiedDate": "2023-05-19T10:00:00Z",
            },
        }
    ]
}

NOT_FOUND_RESPONSE = {
    "errors": [
        {
            "id": "QMJQ3M3FUCPS4ZNDDCG7ISW7A4",
            "title": "Not Found",
            "detail": "Resource with requested id was not found",
            "status": "404",
            "code": "40400",
        }
    ]
}


def _mock_response(body: object, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = json.dumps(body)
    return response


@pytest.fixture
def config() -> ClientConfiguration:
    return ClientConfiguration(developer_token="test-token", default_storefront="us")


class TestStorefrontResolution:
    """Tests for storefront and language resolution."""

    @patch("httpx.Client.get")
    def test_no_storefront_fails_before_request(self, mock_get: MagicMock) -> None:
        """Test a missing storefront raises and sends nothing."""
        cfg = ClientConfiguration(developer_token="test-token")

        with ResourceClient("albums", cfg) as client:
            with pytest.raises(ConfigurationError, match="storefront"):
                client.get("1441164426")
            with pytest.raises(ConfigurationError, match="storefront"):
                client.query({"ids": "1,2"})

        mock_get.assert_not_called()

    @patch("httpx.Client.get")
    def test_default_storefront_used(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test the configured storefront builds the URL."""
        mock_get.return_value = _mock_response(ALBUM_RESPONSE)

        with ResourceClient("albums", config) as client:
            client.get("1441164426")

        assert mock_get.call_args.args[0] == "/catalog/us/albums/1441164426"

    @patch("httpx.Client.get")
    def test_call_site_storefront_wins(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test an explicit storefront overrides the default."""
        mock_get.return_value = _mock_response(ALBUM_RESPONSE)

        with ResourceClient("albums", config) as client:
            client.get("1441164426", storefront="jp")
            assert mock_get.call_args.args[0] == "/catalog/jp/albums/1441164426"

            client.query({"ids": "1"}, storefront="gb")
            assert mock_get.call_args.args[0] == "/catalog/gb/albums"

    @patch("httpx.Client.get")
    def test_language_omitted_when_unset(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test no l parameter is sent without any language tag."""
        mock_get.return_value = _mock_response(ALBUM_RESPONSE)

        with ResourceClient("albums", config) as client:
            client.get("1441164426")
            assert "l" not in mock_get.call_args.kwargs["params"]

            client.query({"l": "fr-FR", "ids": "1"})
            assert mock_get.call_args.kwargs["params"] == {"ids": "1"}

    @patch("httpx.Client.get")
    def test_language_precedence(self, mock_get: MagicMock) -> None:
        """Test call-site language beats the default."""
        mock_get.return_value = _mock_response(ALBUM_RESPONSE)
        cfg = ClientConfiguration(
            developer_token="t", default_storefront="us", default_language_tag="en-US"
        )

        with ResourceClient("albums", cfg) as client:
            client.get("1")
            assert mock_get.call_args.kwargs["params"] == {"l": "en-US"}

            client.get("1", language_tag="es-MX")
            assert mock_get.call_args.kwargs["params"] == {"l": "es-MX"}

    @patch("httpx.Client.get")
    def test_query_language_overrides_caller_key(self, mock_get: MagicMock) -> None:
        """Test the resolved tag replaces a caller-supplied l without mutating input."""
        mock_get.return_value = _mock_response(ALBUM_RESPONSE)
        cfg = ClientConfiguration(
            developer_token="t", default_storefront="us", default_language_tag="en-US"
        )
        params = {"ids": "1,2", "l": "fr-FR"}

        with ResourceClient("albums", cfg) as client:
            client.query(params)

        assert mock_get.call_args.args[0] == "/catalog/us/albums"
        assert mock_get.call_args.kwargs["params"] == {"ids": "1,2", "l": "en-US"}
        assert params == {"ids": "1,2", "l": "fr-FR"}


class TestEnvelopeHandling:
    """Tests for success and error envelopes."""

    @patch("httpx.Client.get")
    def test_success_body_returned(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test a body without errors is returned as decoded."""
        mock_get.return_value = _mock_response(ALBUM_RESPONSE)

        with ResourceClient("albums", config) as client:
            body = client.get("1441164426")

        attributes = body["data"][0]["attributes"]
        assert attributes["name"] == "Abbey Road (Remastered)"
        assert attributes["releaseDate"] == date(1969, 9, 26)
        assert attributes["trackCount"] == 17

    @patch("httpx.Client.get")
    def test_instants_decoded(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test timestamps in the body come back as datetimes."""
        mock_get.return_value = _mock_response(PLAYLIST_RESPONSE)

        with ResourceClient("playlists", config) as client:
            body = client.get("pl.f4d106fed2bd41149aaacabb233eb5eb")

        modified = body["data"][0]["attributes"]["lastModifiedDate"]
        assert modified == datetime(2023, 5, 19, 10, 0, 0, tzinfo=UTC)

    @patch("httpx.Client.get")
    def test_empty_errors_is_success(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test an empty errors list does not raise."""
        mock_get.return_value = _mock_response({"data": [], "errors": []})

        with ResourceClient("albums", config) as client:
            assert client.query({"ids": "1"}) == {"data": [], "errors": []}

    @pytest.mark.parametrize("operation", ["get", "query"])
    @pytest.mark.parametrize("status_code", [404, 200, 500])
    @patch("httpx.Client.get")
    def test_error_envelope_raises(
        self,
        mock_get: MagicMock,
        status_code: int,
        operation: str,
        config: ClientConfiguration,
    ) -> None:
        """Test an error envelope raises from get and query regardless of status code."""
        mock_get.return_value = _mock_response(NOT_FOUND_RESPONSE, status_code)

        with ResourceClient("albums", config) as client:
            with pytest.raises(AppleMusicError) as exc_info:
                if operation == "get":
                    client.get("0")
                else:
                    client.query({"ids": "0"})

        assert str(exc_info.value) == "Not Found"
        assert exc_info.value.status_code == status_code
        assert exc_info.value.response == NOT_FOUND_RESPONSE

    @patch("httpx.Client.get")
    def test_single_error_object_raises(
        self, mock_get: MagicMock, config: ClientConfiguration
    ) -> None:
        """Test an errors member sent as one object instead of a list still raises."""
        body = {"errors": {"title": "Bad Request", "status": "400"}}
        mock_get.return_value = _mock_response(body, 400)

        with ResourceClient("albums", config) as client:
            with pytest.raises(AppleMusicError) as exc_info:
                client.get("1")

        assert str(exc_info.value) == "Bad Request"
        assert exc_info.value.errors == [{"title": "Bad Request", "status": "400"}]

    @patch("httpx.Client.get")
    def test_non_list_errors_ignored(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test a scalar errors member is not treated as an error envelope."""
        mock_get.return_value = _mock_response({"data": [], "errors": "none"})

        with ResourceClient("albums", config) as client:
            assert client.get("1") == {"data": [], "errors": "none"}

    @patch("httpx.Client.get")
    def test_non_2xx_success_body_returned(
        self, mock_get: MagicMock, config: ClientConfiguration
    ) -> None:
        """Test status alone never raises."""
        mock_get.return_value = _mock_response({"data": []}, 500)

        with ResourceClient("albums", config) as client:
            assert client.get("1") == {"data": []}

    @patch("httpx.Client.get")
    def test_malformed_json_propagates(self, mock_get: MagicMock, config: ClientConfiguration) -> None:
        """Test decoder errors are not translated."""
        response = MagicMock()
        response.status_code = 502
        response.text = "<html>Bad Gateway</html>"
        mock_get.return_value = response

        with ResourceClient("albums", config) as client:
            with pytest.raises(json.JSONDecodeError):
                client.get("1")


class TestTransport:
    """Tests against a mock httpx transport."""

    def test_request_shape(self, config: ClientConfiguration) -> None:
        """Test URL, auth header and query string on the wire."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=ALBUM_RESPONSE)

        cfg = ClientConfiguration(
            developer_token="secret", default_storefront="us", default_language_tag="en-GB"
        )
        with ResourceClient("albums", cfg, transport=httpx.MockTransport(handler)) as client:
            client.get("1441164426")

        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "api.music.apple.com"
        assert request.url.path == "/v1/catalog/us/albums/1441164426"
        assert request.url.params["l"] == "en-GB"
        assert request.headers["Authorization"] == "Bearer secret"

    def test_network_error_propagates(self, config: ClientConfiguration) -> None:
        """Test transport failures reach the caller unchanged."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with ResourceClient("albums", config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(httpx.ConnectError):
                client.get("1")


class TestAsyncResourceClient:
    """Tests for the async resource client."""

    def test_get_and_query(self) -> None:
        """Test both operations build the right requests and decode bodies."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=ALBUM_RESPONSE)

        cfg = ClientConfiguration(developer_token="t", default_storefront="us")

        async def run() -> tuple[dict, dict]:
            async with AsyncResourceClient(
                "albums", cfg, transport=httpx.MockTransport(handler)
            ) as client:
                return await client.get("1"), await client.query({"ids": "1,2"}, storefront="ca")

        single, many = asyncio.run(run())

        assert single["data"][0]["attributes"]["releaseDate"] == date(1969, 9, 26)
        assert many == single
        assert seen[0].url.path == "/v1/catalog/us/albums/1"
        assert "l" not in seen[0].url.params
        assert seen[1].url.path == "/v1/catalog/ca/albums"
        assert seen[1].url.params["ids"] == "1,2"

    @pytest.mark.parametrize("operation", ["get", "query"])
    def test_error_envelope(self, operation: str) -> None:
        """Test the async client raises AppleMusicError on error bodies from both calls."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=NOT_FOUND_RESPONSE)

        cfg = ClientConfiguration(developer_token="t", default_storefront="us")

        async def run() -> None:
            async with AsyncResourceClient(
                "albums", cfg, transport=httpx.MockTransport(handler)
            ) as client:
                if operation == "get":
                    await client.get("0")
                else:
                    await client.query({"ids": "0"})

        with pytest.raises(AppleMusicError) as exc_info:
            asyncio.run(run())
        assert str(exc_info.value) == "Not Found"
        assert exc_info.value.status_code == 200
        assert exc_info.value.response == NOT_FOUND_RESPONSE

    def test_no_storefront(self) -> None:
        """Test the async client fails fast without a storefront."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        cfg = ClientConfiguration(developer_token="t")

        async def run() -> None:
            async with AsyncResourceClient(
                "songs", cfg, transport=httpx.MockTransport(handler)
            ) as client:
                await client.query({"filter[isrc]": "USUM71703861"})

        with pytest.raises(ConfigurationError):
            asyncio.run(run())
        assert calls == []
