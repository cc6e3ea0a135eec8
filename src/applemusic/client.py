"""Apple Music catalog client.

Groups one resource client per catalog collection behind a single object
that shares a :class:`ClientConfiguration`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from applemusic.api import AsyncResourceClient, ResourceClient
from applemusic.config import ClientConfiguration, client_configuration_from_config

if TYPE_CHECKING:
    from applemusic.models import (
        ActivityResponse,
        AlbumResponse,
        AppleCuratorResponse,
        ArtistResponse,
        ChartResponse,
        CuratorResponse,
        GenreResponse,
        MusicVideoResponse,
        PlaylistResponse,
        RecordLabelResponse,
        SearchResponse,
        SongResponse,
        StationResponse,
    )

# Attribute name -> catalog path segment
RESOURCE_PATHS: dict[str, str] = {
    "activities": "activities",
    "albums": "albums",
    "apple_curators": "apple-curators",
    "artists": "artists",
    "curators": "curators",
    "genres": "genres",
    "music_videos": "music-videos",
    "playlists": "playlists",
    "record_labels": "record-labels",
    "songs": "songs",
    "stations": "stations",
    "search": "search",
    "charts": "charts",
}


def _resolve_configuration(
    configuration: ClientConfiguration | None,
    developer_token: str | None,
    default_storefront: str | None,
    default_language_tag: str | None,
) -> ClientConfiguration:
    if configuration is not None:
        return configuration

    # Load from config if no token provided
    if developer_token is None:
        return client_configuration_from_config(
            storefront=default_storefront, language_tag=default_language_tag
        )

    return ClientConfiguration(
        developer_token=developer_token,
        default_storefront=default_storefront,
        default_language_tag=default_language_tag,
    )


def _attr_name(name: str) -> str:
    attr = name.replace("-", "_")
    if attr not in RESOURCE_PATHS:
        raise KeyError(name)
    return attr


class Client:
    """Synchronous Apple Music catalog client.

    Example:
        ```python
        with Client(developer_token=token, default_storefront="us") as client:
            album = client.albums.get("1440857781")
            results = client.search.query({"term": "beatles", "types": "songs"})
        ```
    """

    DEFAULT_TIMEOUT = ResourceClient.DEFAULT_TIMEOUT

    activities: ResourceClient[ActivityResponse]
    albums: ResourceClient[AlbumResponse]
    apple_curators: ResourceClient[AppleCuratorResponse]
    artists: ResourceClient[ArtistResponse]
    curators: ResourceClient[CuratorResponse]
    genres: ResourceClient[GenreResponse]
    music_videos: ResourceClient[MusicVideoResponse]
    playlists: ResourceClient[PlaylistResponse]
    record_labels: ResourceClient[RecordLabelResponse]
    songs: ResourceClient[SongResponse]
    stations: ResourceClient[StationResponse]
    search: ResourceClient[SearchResponse]
    charts: ResourceClient[ChartResponse]

    def __init__(
        self,
        developer_token: str | None = None,
        default_storefront: str | None = None,
        default_language_tag: str | None = None,
        *,
        configuration: ClientConfiguration | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            developer_token: Developer token. If not provided, reads from config.
            default_storefront: Storefront used when a call does not name one.
            default_language_tag: Language used when a call does not name one.
            configuration: Prebuilt configuration; takes precedence over the
                individual arguments.
            timeout: Request timeout in seconds.

        Raises:
            ConfigurationError: If no developer token is available.
        """
        self.configuration = _resolve_configuration(
            configuration, developer_token, default_storefront, default_language_tag
        )
        for attr, path in RESOURCE_PATHS.items():
            setattr(self, attr, ResourceClient(path, self.configuration, timeout=timeout))

    def resource(self, name: str) -> ResourceClient:
        """Look up a resource client by attribute name or path segment.

        Raises:
            KeyError: If the name is not a known catalog collection.
        """
        return getattr(self, _attr_name(name))

    def close(self) -> None:
        """Close every underlying HTTP client."""
        for attr in RESOURCE_PATHS:
            getattr(self, attr).close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncClient:
    """Asynchronous Apple Music catalog client. Mirrors :class:`Client`."""

    DEFAULT_TIMEOUT = AsyncResourceClient.DEFAULT_TIMEOUT

    activities: AsyncResourceClient[ActivityResponse]
    albums: AsyncResourceClient[AlbumResponse]
    apple_curators: AsyncResourceClient[AppleCuratorResponse]
    artists: AsyncResourceClient[ArtistResponse]
    curators: AsyncResourceClient[CuratorResponse]
    genres: AsyncResourceClient[GenreResponse]
    music_videos: AsyncResourceClient[MusicVideoResponse]
    playlists: AsyncResourceClient[PlaylistResponse]
    record_labels: AsyncResourceClient[RecordLabelResponse]
    songs: AsyncResourceClient[SongResponse]
    stations: AsyncResourceClient[StationResponse]
    search: AsyncResourceClient[SearchResponse]
    charts: AsyncResourceClient[ChartResponse]

    def __init__(
        self,
        developer_token: str | None = None,
        default_storefront: str | None = None,
        default_language_tag: str | None = None,
        *,
        configuration: ClientConfiguration | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.configuration = _resolve_configuration(
            configuration, developer_token, default_storefront, default_language_tag
        )
        for attr, path in RESOURCE_PATHS.items():
            setattr(self, attr, AsyncResourceClient(path, self.configuration, timeout=timeout))

    def resource(self, name: str) -> AsyncResourceClient:
        """Look up a resource client by attribute name or path segment."""
        return getattr(self, _attr_name(name))

    async def aclose(self) -> None:
        """Close every underlying HTTP client."""
        for attr in RESOURCE_PATHS:
            await getattr(self, attr).aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
