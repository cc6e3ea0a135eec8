"""Response shapes returned by the Apple Music catalog API.

These are ``TypedDict`` declarations over the decoded JSON body. No
validation is performed against them; they document what the API sends.
Date fields hold ``datetime.date`` (calendar dates) or timezone-aware
``datetime.datetime`` values after decoding.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, TypedDict


class ErrorSource(TypedDict, total=False):
    """Where in the request an error originated."""

    parameter: str
    pointer: str


class Error(TypedDict, total=False):
    """One element of an error envelope."""

    id: str
    title: str
    detail: str
    status: str
    code: str
    source: ErrorSource
    meta: dict[str, Any]


class Artwork(TypedDict, total=False):
    url: str
    width: int
    height: int
    bgColor: str
    textColor1: str
    textColor2: str


class PlayParameters(TypedDict, total=False):
    id: str
    kind: str


class Relationship(TypedDict, total=False):
    href: str
    next: str
    data: list[Resource]
    meta: dict[str, Any]


class Resource(TypedDict, total=False):
    """A single catalog object (album, song, artist, ...)."""

    id: str
    type: str
    href: str
    attributes: dict[str, Any]
    relationships: dict[str, Relationship]
    meta: dict[str, Any]


class AlbumAttributes(TypedDict, total=False):
    artistName: str
    artwork: Artwork
    contentRating: str
    copyright: str
    genreNames: list[str]
    isComplete: bool
    isSingle: bool
    name: str
    playParams: PlayParameters
    recordLabel: str
    releaseDate: date
    trackCount: int
    upc: str
    url: str


class SongAttributes(TypedDict, total=False):
    albumName: str
    artistName: str
    artwork: Artwork
    composerName: str
    discNumber: int
    durationInMillis: int
    genreNames: list[str]
    isrc: str
    name: str
    playParams: PlayParameters
    releaseDate: date
    trackNumber: int
    url: str


class PlaylistAttributes(TypedDict, total=False):
    artwork: Artwork
    curatorName: str
    lastModifiedDate: datetime
    name: str
    playlistType: str
    playParams: PlayParameters
    url: str


class ResponseRoot(TypedDict, total=False):
    """Top-level envelope: either a payload or a list of errors."""

    data: list[Resource]
    errors: list[Error]
    href: str
    next: str
    meta: dict[str, Any]
    results: dict[str, Any]


class AlbumResponse(ResponseRoot):
    pass


class ArtistResponse(ResponseRoot):
    pass


class SongResponse(ResponseRoot):
    pass


class PlaylistResponse(ResponseRoot):
    pass


class MusicVideoResponse(ResponseRoot):
    pass


class StationResponse(ResponseRoot):
    pass


class CuratorResponse(ResponseRoot):
    pass


class AppleCuratorResponse(ResponseRoot):
    pass


class ActivityResponse(ResponseRoot):
    pass


class GenreResponse(ResponseRoot):
    pass


class RecordLabelResponse(ResponseRoot):
    pass


class SearchResponse(ResponseRoot):
    """Search results are keyed by resource type under ``results``."""

    pass


class ChartResponse(ResponseRoot):
    """Charts are keyed by resource type under ``results``."""

    pass
