"""Typed client for the Apple Music catalog API."""

from applemusic._version import __version__
from applemusic.api import (
    APIError,
    AppleMusicError,
    AsyncResourceClient,
    ConfigurationError,
    ResourceClient,
    parse_json_with_dates,
)
from applemusic.client import AsyncClient, Client
from applemusic.config import ClientConfiguration

__all__ = [
    "__version__",
    "APIError",
    "AppleMusicError",
    "AsyncClient",
    "AsyncResourceClient",
    "Client",
    "ClientConfiguration",
    "ConfigurationError",
    "ResourceClient",
    "parse_json_with_dates",
]
