"""Shared API client utilities."""

from applemusic.api.base import (
    APIError,
    AppleMusicError,
    ConfigurationError,
)
from applemusic.api.helpers import (
    parse_calendar_date,
    parse_instant,
    parse_json_with_dates,
    to_jsonable,
)
from applemusic.api.resource import (
    AsyncResourceClient,
    BaseResourceClient,
    QueryParams,
    ResourceClient,
)

__all__ = [
    "APIError",
    "AppleMusicError",
    "ConfigurationError",
    "AsyncResourceClient",
    "BaseResourceClient",
    "QueryParams",
    "ResourceClient",
    "parse_calendar_date",
    "parse_instant",
    "parse_json_with_dates",
    "to_jsonable",
]
