"""Exception hierarchy for the Apple Music catalog client.

Two failure kinds are raised by this package; everything else (network
failures, malformed JSON) propagates from httpx or the json module as-is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from applemusic.models import Error, ResponseRoot


class APIError(Exception):
    """Base exception for all errors raised by this package."""

    pass


class ConfigurationError(APIError):
    """Missing client configuration (no storefront, no developer token).

    Always raised before any network request is made.
    """

    pass


class AppleMusicError(APIError):
    """The API answered with an error envelope.

    Attributes:
        title: Title of the first error object in the envelope.
        response: The full decoded response body.
        status_code: HTTP status of the response. Informational only.
    """

    def __init__(
        self, title: str, response: ResponseRoot | dict[str, Any], status_code: int
    ) -> None:
        self.title = title
        self.response = response
        self.status_code = status_code
        super().__init__(title)

    @property
    def errors(self) -> list[Error]:
        """All error objects returned by the API, not just the first."""
        return error_objects(self.response)

    def __repr__(self) -> str:
        return f"AppleMusicError(title={self.title!r}, status_code={self.status_code})"


def error_objects(body: ResponseRoot | dict[str, Any]) -> list[Error]:
    """Return the error objects of an envelope as a list.

    A single error object sent in place of a list is wrapped; anything
    else (absent, null, a scalar) yields an empty list.
    """
    errors = body.get("errors")
    if isinstance(errors, dict):
        return [cast("Error", errors)]
    if isinstance(errors, list):
        return list(errors)
    return []
