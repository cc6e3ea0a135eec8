"""User-facing error messages and the error log file."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import httpx

from applemusic.api import AppleMusicError, ConfigurationError

LOG_FILE_NAME = "applemusic_errors.log"


def _get_log_file_path() -> Path:
    """Get the path to the error log file (in exe folder or cwd)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent / LOG_FILE_NAME
    return Path.cwd() / LOG_FILE_NAME


def get_friendly_message(error: Exception) -> str:
    """Turn an exception into a one-line message for the user."""
    if isinstance(error, ConfigurationError):
        return f"Configuration problem: {error}"

    if isinstance(error, AppleMusicError):
        if error.status_code == 401:
            return (
                "Apple Music rejected the developer token. "
                "Check that it is valid and not expired."
            )
        if error.status_code == 404:
            return f"Not found: {error.title}"
        if error.status_code == 429:
            return "Apple Music rate limit reached. Wait a moment and try again."
        return f"Apple Music API error ({error.status_code}): {error.title}"

    if isinstance(error, httpx.TimeoutException):
        return "The request to Apple Music timed out."

    if isinstance(error, httpx.RequestError):
        return f"Could not reach Apple Music: {error}"

    return str(error) or type(error).__name__


def log_error(error: Exception | str, context: str = "") -> None:
    """Append one line to applemusic_errors.log.

    Lines look like ``[2024-01-31 12:00:00] AppleMusicError (get albums/1): Not Found``.
    A plain string is recorded with the type "Message". Failure to write
    the file is ignored so a read-only working directory never masks the
    original error.
    """
    if isinstance(error, str):
        kind, text = "Message", error
    else:
        kind, text = type(error).__name__, str(error)
    where = f" ({context})" if context else ""
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    try:
        with open(_get_log_file_path(), "a", encoding="utf-8") as f:
            f.write(f"[{stamp}] {kind}{where}: {text}\n")
    except OSError:
        pass
