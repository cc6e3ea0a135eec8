"""Version lookup for applemusic.

The installed distribution's metadata is authoritative. A source checkout
that was never installed reports BASE_VERSION with the git commit count as
the patch number (e.g. 0.3.12), or BASE_VERSION.0 outside a repository.
"""

from __future__ import annotations

import subprocess
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "applemusic-client"

# Base version - keep in sync with pyproject.toml
BASE_VERSION = "0.3"


def _git_commit_count() -> int | None:
    """Commit count of the enclosing git repository, or None."""
    try:
        result = subprocess.run(
            ["git", "rev-list", "--count", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.SubprocessError, OSError):
        return None
    if result.returncode != 0:
        return None
    try:
        return int(result.stdout.strip())
    except ValueError:
        return None


def get_version() -> str:
    """Get the full version string (MAJOR.MINOR.PATCH)."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    commit_count = _git_commit_count()
    return f"{BASE_VERSION}.{commit_count if commit_count is not None else 0}"


__version__ = get_version()
