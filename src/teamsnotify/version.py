"""Version detection for installed and source checkouts."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# Fallback version when running from a source tree that is not installed
_FALLBACK_VERSION = "0.0.0+unknown"


def get_version() -> str:
    try:
        return version("teamsnotify")
    except PackageNotFoundError:
        return _FALLBACK_VERSION


__version__ = get_version()
