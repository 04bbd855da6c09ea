"""Expose the package version."""

from __future__ import annotations

from importlib import metadata


def _resolve_version() -> str:
    """Return the installed package version or fall back to the project default."""

    try:
        return metadata.version("zotero-webapi")
    except metadata.PackageNotFoundError:
        # Development checkouts where the distribution is not installed.
        return "0.1.0"


__version__ = _resolve_version()
