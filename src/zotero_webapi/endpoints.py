"""Read helpers for the Zotero Web API.

Each helper maps one documented URL pattern to :meth:`ZoteroClient.request`.
Paths are written as ordered rules: a plain string is always included, a
``(segment, flag)`` pair only when ``flag`` is true. Extra keyword arguments
are sent as query parameters, e.g. ``format="json", sort="dateModified",
limit=25``. See https://www.zotero.org/support/dev/web_api/v3/basics for the
accepted values.
"""

from __future__ import annotations

from typing import Any

import httpx

from .client import ZoteroClient
from .errors import InvalidArgumentError

Rule = str | tuple[str | None, bool]


def _path(*rules: Rule) -> list[str]:
    segments: list[str] = []
    for rule in rules:
        if isinstance(rule, tuple):
            segment, include = rule
            if include and segment is not None:
                segments.append(segment)
        else:
            segments.append(rule)
    return segments


def _require_key(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{label} key must be a non-empty string, got {value!r}")
    return value


def _optional_key(value: Any, label: str) -> str | None:
    return None if value is None else _require_key(value, label)


def _require_flag(value: Any, label: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"{label} must be True or False, got {value!r}")
    return value


def _get(
    client: ZoteroClient, path: list[str], timeout: int | None, params: dict[str, Any]
) -> httpx.Response:
    return client.request("GET", path, timeout=timeout, **params)


# Collections


def read_collections(
    client: ZoteroClient, top: bool = False, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read all collections in the library, or only the top-level ones."""
    top = _require_flag(top, "top")
    return _get(client, _path("collections", ("top", top)), timeout, params)


def read_collection(
    client: ZoteroClient,
    collection: str,
    sub: bool = False,
    *,
    timeout: int | None = None,
    **params: Any,
) -> httpx.Response:
    """Read one collection, or its sub-collections when ``sub`` is true."""
    collection = _require_key(collection, "Collection")
    sub = _require_flag(sub, "sub")
    return _get(client, _path("collections", collection, ("collections", sub)), timeout, params)


# Items


def read_items(
    client: ZoteroClient,
    collection: str | None = None,
    top: bool = False,
    *,
    timeout: int | None = None,
    **params: Any,
) -> httpx.Response:
    """Read items in the library or in one collection, excluding trashed items.

    Args:
        client: Session to send the request with
        collection: Restrict to the items of this collection
        top: Only return top-level items
        timeout: Seconds to wait for the response
        **params: Query parameters
    """
    collection = _optional_key(collection, "Collection")
    top = _require_flag(top, "top")
    if collection is None:
        path = _path("items", ("top", top))
    else:
        path = _path("collections", collection, "items", ("top", top))
    return _get(client, path, timeout, params)


def read_item(
    client: ZoteroClient,
    item: str,
    child: bool = False,
    *,
    timeout: int | None = None,
    **params: Any,
) -> httpx.Response:
    """Read one item, or its child items when ``child`` is true."""
    item = _require_key(item, "Item")
    child = _require_flag(child, "child")
    return _get(client, _path("items", item, ("children", child)), timeout, params)


def read_trash(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read items in the trash."""
    return _get(client, _path("items", "trash"), timeout, params)


def read_publications(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read items in My Publications."""
    return _get(client, _path("publications", "items"), timeout, params)


# Searches


def read_searches(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read all saved searches in the library."""
    return _get(client, _path("searches"), timeout, params)


def read_search(
    client: ZoteroClient, search: str, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read one saved search."""
    search = _require_key(search, "Search")
    return _get(client, _path("searches", search), timeout, params)


# Tags


def read_tags(
    client: ZoteroClient, tag: str | None = None, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read all tags in the library, or the tags of all types named ``tag``.

    ``tag`` is the plain tag name; it is URL-encoded when the path is built.
    """
    tag = _optional_key(tag, "Tag")
    return _get(client, _path("tags", (tag, tag is not None)), timeout, params)


def read_collection_tags(
    client: ZoteroClient, collection: str, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read the tags within one collection."""
    collection = _require_key(collection, "Collection")
    return _get(client, _path("collections", collection, "tags"), timeout, params)


def read_items_tags(
    client: ZoteroClient,
    collection: str | None = None,
    top: bool = False,
    *,
    timeout: int | None = None,
    **params: Any,
) -> httpx.Response:
    """Read the tags assigned to items.

    The four combinations of ``collection`` and ``top`` give: all items in the
    library, top-level items in the library, items in a collection, and
    top-level items in a collection.
    """
    collection = _optional_key(collection, "Collection")
    top = _require_flag(top, "top")
    if collection is None:
        path = _path("items", ("top", top), "tags")
    else:
        path = _path("collections", collection, "items", ("top", top), "tags")
    return _get(client, path, timeout, params)


def read_item_tags(
    client: ZoteroClient, item: str, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read the tags associated with one item."""
    item = _require_key(item, "Item")
    return _get(client, _path("items", item, "tags"), timeout, params)


def read_trash_tags(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read the tags assigned to items in the trash."""
    return _get(client, _path("items", "trash", "tags"), timeout, params)


def read_publications_tags(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read the tags assigned to items in My Publications."""
    return _get(client, _path("publications", "items", "tags"), timeout, params)


# Other URLs


def read_privileges(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read the user ID and privileges of the session's API key."""
    if client.privacy != "private":
        raise InvalidArgumentError("Key privileges can only be read with a private profile")
    return client.request_key("GET", timeout=timeout, **params)


def read_groups(
    client: ZoteroClient, *, timeout: int | None = None, **params: Any
) -> httpx.Response:
    """Read the groups the current API key has access to."""
    if client.library_type != "users":
        raise InvalidArgumentError("Groups can only be read with a users profile")
    return _get(client, _path("groups"), timeout, params)
