"""Zotero Web API client with locally stored credential profiles."""

from .auth import ConsolePrompter, CredentialStore, Credentials, Prompter
from .client import RequestDescriptor, RequestLogEntry, ZoteroClient, build_request
from .config import ClientSettings
from .endpoints import (
    read_collection,
    read_collection_tags,
    read_collections,
    read_groups,
    read_item,
    read_item_tags,
    read_items,
    read_items_tags,
    read_privileges,
    read_publications,
    read_publications_tags,
    read_search,
    read_searches,
    read_tags,
    read_trash,
    read_trash_tags,
)
from .errors import (
    AbortedError,
    InvalidArgumentError,
    InvalidInputError,
    NonInteractiveError,
    RequestFailedError,
    RequestTimeoutError,
    ZoteroError,
)
from .version import __version__

__all__ = [
    "__version__",
    "ClientSettings",
    "ConsolePrompter",
    "CredentialStore",
    "Credentials",
    "Prompter",
    "RequestDescriptor",
    "RequestLogEntry",
    "ZoteroClient",
    "build_request",
    "read_collection",
    "read_collection_tags",
    "read_collections",
    "read_groups",
    "read_item",
    "read_item_tags",
    "read_items",
    "read_items_tags",
    "read_privileges",
    "read_publications",
    "read_publications_tags",
    "read_search",
    "read_searches",
    "read_tags",
    "read_trash",
    "read_trash_tags",
    "AbortedError",
    "InvalidArgumentError",
    "InvalidInputError",
    "NonInteractiveError",
    "RequestFailedError",
    "RequestTimeoutError",
    "ZoteroError",
]
