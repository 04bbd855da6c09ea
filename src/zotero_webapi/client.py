"""Session handle and request builder for the Zotero Web API."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .auth import Credentials, CredentialStore, Prompter
from .config import ClientSettings
from .constants import (
    ALLOWED_VERBS,
    API_KEY_HEADER,
    API_VERSION_HEADER,
    LIBRARY_VERSION_HEADER,
)
from .errors import InvalidArgumentError, RequestFailedError, RequestTimeoutError

HIDDEN = "<hidden>"
HISTORY_PREVIEW = 6

PathSpec = str | Iterable[str | None] | None


class RequestDescriptor(BaseModel):
    """A fully assembled request, ready for the transport."""

    model_config = ConfigDict(frozen=True)

    verb: str = Field(description="HTTP method", examples=["GET"])
    url: str = Field(examples=["https://api.zotero.org/users/475425/collections/top"])
    segments: tuple[str, ...] = Field(
        default=(), description="Path segments below the library scope"
    )
    params: dict[str, Any] = Field(default_factory=dict, description="Query parameters")
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: int = Field(gt=0, description="Timeout in seconds")


class RequestLogEntry(BaseModel):
    """One successful round trip kept in a session's request history."""

    timestamp: datetime
    url: str
    status_code: int
    version: str | None = Field(
        default=None, description="Library version reported by Last-Modified-Version"
    )
    content_type: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> RequestLogEntry:
        return cls(
            timestamp=datetime.now(UTC),
            url=str(response.request.url),
            status_code=response.status_code,
            version=response.headers.get(LIBRARY_VERSION_HEADER),
            content_type=response.headers.get("content-type"),
        )


def _normalize_verb(verb: Any) -> str:
    method = verb.upper() if isinstance(verb, str) else verb
    if method not in ALLOWED_VERBS:
        allowed = "/".join(ALLOWED_VERBS)
        raise InvalidArgumentError(f"HTTP verb must be one of {allowed}, got {verb!r}")
    return str(method)


def _validate_timeout(timeout: Any) -> int:
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise InvalidArgumentError(f"Timeout must be a positive integer, got {timeout!r}")
    return timeout


def _clean_segments(path: PathSpec) -> tuple[str, ...]:
    """Drop omitted segments and reject empty ones."""
    if path is None:
        return ()
    if isinstance(path, str):
        path = (path,)

    segments: list[str] = []
    for segment in path:
        if segment is None:
            continue
        if not isinstance(segment, str) or not segment:
            raise InvalidArgumentError(f"Path segments must be non-empty strings, got {segment!r}")
        segments.append(segment)
    return tuple(segments)


def build_request(
    credentials: Credentials,
    verb: str,
    path: PathSpec = None,
    params: Mapping[str, Any] | None = None,
    timeout: int | None = None,
    *,
    key: bool = False,
    settings: ClientSettings | None = None,
) -> RequestDescriptor:
    """Assemble a request against the library of ``credentials``.

    Library requests target ``<base_url>/<library_type>/<id>/<path...>``. Key
    introspection requests (``key=True``) target ``<base_url>/keys/<api_key>``
    and accept no path.
    """
    settings = settings or ClientSettings()
    method = _normalize_verb(verb)
    seconds = _validate_timeout(settings.timeout if timeout is None else timeout)
    segments = _clean_segments(path)
    if not isinstance(key, bool):
        raise InvalidArgumentError(f"Key introspection flag must be True or False, got {key!r}")

    if key:
        if segments:
            raise InvalidArgumentError("Key introspection requests take no path segments")
        if not credentials.api_key:
            raise InvalidArgumentError(f"Profile {credentials.name} has no API key to introspect")
        route: tuple[str, ...] = ("keys", credentials.api_key)
    else:
        route = (credentials.library_type, credentials.id, *segments)

    url = "/".join([settings.base_url.rstrip("/"), *(quote(part, safe="") for part in route)])

    headers = {
        API_VERSION_HEADER: settings.api_version,
        "User-Agent": settings.user_agent,
    }
    if credentials.api_key:
        headers[API_KEY_HEADER] = credentials.api_key

    return RequestDescriptor(
        verb=method,
        url=url,
        segments=segments,
        params=dict(params or {}),
        headers=headers,
        timeout=seconds,
    )


class ZoteroClient:
    """A session bound to one credential profile.

    Constructing a client resolves the profile through a
    :class:`CredentialStore`, prompting for it when it is not stored yet.
    Endpoint helpers go through :meth:`request`, or :meth:`request_key` for
    key introspection.
    """

    def __init__(
        self,
        name: str,
        *,
        store: CredentialStore | None = None,
        prompter: Prompter | None = None,
        settings: ClientSettings | None = None,
        http_client: httpx.Client | None = None,
        record_history: bool | None = None,
    ) -> None:
        if store is not None and prompter is not None:
            raise InvalidArgumentError(
                "Pass either store or prompter; a store carries its own prompter"
            )
        self._settings = settings or ClientSettings()
        if store is None:
            store = CredentialStore.from_settings(self._settings, prompter=prompter)
        self._bind(store.resolve(name), http_client, record_history)

    @classmethod
    def from_credentials(
        cls,
        credentials: Credentials,
        *,
        settings: ClientSettings | None = None,
        http_client: httpx.Client | None = None,
        record_history: bool | None = None,
    ) -> ZoteroClient:
        """Bind an already resolved profile without touching the credential store."""
        client = cls.__new__(cls)
        client._settings = settings or ClientSettings()
        client._bind(credentials, http_client, record_history)
        return client

    def _bind(
        self,
        credentials: Credentials,
        http_client: httpx.Client | None,
        record_history: bool | None,
    ) -> None:
        self._credentials = credentials
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client()
        if record_history is None:
            record_history = self._settings.record_history
        self._history: list[RequestLogEntry] | None = [] if record_history else None
        self._lock = threading.Lock()

        logger.info(
            f"Zotero client ready for profile {credentials.name} "
            f"({credentials.privacy} {credentials.library_type})"
        )

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def name(self) -> str:
        return self._credentials.name

    @property
    def id(self) -> str:
        return self._credentials.id

    @property
    def library_type(self) -> str:
        return self._credentials.library_type

    @property
    def privacy(self) -> str:
        return self._credentials.privacy

    @property
    def api_key(self) -> str | None:
        return self._credentials.api_key

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def history(self) -> tuple[RequestLogEntry, ...] | None:
        """Successful requests in call order, or None when recording is off."""
        if self._history is None:
            return None
        with self._lock:
            return tuple(self._history)

    def request(
        self,
        verb: str,
        path: PathSpec = None,
        *,
        timeout: int | None = None,
        **params: Any,
    ) -> httpx.Response:
        """Send one request against the bound library and return the raw response.

        Args:
            verb: ``GET`` or ``POST``
            path: Segments below the library scope; None entries are omitted
            timeout: Seconds to wait, defaults to the configured timeout
            **params: Query parameters forwarded verbatim, ``key`` included

        Raises:
            InvalidArgumentError: If the verb, path or timeout is malformed
            RequestTimeoutError: If the API does not answer in time
            RequestFailedError: If the API answers with a 4xx or 5xx status
        """
        descriptor = build_request(
            self._credentials, verb, path, params, timeout, settings=self._settings
        )
        return self._send(descriptor)

    def request_key(
        self, verb: str = "GET", *, timeout: int | None = None, **params: Any
    ) -> httpx.Response:
        """Send one request to ``/keys/<api_key>`` for the bound API key."""
        descriptor = build_request(
            self._credentials, verb, None, params, timeout, key=True, settings=self._settings
        )
        return self._send(descriptor)

    def _send(self, descriptor: RequestDescriptor) -> httpx.Response:
        shown_url = self._mask(descriptor.url)
        logger.debug(f"Sending {descriptor.verb} {shown_url} params={descriptor.params}")

        try:
            response = self._http.request(
                descriptor.verb,
                descriptor.url,
                params=descriptor.params,
                headers=descriptor.headers,
                timeout=descriptor.timeout,
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"Zotero Web API did not respond within {descriptor.timeout} seconds",
                context={"url": shown_url},
            ) from exc

        logger.debug(f"Received {response.status_code} from {shown_url}")
        if response.is_error:
            logger.error(f"{descriptor.verb} {shown_url} failed with {response.status_code}")
            raise RequestFailedError(response.status_code, response.text, url=shown_url)

        self._record(response)
        return response

    def _record(self, response: httpx.Response) -> None:
        if self._history is None:
            return
        try:
            entry = RequestLogEntry.from_response(response)
            with self._lock:
                self._history.append(entry)
        except Exception as e:
            logger.warning(f"Failed to record request history: {e}")

    def _mask(self, text: str) -> str:
        api_key = self._credentials.api_key
        return text.replace(api_key, HIDDEN) if api_key else text

    def describe(self) -> str:
        """Return a printable summary; private profiles hide their ID and key."""
        hidden = self.privacy == "private"
        lines = [
            "<Zotero Web API>",
            f"  Key Name: {self.name}",
            f"   Privacy: {self.privacy}",
            f"      Type: {self.library_type}",
            f"        ID: {HIDDEN if hidden else self.id}",
            f"   API Key: {HIDDEN if hidden else self.api_key}",
        ]
        history = self.history
        if history is None:
            lines.append("   History: disabled")
        else:
            lines.append(f"   History: {len(history)} request(s)")
            for entry in history[:HISTORY_PREVIEW]:
                lines.append(
                    f"     {entry.timestamp.isoformat()} {entry.status_code} "
                    f"{self._mask(entry.url)} version={entry.version}"
                )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return (
            f"ZoteroClient(name={self.name!r}, privacy={self.privacy!r}, "
            f"library_type={self.library_type!r})"
        )

    def close(self) -> None:
        """Close the HTTP client if this session created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> ZoteroClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
