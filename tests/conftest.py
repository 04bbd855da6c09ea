"""Pytest configuration and shared fixtures.

This file ensures that:
- `src/` is importable without installing the package
- no test touches the real home directory or the network
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from pathlib import Path

import httpx
import pytest

# Ensure src directory is in path for imports
repo_root = Path(__file__).parent.parent
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from zotero_webapi.auth import Credentials, CredentialStore  # noqa: E402
from zotero_webapi.client import ZoteroClient  # noqa: E402
from zotero_webapi.config import ClientSettings  # noqa: E402


class ScriptedPrompter:
    """Prompter that replays canned answers and records what was asked."""

    def __init__(
        self,
        answers: Iterable[str] = (),
        confirmations: Iterable[bool | None] = (),
        interactive: bool = True,
    ) -> None:
        self._answers = list(answers)
        self._confirmations = list(confirmations)
        self._interactive = interactive
        self.asked: list[str] = []
        self.secret_prompts: list[str] = []
        self.confirm_prompts: list[str] = []
        self.notices: list[str] = []

    def is_interactive(self) -> bool:
        return self._interactive

    def ask(self, message: str, *, secret: bool = False) -> str:
        self.asked.append(message)
        if secret:
            self.secret_prompts.append(message)
        if not self._answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self._answers.pop(0)

    def confirm(self, message: str) -> bool | None:
        self.confirm_prompts.append(message)
        if not self._confirmations:
            raise AssertionError(f"Unexpected confirmation: {message}")
        return self._confirmations.pop(0)

    def notify(self, message: str) -> None:
        self.notices.append(message)


Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it receives."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._reply = handler or (lambda request: httpx.Response(200, json=[]))
        super().__init__(self._record)

    def _record(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._reply(request)


@pytest.fixture
def private_credentials() -> Credentials:
    return Credentials(
        name="work",
        id="475425",
        library_type="users",
        privacy="private",
        api_key="P9NiFoyLeZu2bZNvvuQPDWsd",
    )


@pytest.fixture
def public_credentials() -> Credentials:
    return Credentials(name="lab", id="123456", library_type="groups", privacy="public")


@pytest.fixture
def settings(tmp_path: Path) -> ClientSettings:
    return ClientSettings(storage_dir=tmp_path / "profiles")


@pytest.fixture
def make_store(settings: ClientSettings) -> Callable[..., CredentialStore]:
    def factory(prompter: ScriptedPrompter | None = None) -> CredentialStore:
        return CredentialStore.from_settings(settings, prompter=prompter or ScriptedPrompter())

    return factory


@pytest.fixture
def make_client(
    settings: ClientSettings,
) -> Callable[..., tuple[ZoteroClient, RecordingTransport]]:
    """Build a client around a recording mock transport."""

    def factory(
        credentials: Credentials,
        handler: Handler | None = None,
        record_history: bool | None = None,
    ) -> tuple[ZoteroClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        client = ZoteroClient.from_credentials(
            credentials,
            settings=settings,
            http_client=httpx.Client(transport=transport),
            record_history=record_history,
        )
        return client, transport

    return factory
