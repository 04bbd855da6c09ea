"""Credential profiles for the Zotero Web API.

A profile is a named :class:`Credentials` record stored as one JSON file under
the user's storage directory. Missing profiles are created interactively,
because API keys are secrets that a person has to paste in.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Literal, Protocol, cast

import click
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .config import ClientSettings
from .constants import (
    API_KEYS_URL,
    APP_NAMESPACE,
    LIBRARY_TYPES,
    PRIVACY_SETTINGS,
    PROFILE_SUFFIX,
)
from .errors import AbortedError, InvalidArgumentError, InvalidInputError, NonInteractiveError

LibraryType = Literal["users", "groups"]
Privacy = Literal["private", "public"]


def _require_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("Profile name must be a non-empty string")
    if name in {".", ".."} or "/" in name or "\\" in name:
        raise InvalidArgumentError(f"Profile name must not contain path separators: {name!r}")
    return name


def _validation_summary(exc: ValidationError) -> str:
    return "; ".join(error["msg"] for error in exc.errors())


class Credentials(BaseModel):
    """One named identity able to call the Zotero Web API.

    Private profiles carry an API key. Public profiles never do and always
    target a group library.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Profile name used as the storage key")
    id: str = Field(
        min_length=1,
        description="Zotero user or group ID",
        examples=["475425"],
    )
    library_type: LibraryType = Field(description="Library scope of every content request")
    privacy: Privacy = Field(description="Whether requests are authenticated with an API key")
    api_key: str | None = Field(
        default=None,
        description=f"Zotero API key (create one at {API_KEYS_URL})",
    )

    @model_validator(mode="after")
    def _check_privacy(self) -> Credentials:
        if self.privacy == "private" and not self.api_key:
            raise ValueError("private profiles require a non-empty API key")
        if self.privacy == "public":
            if self.api_key is not None:
                raise ValueError("public profiles must not carry an API key")
            if self.library_type != "groups":
                raise ValueError("public profiles must target a groups library")
        return self


class Prompter(Protocol):
    """Line-based interaction used while creating or overwriting a profile."""

    def is_interactive(self) -> bool: ...

    def ask(self, message: str, *, secret: bool = False) -> str: ...

    def confirm(self, message: str) -> bool | None:
        """Return True for yes, False for no and None when cancelled."""
        ...

    def notify(self, message: str) -> None: ...


class ConsolePrompter:
    """Prompt on the attached terminal with click."""

    def is_interactive(self) -> bool:
        return sys.stdin.isatty()

    def ask(self, message: str, *, secret: bool = False) -> str:
        try:
            return str(click.prompt(message, default="", show_default=False, hide_input=secret))
        except click.Abort as exc:
            raise AbortedError("Profile creation cancelled") from exc

    def confirm(self, message: str) -> bool | None:
        try:
            answer = click.prompt(
                f"{message} (y = yes, n = no, c = cancel)",
                type=click.Choice(["y", "n", "c"], case_sensitive=False),
            )
        except click.Abort:
            return None
        return {"y": True, "n": False}.get(str(answer).lower())

    def notify(self, message: str) -> None:
        click.echo(message, err=True)


class CredentialStore:
    """Load, create and persist named credential profiles."""

    def __init__(
        self, storage_dir: Path | str | None = None, prompter: Prompter | None = None
    ) -> None:
        if storage_dir is None:
            storage_dir = Path.home() / APP_NAMESPACE
        self.storage_dir = Path(storage_dir)
        self._prompter: Prompter = prompter or ConsolePrompter()

    @classmethod
    def from_settings(
        cls, settings: ClientSettings, prompter: Prompter | None = None
    ) -> CredentialStore:
        return cls(storage_dir=settings.storage_dir, prompter=prompter)

    def path(self, name: str) -> Path:
        """Return the file that stores the profile ``name``."""
        return self.storage_dir / f"{_require_name(name)}{PROFILE_SUFFIX}"

    def resolve(self, name: str) -> Credentials:
        """Return the stored profile, creating and saving it when absent."""
        _require_name(name)
        credentials = self.load(name)
        if credentials is not None:
            return credentials

        credentials = self.create(name)
        try:
            self.save(name, credentials)
        except AbortedError:
            logger.warning(f"Profile {name} was not saved; using it for this session only")
        return credentials

    def load(self, name: str) -> Credentials | None:
        """Return the stored profile or None when no file exists."""
        location = self.path(name)
        if not location.exists():
            logger.info(f"Profile {name} not found in {self.storage_dir}")
            return None

        try:
            credentials = Credentials.model_validate_json(location.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError) as exc:
            reason = _validation_summary(exc) if isinstance(exc, ValidationError) else str(exc)
            raise InvalidInputError(
                f"Stored profile {name} is invalid: {reason}",
                context={"path": str(location)},
            ) from exc

        logger.info(f"Loaded profile {name} ({credentials.privacy} {credentials.library_type})")
        return credentials

    def create(self, name: str) -> Credentials:
        """Interactively assemble a new profile. Nothing is written to disk."""
        _require_name(name)
        if not self._prompter.is_interactive():
            raise NonInteractiveError(
                f"Profile {name} does not exist and no interactive terminal is attached "
                "to create it"
            )

        self._prompter.notify(f"Creating a new API key profile named {name}")
        privacy_prompt = f"Please enter privacy setting [{'/'.join(PRIVACY_SETTINGS)}]"
        privacy = self._prompter.ask(privacy_prompt).strip()

        api_key: str | None
        if privacy == "public":
            api_key = None
            library_type = "groups"
        elif privacy == "private":
            self._prompter.notify(f"Please create an API key at {API_KEYS_URL}")
            api_key = self._prompter.ask("Please enter the API key", secret=True).strip()
            type_prompt = f"Please enter library type [{'/'.join(LIBRARY_TYPES)}]"
            library_type = self._prompter.ask(type_prompt).strip()
        else:
            raise InvalidInputError(f"Invalid privacy setting: {privacy!r}")

        library_id = self._prompter.ask("Please enter id").strip()

        try:
            credentials = Credentials(
                name=name,
                id=library_id,
                library_type=cast(LibraryType, library_type),
                privacy=cast(Privacy, privacy),
                api_key=api_key,
            )
        except ValidationError as exc:
            raise InvalidInputError(
                f"Invalid profile values: {_validation_summary(exc)}",
                context={"name": name},
            ) from exc

        logger.info(f"Created profile {name} ({privacy} {library_type})")
        return credentials

    def save(self, name: str, credentials: Credentials) -> bool:
        """Persist ``credentials`` under ``name``.

        Returns False when the user declines to overwrite an existing profile.
        Raises :class:`AbortedError` when the confirmation is cancelled.
        """
        location = self.path(name)
        if location.exists():
            answer = self._prompter.confirm(f"API key profile {name} already exists. Overwrite?")
            if answer is None:
                raise AbortedError(f"Stopped saving API key profile {name}")
            if not answer:
                logger.warning(f"Kept existing profile {name}")
                return False

        self._write(location, credentials)
        logger.info(f"Saved profile {name} to {location}")
        return True

    def _write(self, location: Path, credentials: Credentials) -> None:
        """Write the profile using an atomic rename."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        temp_file = location.with_suffix(".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(credentials.model_dump_json(indent=2))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_file, 0o600)
            temp_file.replace(location)
        except OSError:
            if temp_file.exists():
                temp_file.unlink()
            raise
