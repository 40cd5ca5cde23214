"""Settings loading, validation and persistence.

Settings are flat key-value TOML tables. They are read from, in order:

  <user-config-dir>/settings.toml
  .mr-release.toml files from the home directory down to the current directory

Later files override earlier ones key by key, so a `.mr-release.toml` in a
repository can pin `project` while the token stays in the user file:

  collection = "https://dev.azure.com/Contoso"
  project = "Fabrikam"
  personal_access_token = "..."
  refresh_seconds = 10
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from mr.platform.files import atomic_write_text
from mr.platform.paths import home, user_config_dir

from .result import Err, Ok, Result
from .structured import StrDict, get_int, get_str

__all__ = [
    "DEFAULT_REFRESH_SECONDS",
    "PROJECT_SETTINGS_FILENAME",
    "Settings",
    "SettingsError",
    "is_http_url",
    "load_settings",
    "load_settings_table",
    "merged_settings_table",
    "release_management_url",
    "save_settings",
    "settings_search_paths",
    "user_settings_path",
]

DEFAULT_REFRESH_SECONDS = 10
PROJECT_SETTINGS_FILENAME = ".mr-release.toml"
USER_SETTINGS_FILENAME = "settings.toml"
# The file holds the personal access token.
SETTINGS_FILE_MODE = 0o600


@dataclass(frozen=True, slots=True)
class SettingsError:
    """Settings could not be read, parsed, validated or written."""

    message: str
    path: Path | None = None
    failures: tuple[str, ...] = ()
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    """Connection settings for the release-management service."""

    collection: str
    project: str
    personal_access_token: str
    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    release_url: str | None = None

    @property
    def release_base_url(self) -> str:
        """Base URL of the release-management API."""
        if self.release_url:
            return self.release_url.rstrip("/")
        return release_management_url(self.collection)

    def with_project(self, project: str | None) -> Settings:
        if not project:
            return self
        return replace(self, project=project)

    @classmethod
    def from_dict(cls, data: StrDict, *, path: Path | None = None) -> Result[Settings, SettingsError]:
        """Validate a merged settings table."""
        failures: list[str] = []

        collection = get_str(data, "collection")
        if collection is None:
            failures.append("collection is required")
        elif not is_http_url(collection):
            failures.append(f"collection must be an http(s) URL: {collection}")

        project = get_str(data, "project")
        if project is None:
            failures.append("project is required")

        token = get_str(data, "personal_access_token")
        if token is None:
            failures.append("personal_access_token is required")

        refresh_seconds = DEFAULT_REFRESH_SECONDS
        if "refresh_seconds" in data:
            value = get_int(data, "refresh_seconds")
            if value is None or value <= 0:
                failures.append("refresh_seconds must be a positive integer")
            else:
                refresh_seconds = value

        release_url = get_str(data, "release_url")
        if release_url is not None and not is_http_url(release_url):
            failures.append(f"release_url must be an http(s) URL: {release_url}")

        if failures or collection is None or project is None or token is None:
            return Err(
                SettingsError(
                    "Invalid configuration",
                    path=path,
                    failures=tuple(failures),
                    hint='Run "mr init" to build a new configuration.',
                )
            )

        return Ok(
            cls(
                collection=collection.rstrip("/"),
                project=project,
                personal_access_token=token,
                refresh_seconds=refresh_seconds,
                release_url=release_url,
            )
        )

    def to_toml(self) -> str:
        lines = [
            f"collection = {_toml_str(self.collection)}",
            f"project = {_toml_str(self.project)}",
            f"personal_access_token = {_toml_str(self.personal_access_token)}",
            f"refresh_seconds = {self.refresh_seconds}",
        ]
        if self.release_url:
            lines.append(f"release_url = {_toml_str(self.release_url)}")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (
            f"Settings(collection={self.collection!r}, project={self.project!r}, "
            f"personal_access_token='***', refresh_seconds={self.refresh_seconds})"
        )


def _toml_str(value: str) -> str:
    # JSON string escapes are valid TOML basic-string escapes.
    return json.dumps(value, ensure_ascii=False)


def is_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def release_management_url(collection: str) -> str:
    """Map a collection URL to its release-management host.

    Hosted organizations serve releases from a separate `vsrm` host;
    on-premises servers serve them from the collection URL itself.
    """
    parts = urlsplit(collection.rstrip("/"))
    host = (parts.hostname or "").lower()
    netloc = parts.netloc

    if host == "dev.azure.com":
        netloc = "vsrm.dev.azure.com"
    elif host.endswith(".visualstudio.com") and not host.endswith(".vsrm.visualstudio.com"):
        org = host.removesuffix(".visualstudio.com")
        netloc = f"{org}.vsrm.visualstudio.com"

    return urlunsplit((parts.scheme, netloc, parts.path, "", "")).rstrip("/")


def user_settings_path() -> Path:
    return user_config_dir() / USER_SETTINGS_FILENAME


def settings_search_paths(cwd: Path | None = None) -> list[Path]:
    """Return candidate settings files, lowest precedence first."""
    start = (cwd or Path.cwd()).resolve()
    stop = home().resolve()

    local: list[Path] = []
    for directory in (start, *start.parents):
        if directory == stop:
            break
        local.append(directory / PROJECT_SETTINGS_FILENAME)

    return [user_settings_path(), *reversed(local)]


def load_settings_table(path: Path) -> Result[StrDict, SettingsError]:
    """Parse one settings file; a missing file is an empty table."""
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return Ok({})
    except PermissionError:
        return Err(SettingsError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(SettingsError(f"Error reading {path}: {e}", path=path))

    try:
        data: StrDict = tomllib.loads(raw.decode("utf-8"))
    except tomllib.TOMLDecodeError as e:
        return Err(SettingsError(f"Invalid TOML syntax in {path}: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(SettingsError(f"Invalid UTF-8 in {path}: {e}", path=path))

    return Ok(data)


def merged_settings_table(cwd: Path | None = None) -> Result[StrDict, SettingsError]:
    merged: StrDict = {}
    for path in settings_search_paths(cwd):
        result = load_settings_table(path)
        if isinstance(result, Err):
            return result
        merged.update(result.value)
    return Ok(merged)


def load_settings(cwd: Path | None = None) -> Result[Settings, SettingsError]:
    """Load and validate settings from every applicable file."""
    merged = merged_settings_table(cwd)
    if isinstance(merged, Err):
        return merged
    return Settings.from_dict(merged.value, path=user_settings_path())


def save_settings(settings: Settings, path: Path | None = None) -> Result[Path, SettingsError]:
    """Write settings to the user settings file (or `path`)."""
    target = path or user_settings_path()
    try:
        atomic_write_text(target, settings.to_toml(), mode=SETTINGS_FILE_MODE)
    except OSError as e:
        return Err(SettingsError(f"Could not write {target}: {e}", path=target))
    return Ok(target)
