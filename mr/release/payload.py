"""Decode release-management JSON payloads into model types.

Every decoder validates the shape it needs and returns a ReleaseError of kind
"invalid_response" naming the offending field instead of raising.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

from mr.core.result import Err, Ok, Result
from mr.core.structured import StrDict, as_str_dict, get_list, get_str, get_table, iter_tables
from mr.release.errors import ReleaseError
from mr.release.model import (
    DeploymentAttempt,
    DeploymentStatus,
    EnvironmentStatus,
    RawEnvironment,
    RawRelease,
    ReleaseFolder,
)

__all__ = [
    "parse_folders",
    "parse_release",
    "parse_releases",
    "parse_timestamp",
]

_TIMESTAMP_RE = re.compile(
    r"^(?P<main>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?$"
)


def _invalid(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_response", message=message, hint=hint))


def parse_timestamp(value: object) -> datetime | None:
    """Parse the service's ISO-8601 timestamps.

    The service sends up to seven fractional digits; they are truncated to
    microseconds. Values without an offset are taken as UTC.
    """
    if not isinstance(value, str):
        return None
    match = _TIMESTAMP_RE.match(value.strip())
    if match is None:
        return None

    text = match.group("main")
    frac = match.group("frac")
    if frac:
        text += "." + frac[:6].ljust(6, "0")
    tz = match.group("tz")
    if tz == "Z":
        text += "+00:00"
    elif tz:
        text += tz if ":" in tz else f"{tz[:3]}:{tz[3:]}"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_attempt(data: StrDict, where: str) -> Result[DeploymentAttempt, ReleaseError]:
    attempt = data.get("attempt")
    if isinstance(attempt, bool) or not isinstance(attempt, int):
        return _invalid(f"deploy step without attempt number in {where}")

    last_modified = parse_timestamp(data.get("lastModifiedOn"))
    if last_modified is None:
        return _invalid(f"deploy step {attempt} has no valid lastModifiedOn in {where}")

    return Ok(
        DeploymentAttempt(
            attempt=attempt,
            status=DeploymentStatus.from_wire(data.get("status")),
            last_modified_on=last_modified,
        )
    )


def _parse_environment(data: StrDict, release: str) -> Result[RawEnvironment, ReleaseError]:
    name = get_str(data, "name")
    if name is None:
        return _invalid(f"environment without name in release {release}")

    where = f"{release}/{name}"
    attempts: list[DeploymentAttempt] = []
    for step in iter_tables(get_list(data, "deploySteps")):
        result = _parse_attempt(step, where)
        if isinstance(result, Err):
            return result
        attempts.append(result.value)

    return Ok(
        RawEnvironment(
            name=name,
            status=EnvironmentStatus.from_wire(data.get("status")),
            attempts=tuple(attempts),
        )
    )


def _web_url(data: StrDict) -> str:
    links = get_table(data, "_links") or {}
    web = get_table(links, "web") or {}
    return get_str(web, "href") or ""


def parse_release(obj: object) -> Result[RawRelease, ReleaseError]:
    data = as_str_dict(obj)
    if data is None:
        return _invalid("release entry is not an object")

    release_id = data.get("id")
    if isinstance(release_id, bool) or not isinstance(release_id, int):
        return _invalid("release without numeric id")

    name = get_str(data, "name") or str(release_id)
    definition = get_table(data, "releaseDefinition") or {}
    pipeline = get_str(definition, "name")
    if pipeline is None:
        return _invalid(f"release {name} has no release definition name")

    created_on = parse_timestamp(data.get("createdOn"))
    if created_on is None:
        return _invalid(f"release {name} has no valid createdOn")

    environments: list[RawEnvironment] = []
    for env in iter_tables(get_list(data, "environments")):
        result = _parse_environment(env, name)
        if isinstance(result, Err):
            return result
        environments.append(result.value)

    return Ok(
        RawRelease(
            id=release_id,
            name=name,
            pipeline=pipeline,
            created_on=created_on,
            environments=tuple(environments),
            web_url=_web_url(data),
        )
    )


def _collection_items(body: object, what: str) -> Result[list[object], ReleaseError]:
    """Return the `value` array of a `{count, value}` collection payload."""
    data = as_str_dict(body)
    if data is None:
        return _invalid(f"{what} response is not an object")
    items = get_list(data, "value")
    if items is None:
        return _invalid(f"{what} response has no value list")
    return Ok(items)


def parse_releases(body: object) -> Result[list[RawRelease], ReleaseError]:
    items = _collection_items(body, "releases")
    if isinstance(items, Err):
        return items

    releases: list[RawRelease] = []
    for item in items.value:
        result = parse_release(item)
        if isinstance(result, Err):
            return result
        releases.append(result.value)
    return Ok(releases)


def parse_folders(body: object) -> Result[list[ReleaseFolder], ReleaseError]:
    items = _collection_items(body, "folders")
    if isinstance(items, Err):
        return items

    folders: list[ReleaseFolder] = []
    for item in iter_tables(items.value):
        path = get_str(item, "path")
        if path is not None:
            folders.append(ReleaseFolder(path=path))
    return Ok(folders)
