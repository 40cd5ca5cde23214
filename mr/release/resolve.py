"""Pick the deployed release of each pipeline for one environment.

Pure functions over fetched releases; nothing here touches the network.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from mr.release.model import (
    DeploymentAttempt,
    DeploymentStatus,
    EnvironmentStatus,
    RawEnvironment,
    RawRelease,
    ResolvedRelease,
)

__all__ = [
    "COMPLETED_STATUSES",
    "aggregate_releases",
    "is_completed",
    "matches_environment",
    "select_attempt",
]

# In-progress deployments count so that they show up instead of being hidden
# behind the previous release.
COMPLETED_STATUSES = frozenset(
    {
        EnvironmentStatus.SUCCEEDED,
        EnvironmentStatus.PARTIALLY_SUCCEEDED,
        EnvironmentStatus.REJECTED,
        EnvironmentStatus.IN_PROGRESS,
    }
)

_NEVER_RAN = frozenset({DeploymentStatus.UNDEFINED, DeploymentStatus.NOT_DEPLOYED})


def is_completed(status: EnvironmentStatus) -> bool:
    return status in COMPLETED_STATUSES


def matches_environment(name: str, target: str, *, exact: bool = False) -> bool:
    """Case-insensitive prefix (or exact) match of an environment name."""
    candidate = name.casefold()
    wanted = target.casefold()
    if exact:
        return candidate == wanted
    return candidate.startswith(wanted)


def select_attempt(attempts: Iterable[DeploymentAttempt]) -> DeploymentAttempt | None:
    """Return the highest-numbered attempt that actually ran, if any."""
    ran = [a for a in attempts if a.status not in _NEVER_RAN]
    if not ran:
        return None
    return sorted(ran, key=lambda a: a.attempt)[-1]


def _target_environment(
    release: RawRelease, environment: str, exact: bool
) -> RawEnvironment | None:
    for env in release.environments:
        if matches_environment(env.name, environment, exact=exact):
            return env
    return None


def _has_completed_target(release: RawRelease, environment: str, exact: bool) -> bool:
    return any(
        matches_environment(env.name, environment, exact=exact) and is_completed(env.status)
        for env in release.environments
    )


def _resolve(release: RawRelease, environment: str, exact: bool) -> ResolvedRelease:
    target = _target_environment(release, environment, exact)
    attempt = select_attempt(target.attempts) if target is not None else None

    return ResolvedRelease(
        pipeline=release.pipeline,
        name=release.name,
        release_id=release.id,
        created_on=release.created_on,
        deployed_on=attempt.last_modified_on if attempt is not None else None,
        status=attempt.status if attempt is not None else DeploymentStatus.UNDEFINED,
        web_url=release.web_url,
        environments=tuple(env.name for env in release.environments if is_completed(env.status)),
    )


def aggregate_releases(
    releases: Sequence[RawRelease],
    environment: str,
    *,
    exact: bool = False,
) -> list[ResolvedRelease]:
    """Resolve the reported release of every pipeline for `environment`.

    A release qualifies when one of its environments matching `environment`
    has completed. Per pipeline the newest qualifying release wins; on equal
    creation times the first one in API order is kept. Output follows the
    order in which pipelines first appear; callers sort for display.

    When several environments match the prefix, the first one in API order
    supplies the reported attempt.
    """
    newest: dict[str, RawRelease] = {}
    for release in releases:
        if not _has_completed_target(release, environment, exact):
            continue
        current = newest.get(release.pipeline)
        if current is None or release.created_on > current.created_on:
            newest[release.pipeline] = release

    return [_resolve(release, environment, exact) for release in newest.values()]
