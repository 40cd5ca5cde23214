"""Fetch, resolve and arrange the deployed releases for one query."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from mr.core.result import Err, Ok, Result
from mr.release.client import ReleaseApi
from mr.release.errors import ReleaseError
from mr.release.model import ResolvedRelease
from mr.release.resolve import aggregate_releases

__all__ = [
    "OrderBy",
    "ReleaseQuery",
    "ReleaseService",
    "only_unsucceeded",
    "order_releases",
]

logger = logging.getLogger(__name__)

_NEVER = datetime.min.replace(tzinfo=UTC)


class OrderBy(StrEnum):
    DEPLOYED_ON = "deployed-on"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class ReleaseQuery:
    project: str
    folder: str
    environment: str
    only_failed: bool = False
    order_by: OrderBy = OrderBy.DEPLOYED_ON
    exact: bool = False


def order_releases(releases: Iterable[ResolvedRelease], order_by: OrderBy) -> list[ResolvedRelease]:
    """Stable sort: newest deployment first (never deployed last), or by release name."""
    if order_by is OrderBy.NAME:
        return sorted(releases, key=lambda r: r.name.casefold())
    return sorted(
        releases,
        key=lambda r: (r.deployed_on is not None, r.deployed_on or _NEVER),
        reverse=True,
    )


def only_unsucceeded(releases: Iterable[ResolvedRelease]) -> list[ResolvedRelease]:
    """Keep failed, partial, in-progress and never-deployed releases."""
    return [r for r in releases if not r.is_succeeded]


class ReleaseService:
    def __init__(self, api: ReleaseApi) -> None:
        self._api = api

    def deployed_releases(
        self,
        project: str,
        folder: str,
        environment: str,
        *,
        exact: bool = False,
    ) -> Result[list[ResolvedRelease], ReleaseError]:
        fetched = self._api.fetch_active_releases(project, folder)
        if isinstance(fetched, Err):
            return fetched
        resolved = aggregate_releases(fetched.value, environment, exact=exact)
        logger.debug(
            "%d active release(s) -> %d pipeline(s) deployed to %r",
            len(fetched.value),
            len(resolved),
            environment,
        )
        return Ok(resolved)

    def snapshot(self, query: ReleaseQuery) -> Result[list[ResolvedRelease], ReleaseError]:
        """Resolve, filter and order the releases for `query`."""
        result = self.deployed_releases(
            query.project, query.folder, query.environment, exact=query.exact
        )
        if isinstance(result, Err):
            return result

        releases = result.value
        if query.only_failed:
            releases = only_unsucceeded(releases)
        return Ok(order_releases(releases, query.order_by))
