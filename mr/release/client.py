"""Release-management REST calls: folder resolution and release paging.

Failures are returned, never retried here; retry policy belongs to the
transport or to the next watch cycle.
"""

from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass

from mr.core.result import Err, Ok, Result
from mr.core.settings import Settings
from mr.devops.http import HttpClient, HttpError, RealHttpClient
from mr.release.errors import ReleaseError
from mr.release.model import RawRelease, ReleaseFolder
from mr.release.payload import parse_folders, parse_releases

__all__ = [
    "API_VERSION",
    "CONTINUATION_HEADER",
    "RELEASES_PAGE_SIZE",
    "ReleaseApi",
    "folder_query",
]

logger = logging.getLogger(__name__)

API_VERSION = "7.1"
RELEASES_PAGE_SIZE = 100
CONTINUATION_HEADER = "x-ms-continuationtoken"


def folder_query(folder: str) -> str:
    """Turn user text like "Team/Web" into the service path "\\Team\\Web"."""
    return "\\" + folder.strip().replace("/", "\\").lstrip("\\")


def _fetch_failed(error: HttpError, message: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="fetch_failed", message=message, hint=str(error)))


@dataclass(frozen=True, slots=True)
class ReleaseApi:
    """Client for the release endpoints of one service.

    Attributes:
        http: Transport used for every request
        base_url: Release-management base URL (e.g. https://vsrm.dev.azure.com/Contoso)
    """

    http: HttpClient
    base_url: str

    @classmethod
    def from_settings(cls, settings: Settings, http: HttpClient | None = None) -> ReleaseApi:
        client = http or RealHttpClient(settings.personal_access_token)
        return cls(http=client, base_url=settings.release_base_url)

    def endpoint(self, project: str, *segments: str) -> str:
        parts = [urllib.parse.quote(project, safe="")]
        parts += ["_apis", "release"]
        parts += [urllib.parse.quote(s, safe="") for s in segments]
        return f"{self.base_url.rstrip('/')}/{'/'.join(parts)}"

    def list_folders(self, project: str, path: str) -> Result[list[ReleaseFolder], ReleaseError]:
        """List the folders the service matches for `path`."""
        url = self.endpoint(project, "folders", path)
        response = self.http.get_json(url, {"api-version": API_VERSION})
        if isinstance(response, Err):
            return _fetch_failed(response.error, f"Could not list release folders for: {path}")
        return parse_folders(response.value.body)

    def resolve_folder_path(self, project: str, folder: str) -> Result[str, ReleaseError]:
        """Resolve a folder name to exactly one folder path."""
        query = folder_query(folder)
        if query == "\\":
            return Err(
                ReleaseError(
                    kind="folder_not_found",
                    message="A release folder name is required.",
                    hint="Pass a folder such as Team/Web.",
                )
            )

        listed = self.list_folders(project, query)
        if isinstance(listed, Err):
            return listed

        wanted = query.casefold()
        matches = [f for f in listed.value if f.path.casefold().startswith(wanted)]
        logger.debug("folder %r -> %d match(es)", query, len(matches))

        if not matches:
            return Err(
                ReleaseError(
                    kind="folder_not_found",
                    message=f'No Release folder found for: "{folder}"',
                )
            )
        if len(matches) > 1:
            return Err(
                ReleaseError(
                    kind="folder_ambiguous",
                    message=f'Ambiguous folder query: "{folder}", {len(matches)} matches found.',
                    hint=", ".join(f.path for f in matches),
                )
            )
        return Ok(matches[0].path)

    def fetch_release_page(
        self,
        project: str,
        path: str,
        continuation_token: int | None = None,
    ) -> Result[tuple[list[RawRelease], int | None], ReleaseError]:
        """Fetch one page of active releases and the token for the next one."""
        params: dict[str, str | int] = {
            "path": path,
            "statusFilter": "active",
            "$top": RELEASES_PAGE_SIZE,
            "$expand": "environments",
            "api-version": API_VERSION,
        }
        if continuation_token is not None:
            params["continuationToken"] = continuation_token

        response = self.http.get_json(self.endpoint(project, "releases"), params)
        if isinstance(response, Err):
            return _fetch_failed(response.error, f"Could not fetch releases for: {path}")

        releases = parse_releases(response.value.body)
        if isinstance(releases, Err):
            return releases

        raw_token = response.value.header(CONTINUATION_HEADER)
        if raw_token is None:
            return Ok((releases.value, None))
        try:
            return Ok((releases.value, int(raw_token)))
        except ValueError:
            return Err(
                ReleaseError(
                    kind="invalid_response",
                    message=f"Invalid continuation token: {raw_token!r}",
                )
            )

    def fetch_active_releases(self, project: str, folder: str) -> Result[list[RawRelease], ReleaseError]:
        """Fetch every active release in the folder, following continuation tokens."""
        path = self.resolve_folder_path(project, folder)
        if isinstance(path, Err):
            return path

        releases: list[RawRelease] = []
        token: int | None = None
        pages = 0
        while True:
            page = self.fetch_release_page(project, path.value, token)
            if isinstance(page, Err):
                return page

            items, token = page.value
            releases.extend(items)
            pages += 1
            if token is None:
                break

        logger.debug("fetched %d release(s) in %d page(s) from %s", len(releases), pages, path.value)
        return Ok(releases)