"""Show command - which release of each pipeline is deployed to an environment."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Protocol

import typer
from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.table import Table

from mr.cli.context import build_context
from mr.cli.render import build_release_table, render_release_list
from mr.core.errors import ErrorCode
from mr.core.result import Err, Result
from mr.output.console import ConsoleProtocol
from mr.output.errors import print_release_error, release_error_exit_code
from mr.output.progress import TerminalProgress
from mr.release.client import ReleaseApi
from mr.release.errors import ReleaseError, ReleaseErrorKind
from mr.release.model import ResolvedRelease
from mr.release.service import OrderBy, ReleaseQuery, ReleaseService

logger = logging.getLogger(__name__)

# Countdown granularity of the watch caption.
TICK_SECONDS = 0.5

# Failures that a later watch cycle may recover from.
RETRYABLE_KINDS: frozenset[ReleaseErrorKind] = frozenset({"fetch_failed", "invalid_response"})


class SnapshotSource(Protocol):
    def snapshot(self, query: ReleaseQuery) -> Result[list[ResolvedRelease], ReleaseError]: ...


def _header(out: Console, query: ReleaseQuery) -> None:
    out.print(f"Directory:   [blue]{escape(query.folder)}[/]")
    out.print(f"Environment: [green]{escape(query.environment)}[/]")


def run_show(
    source: SnapshotSource,
    query: ReleaseQuery,
    *,
    out: Console,
    console: ConsoleProtocol,
    detailed: bool = False,
    watch: bool = False,
    refresh_seconds: int = 10,
    progress: TerminalProgress | None = None,
    sleep: Callable[[float], None] = time.sleep,
    max_cycles: int | None = None,
) -> int:
    """Fetch once and render; in watch mode keep refreshing the table.

    `max_cycles` bounds the number of refreshes (None = until interrupted).

    Returns:
        Process exit code.
    """
    progress = progress or TerminalProgress(enabled=False)

    if watch:
        out.clear()
    _header(out, query)

    progress.busy()
    try:
        with out.status("Fetching Release Information"):
            result = source.snapshot(query)

        failure: str | None = None
        if isinstance(result, Err):
            if not watch or detailed or result.error.kind not in RETRYABLE_KINDS:
                print_release_error(result.error, console)
                return release_error_exit_code(result.error)
            logger.warning("initial fetch failed: %s", result.error.message)
            failure = f"Refresh failed: {result.error.message}"
            releases: list[ResolvedRelease] = []
        else:
            releases = result.value

        if not releases and not watch:
            out.print("[red]No releases.[/]")
            return int(ErrorCode.NO_RELEASES)

        if detailed:
            render_release_list(out, releases, query.environment, exact=query.exact)
            return int(ErrorCode.OK)

        if not watch:
            out.print(build_release_table(releases, query.environment, exact=query.exact))
            return int(ErrorCode.OK)

        _watch(
            source,
            query,
            releases,
            out=out,
            refresh_seconds=refresh_seconds,
            progress=progress,
            sleep=sleep,
            max_cycles=max_cycles,
            failure=failure,
        )
        return int(ErrorCode.OK)
    finally:
        progress.reset()


def _watch(
    source: SnapshotSource,
    query: ReleaseQuery,
    releases: Sequence[ResolvedRelease],
    *,
    out: Console,
    refresh_seconds: int,
    progress: TerminalProgress,
    sleep: Callable[[float], None],
    max_cycles: int | None,
    failure: str | None = None,
) -> None:
    def table(caption: str) -> Table:
        return build_release_table(releases, query.environment, caption=caption, exact=query.exact)

    ticks = max(1, int(refresh_seconds / TICK_SECONDS))
    cycles = 0

    with Live(table(failure or ""), console=out, auto_refresh=False) as live:
        while max_cycles is None or cycles < max_cycles:
            for remaining in range(ticks, 0, -1):
                caption = f"Refresh in {(remaining + 1) // 2}s"
                if failure:
                    caption = f"{failure} | {caption}"
                live.update(table(caption), refresh=True)
                if failure:
                    progress.fail()
                else:
                    progress.set(100 * (ticks - remaining) // ticks)
                sleep(TICK_SECONDS)

            live.update(table("Loading..."), refresh=True)
            progress.busy()
            result = source.snapshot(query)
            if isinstance(result, Err):
                logger.warning("refresh failed: %s", result.error.message)
                failure = f"Refresh failed: {result.error.message}"
            else:
                releases = result.value
                failure = None
            cycles += 1

        live.update(table(failure or ""), refresh=True)


def show(
    folder: str = typer.Argument(..., help="The release folder (e.g. Team/Web)"),
    environment: str = typer.Argument(..., help="The environment name or prefix"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="The project name (overrides settings)", show_default=False
    ),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Show detailed information"),
    only_failed: bool = typer.Option(
        False, "--failed", "-f", help="Show only releases that did not succeed"
    ),
    order_by: OrderBy = typer.Option(
        OrderBy.DEPLOYED_ON, "--order-by", "-o", help="Sort order", case_sensitive=False
    ),
    watch: bool = typer.Option(False, "--watch", "-w", help="Watch mode"),
    exact: bool = typer.Option(
        False, "--exact", help="Require an exact environment name instead of a prefix"
    ),
) -> None:
    """Show currently deployed releases."""
    ctx = build_context(project)
    service = ReleaseService(ReleaseApi.from_settings(ctx.settings))
    query = ReleaseQuery(
        project=ctx.settings.project,
        folder=folder,
        environment=environment,
        only_failed=only_failed,
        order_by=order_by,
        exact=exact,
    )

    try:
        code = run_show(
            service,
            query,
            out=Console(),
            console=ctx.console,
            detailed=detailed,
            watch=watch,
            refresh_seconds=ctx.settings.refresh_seconds,
            progress=TerminalProgress(),
        )
    except KeyboardInterrupt:
        code = int(ErrorCode.OK)

    if code:
        raise typer.Exit(code=code)
