"""Rich rendering of resolved releases.

Every function here is a pure function of its arguments: the watch loop
builds a new table from the latest releases on each refresh.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.style import Style
from rich.table import Table
from rich.text import Text

from mr.release.model import DeploymentStatus, ResolvedRelease
from mr.release.resolve import matches_environment

__all__ = [
    "build_release_table",
    "environments_text",
    "format_timestamp",
    "render_release_list",
    "status_text",
]

_STATUS_LABELS: dict[DeploymentStatus, tuple[str, str]] = {
    DeploymentStatus.SUCCEEDED: ("OK", "green"),
    DeploymentStatus.PARTIALLY_SUCCEEDED: ("PARTIAL", "yellow"),
    DeploymentStatus.FAILED: ("FAILED", "red"),
    DeploymentStatus.IN_PROGRESS: ("IN_PROGRESS", "blue"),
}


def status_text(status: DeploymentStatus) -> Text:
    label, color = _STATUS_LABELS.get(status, (status.label.upper(), ""))
    return Text(label, style=color)


def format_timestamp(value: datetime | None) -> str:
    """Local time, or an empty string when never deployed."""
    if value is None:
        return ""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def environments_text(environments: Sequence[str], target: str, *, exact: bool = False) -> Text:
    """Comma-separated environment names, the target one(s) in green."""
    text = Text()
    for i, name in enumerate(environments):
        if i > 0:
            text.append(", ")
        style = "green" if matches_environment(name, target, exact=exact) else ""
        text.append(name, style=style)
    return text


def build_release_table(
    releases: Sequence[ResolvedRelease],
    environment: str,
    *,
    caption: str | None = None,
    exact: bool = False,
) -> Table:
    table = Table(
        box=box.ROUNDED,
        border_style="grey50",
        caption=caption,
        caption_justify="left",
    )
    table.add_column("Release")
    table.add_column("Status")
    table.add_column("Created")
    table.add_column("Deployed")
    table.add_column("Environments")

    for release in releases:
        link = Style(color="blue", link=release.web_url) if release.web_url else Style(color="blue")
        table.add_row(
            Text(release.name, style=link),
            status_text(release.status),
            Text(format_timestamp(release.created_on), style="yellow"),
            Text(format_timestamp(release.deployed_on), style="green"),
            environments_text(release.environments, environment, exact=exact),
        )
    return table


def render_release_list(
    console: Console,
    releases: Sequence[ResolvedRelease],
    environment: str,
    *,
    exact: bool = False,
) -> None:
    """Detailed, one block per release."""
    for release in releases:
        line = Text.assemble(
            "Release: ",
            (release.name, "white"),
            " - ",
            status_text(release.status),
        )
        console.print(line)
        console.print(f"Pipeline: {escape(release.pipeline)}")
        console.print(f"Id: {release.release_id}")
        console.print(f"CreatedOn: [yellow]{format_timestamp(release.created_on)}[/]")
        console.print(f"DeployedOn: [green]{format_timestamp(release.deployed_on)}[/]")
        console.print(
            Text.assemble(
                "Environments: ",
                environments_text(release.environments, environment, exact=exact),
            )
        )
        if release.web_url:
            console.print(Text(release.web_url, style="grey50"))
        console.print()
