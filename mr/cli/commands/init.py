"""Init command - create or update the user settings file."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import typer

from mr.cli.commands._helpers import exit_on_error
from mr.core.errors import ErrorCode
from mr.core.result import Err
from mr.core.settings import (
    DEFAULT_REFRESH_SECONDS,
    Settings,
    is_http_url,
    load_settings_table,
    save_settings,
    user_settings_path,
)
from mr.core.structured import StrDict, get_int, get_str
from mr.output.console import ConsoleProtocol, RichConsole

# Same call shape as typer.prompt, so tests can answer without a terminal.
Ask = Callable[..., Any]


def _ask_until_valid(
    ask: Ask,
    console: ConsoleProtocol,
    text: str,
    *,
    is_valid: Callable[[Any], bool],
    error: str,
    **kwargs: Any,
) -> Any:
    while True:
        value = ask(text, **kwargs)
        if is_valid(value):
            return value
        console.error(error)


def collect_settings(current: StrDict, *, ask: Ask, console: ConsoleProtocol) -> Settings:
    """Prompt for every setting, offering current values as defaults."""
    console.print(
        "Enter the URL of your Azure DevOps collection. "
        "Example: [blue]https://dev.azure.com/Contoso[/]"
    )
    collection = _ask_until_valid(
        ask,
        console,
        "Azure DevOps URL",
        is_valid=lambda v: isinstance(v, str) and is_http_url(v.strip()),
        error="Invalid URL.",
        default=get_str(current, "collection"),
    )

    project = ask("Project name", default=get_str(current, "project"))

    console.print("Enter Personal Access Token. (Needs read access to releases)")
    token = ask(
        "Personal access token",
        default=get_str(current, "personal_access_token"),
        hide_input=True,
        show_default=False,
    )

    console.print("Watch mode refresh interval in seconds.")
    refresh_seconds = _ask_until_valid(
        ask,
        console,
        "Refresh seconds",
        is_valid=lambda v: isinstance(v, int) and v > 0,
        error="Refresh interval must be a positive number of seconds.",
        default=get_int(current, "refresh_seconds") or DEFAULT_REFRESH_SECONDS,
        type=int,
    )

    return Settings(
        collection=str(collection).strip().rstrip("/"),
        project=str(project).strip(),
        personal_access_token=str(token).strip(),
        refresh_seconds=refresh_seconds,
        release_url=get_str(current, "release_url"),
    )


def init() -> None:
    """Create or update configuration."""
    console = RichConsole()
    path = user_settings_path()

    current = load_settings_table(path)
    if isinstance(current, Err):
        console.warning(current.error.message)
        current_values: StrDict = {}
    else:
        current_values = current.value

    settings = collect_settings(current_values, ask=typer.prompt, console=console)
    saved = save_settings(settings, path)
    exit_on_error(saved, console, ErrorCode.IO_ERROR)
    console.success(f"Settings written to {path}")
