from __future__ import annotations

from dataclasses import dataclass

import typer

from mr.core.errors import ErrorCode
from mr.core.result import Err
from mr.core.settings import Settings, load_settings
from mr.output.console import ConsoleProtocol, RichConsole
from mr.output.errors import print_settings_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    console: ConsoleProtocol


def build_context(project: str | None = None) -> CLIContext:
    """Load settings once for this invocation; exit on invalid configuration."""
    console = RichConsole()
    result = load_settings()
    if isinstance(result, Err):
        print_settings_error(result.error, console)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(settings=result.value.with_project(project), console=console)
