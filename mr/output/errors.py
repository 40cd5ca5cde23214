"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mr.core.errors import ErrorCode
from mr.core.settings import SettingsError
from mr.output.console import Style
from mr.release.errors import ReleaseError

if TYPE_CHECKING:
    from mr.output.console import ConsoleProtocol

__all__ = [
    "print_release_error",
    "print_settings_error",
    "release_error_exit_code",
]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    match error:
        case ReleaseError(kind="folder_ambiguous", message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"Matches: {hint}", Style.DIM)
        case ReleaseError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "folder_not_found" | "folder_ambiguous":
            return int(ErrorCode.USER_ERROR)
        case "fetch_failed" | "invalid_response":
            return int(ErrorCode.NETWORK_ERROR)


def print_settings_error(error: SettingsError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    for failure in error.failures:
        console.print(f"- {failure}", Style.DIM)
    if error.hint:
        console.newline()
        console.print(error.hint)
