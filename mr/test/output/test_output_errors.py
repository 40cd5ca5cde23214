"""Tests for mr.output.errors module."""

from __future__ import annotations

import pytest

from mr.core.errors import ErrorCode
from mr.core.settings import SettingsError
from mr.output.console import MockConsole, Style
from mr.output.errors import print_release_error, print_settings_error, release_error_exit_code
from mr.release.errors import ReleaseError, ReleaseErrorKind


class TestPrintReleaseError:
    def test_ambiguous_lists_matches(self) -> None:
        console = MockConsole()
        error = ReleaseError(
            kind="folder_ambiguous",
            message='Ambiguous folder query: "Web", 2 matches found.',
            hint="\\Web, \\Web\\Legacy",
        )

        print_release_error(error, console)

        assert console.messages == [
            'Error: Ambiguous folder query: "Web", 2 matches found.',
            "Matches: \\Web, \\Web\\Legacy",
        ]

    def test_hint_is_dimmed(self) -> None:
        console = MockConsole()
        print_release_error(
            ReleaseError(kind="fetch_failed", message="Could not list folders", hint="HTTP 401"),
            console,
        )
        assert console.outputs[1].message == "hint: HTTP 401"
        assert console.outputs[1].style == Style.DIM

    def test_without_hint(self) -> None:
        console = MockConsole()
        print_release_error(ReleaseError(kind="folder_not_found", message="nope"), console)
        assert console.messages == ["Error: nope"]


class TestReleaseErrorExitCode:
    @pytest.mark.parametrize(
        ("kind", "code"),
        [
            ("folder_not_found", ErrorCode.USER_ERROR),
            ("folder_ambiguous", ErrorCode.USER_ERROR),
            ("fetch_failed", ErrorCode.NETWORK_ERROR),
            ("invalid_response", ErrorCode.NETWORK_ERROR),
        ],
    )
    def test_mapping(self, kind: ReleaseErrorKind, code: ErrorCode) -> None:
        assert release_error_exit_code(ReleaseError(kind=kind, message="x")) == code


class TestPrintSettingsError:
    def test_failures_and_hint(self) -> None:
        console = MockConsole()
        error = SettingsError(
            "Invalid configuration",
            failures=("project is required",),
            hint='Run "mr init" to build a new configuration.',
        )

        print_settings_error(error, console)

        assert console.messages == [
            "Error: Invalid configuration",
            "- project is required",
            "",
            'Run "mr init" to build a new configuration.',
        ]
