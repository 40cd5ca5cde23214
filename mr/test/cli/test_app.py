"""Tests for the top-level typer app."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mr import __version__
from mr.cli.app import app
from mr.core.errors import ErrorCode
from mr.platform.paths import clear_caches

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """The app callback installs its own log handler on the root logger."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_show_help_lists_options() -> None:
    result = runner.invoke(app, ["show", "--help"])
    assert result.exit_code == 0
    for option in ("--project", "--detailed", "--failed", "--order-by", "--watch", "--exact"):
        assert option in result.output


def test_show_without_settings_is_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "AppData"))
    monkeypatch.chdir(tmp_path)
    clear_caches()
    try:
        result = runner.invoke(app, ["show", "Team/Web", "Production"])
    finally:
        clear_caches()

    assert result.exit_code == ErrorCode.CONFIG_ERROR
