"""Tests for mr.platform.files module."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from mr.platform.files import atomic_write_text


class TestAtomicWriteText:
    def test_creates_parents_and_writes(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "settings.toml"

        atomic_write_text(target, 'project = "Fabrikam"\n')

        assert target.read_text(encoding="utf-8") == 'project = "Fabrikam"\n'

    def test_replaces_existing_without_leftovers(self, tmp_path: Path) -> None:
        target = tmp_path / "settings.toml"
        target.write_text("old", encoding="utf-8")

        atomic_write_text(target, "new")

        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["settings.toml"]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_mode_is_applied(self, tmp_path: Path) -> None:
        target = tmp_path / "settings.toml"
        target.write_text("old", encoding="utf-8")
        target.chmod(0o644)

        atomic_write_text(target, "secret", mode=0o600)

        assert stat.S_IMODE(target.stat().st_mode) == 0o600
