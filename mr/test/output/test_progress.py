"""Tests for mr.output.progress module."""

from __future__ import annotations

import io

import pytest

from mr.output import progress
from mr.output.progress import INDETERMINATE, RESET, TerminalProgress


class TestSequences:
    def test_default(self) -> None:
        assert progress.default(40) == "\x1b]9;4;1;40;\x07"

    def test_error(self) -> None:
        assert progress.error(100) == "\x1b]9;4;2;100;\x07"

    def test_warning(self) -> None:
        assert progress.warning(0) == "\x1b]9;4;4;0;\x07"

    @pytest.mark.parametrize("value", [-1, 101])
    def test_out_of_range(self, value: int) -> None:
        with pytest.raises(ValueError, match="between 0 and 100"):
            progress.default(value)


class TestTerminalProgress:
    def test_disabled_for_non_tty(self) -> None:
        stream = io.StringIO()
        bar = TerminalProgress(stream)
        bar.set(50)
        bar.reset()
        assert not bar.enabled
        assert stream.getvalue() == ""

    def test_enabled_writes_sequences(self) -> None:
        stream = io.StringIO()
        bar = TerminalProgress(stream, enabled=True)
        bar.set(50)
        bar.busy()
        bar.fail()
        bar.warn(30)
        bar.reset()
        assert stream.getvalue() == (
            progress.default(50) + INDETERMINATE + progress.error(100) + progress.warning(30) + RESET
        )
