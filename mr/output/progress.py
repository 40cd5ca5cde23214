"""Terminal progress indicator (OSC 9;4).

Windows Terminal, ConEmu and a few other emulators show these sequences as a
taskbar/tab progress bar. Other terminals ignore them.
"""

from __future__ import annotations

import sys
from typing import TextIO

__all__ = [
    "INDETERMINATE",
    "RESET",
    "TerminalProgress",
    "default",
    "error",
    "warning",
]

RESET = "\x1b]9;4;0;0;\x07"
INDETERMINATE = "\x1b]9;4;3;0;\x07"


def _sequence(state: int, progress: int) -> str:
    if progress < 0 or progress > 100:
        raise ValueError(f"progress must be between 0 and 100, got {progress}")
    return f"\x1b]9;4;{state};{progress};\x07"


def default(progress: int) -> str:
    return _sequence(1, progress)


def error(progress: int) -> str:
    return _sequence(2, progress)


def warning(progress: int) -> str:
    return _sequence(4, progress)


class TerminalProgress:
    """Writes progress sequences to a stream, only when it is a terminal."""

    def __init__(self, stream: TextIO | None = None, *, enabled: bool | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        if enabled is None:
            isatty = getattr(self._stream, "isatty", None)
            enabled = bool(isatty and isatty())
        self.enabled = enabled

    def _write(self, sequence: str) -> None:
        if not self.enabled:
            return
        self._stream.write(sequence)
        self._stream.flush()

    def set(self, progress: int) -> None:
        self._write(default(progress))

    def fail(self, progress: int = 100) -> None:
        self._write(error(progress))

    def warn(self, progress: int = 100) -> None:
        self._write(warning(progress))

    def busy(self) -> None:
        self._write(INDETERMINATE)

    def reset(self) -> None:
        self._write(RESET)
