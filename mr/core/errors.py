"""Exit codes for the `mr` command line.

Values map to shell exit status and should remain stable:
- 0: Success
- 1: User error (unknown or ambiguous folder, bad arguments)
- 2: Configuration error (missing or invalid settings)
- 3: No releases matched
- 4: Network error (service unreachable, unexpected payload)
- 5: I/O error (settings file cannot be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    NO_RELEASES = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
