from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "folder_not_found",
    "folder_ambiguous",
    "fetch_failed",
    "invalid_response",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
