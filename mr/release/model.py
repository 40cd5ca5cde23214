from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Self


class _WireEnum(Enum):
    """Enum whose values are the service's camelCase wire names."""

    @classmethod
    def from_wire(cls, value: object) -> Self:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return cls("unknown")

    @property
    def label(self) -> str:
        """PascalCase name as shown by the service UI (e.g. PartiallySucceeded)."""
        return self.value[:1].upper() + self.value[1:]

    def __str__(self) -> str:
        return self.label


class EnvironmentStatus(_WireEnum):
    """Status of a release environment.

    UNKNOWN covers values added by the service after this list was written.
    """

    UNDEFINED = "undefined"
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"
    REJECTED = "rejected"
    QUEUED = "queued"
    SCHEDULED = "scheduled"
    PARTIALLY_SUCCEEDED = "partiallySucceeded"
    UNKNOWN = "unknown"


class DeploymentStatus(_WireEnum):
    """Status of one deployment attempt."""

    UNDEFINED = "undefined"
    NOT_DEPLOYED = "notDeployed"
    IN_PROGRESS = "inProgress"
    SUCCEEDED = "succeeded"
    PARTIALLY_SUCCEEDED = "partiallySucceeded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class DeploymentAttempt:
    attempt: int
    status: DeploymentStatus
    last_modified_on: datetime


@dataclass(frozen=True, slots=True)
class RawEnvironment:
    name: str
    status: EnvironmentStatus
    attempts: tuple[DeploymentAttempt, ...] = ()


@dataclass(frozen=True, slots=True)
class RawRelease:
    """An active release as returned by the service, environments expanded."""

    id: int
    name: str
    pipeline: str  # release definition name
    created_on: datetime
    environments: tuple[RawEnvironment, ...]
    web_url: str


@dataclass(frozen=True, slots=True)
class ReleaseFolder:
    path: str


@dataclass(frozen=True, slots=True)
class ResolvedRelease:
    """The release of one pipeline currently reported for an environment.

    `deployed_on` is None exactly when `status` is UNDEFINED, i.e. no attempt
    on the target environment actually ran.
    """

    pipeline: str
    name: str
    release_id: int
    created_on: datetime
    deployed_on: datetime | None
    status: DeploymentStatus
    web_url: str
    environments: tuple[str, ...]

    @property
    def is_succeeded(self) -> bool:
        return self.status is DeploymentStatus.SUCCEEDED
