"""Release resolution: fetch active releases and pick what is deployed where."""

from .client import ReleaseApi
from .errors import ReleaseError
from .model import (
    DeploymentAttempt,
    DeploymentStatus,
    EnvironmentStatus,
    RawEnvironment,
    RawRelease,
    ResolvedRelease,
)
from .resolve import aggregate_releases, is_completed, select_attempt
from .service import OrderBy, ReleaseQuery, ReleaseService

__all__ = [
    "DeploymentAttempt",
    "DeploymentStatus",
    "EnvironmentStatus",
    "OrderBy",
    "RawEnvironment",
    "RawRelease",
    "ReleaseApi",
    "ReleaseError",
    "ReleaseQuery",
    "ReleaseService",
    "ResolvedRelease",
    "aggregate_releases",
    "is_completed",
    "select_attempt",
]
