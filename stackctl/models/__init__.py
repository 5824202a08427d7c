# stackctl/models/__init__.py
"""Data models for stackctl"""

from .component import TrackedComponent
from .config import (
    StackConfig,
    DeploymentConfig,
    ComposeSettings,
    BackupSettings,
    UpdateSettings,
    HealthTarget,
    VolumeConfig,
)
from .invocation import CommandInvocation
from .result import (
    OperationStatus,
    CommitInfo,
    UpdateResult,
    SkippedItem,
    BackupSnapshot,
    HealthResult,
    HealthReport,
    ServiceState,
    StackStatus,
)

__all__ = [
    # Component models
    "TrackedComponent",

    # Config models
    "StackConfig",
    "DeploymentConfig",
    "ComposeSettings",
    "BackupSettings",
    "UpdateSettings",
    "HealthTarget",
    "VolumeConfig",

    # Invocation
    "CommandInvocation",

    # Result models
    "OperationStatus",
    "CommitInfo",
    "UpdateResult",
    "SkippedItem",
    "BackupSnapshot",
    "HealthResult",
    "HealthReport",
    "ServiceState",
    "StackStatus",
]
