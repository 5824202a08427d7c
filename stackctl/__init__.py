"""stackctl - Operational control for a compose stack and its tracked components.

This tool replaces the deployment shell scripts of a multi-service stack:
lifecycle control of the compose services, updates of the git submodules
the stack is built from, snapshots of configuration and data, and health
checks.
"""

from .__version__ import __version__, __version_info__, __license__

# Services
from .services import BackupService, HealthService, LifecycleService, UpdateService

# Data models
from .models.component import TrackedComponent
from .models.config import DeploymentConfig, HealthTarget, StackConfig
from .models.result import BackupSnapshot, HealthReport, HealthResult, UpdateResult

# Exceptions
from .api.exceptions import (
    StackToolError,
    UsageError,
    ConfigMissingError,
    ConfigError,
    EnvironmentError,
    OrchestrationError,
    UpdateError,
    FetchError,
    CheckoutError,
    CommitError,
    BackupError,
    UnhealthyStackError,
    NotImplementedError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Services
    "BackupService",
    "HealthService",
    "LifecycleService",
    "UpdateService",

    # Data models
    "TrackedComponent",
    "DeploymentConfig",
    "HealthTarget",
    "StackConfig",
    "BackupSnapshot",
    "HealthReport",
    "HealthResult",
    "UpdateResult",

    # Exceptions
    "StackToolError",
    "UsageError",
    "ConfigMissingError",
    "ConfigError",
    "EnvironmentError",
    "OrchestrationError",
    "UpdateError",
    "FetchError",
    "CheckoutError",
    "CommitError",
    "BackupError",
    "UnhealthyStackError",
    "NotImplementedError",
]
