"""Public API for stackctl"""

from .exceptions import (
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
