"""Service layer for stackctl"""

from .backup_service import BackupService
from .health_service import HealthService
from .lifecycle_service import LifecycleService
from .update_service import UpdateService

__all__ = [
    "BackupService",
    "HealthService",
    "LifecycleService",
    "UpdateService",
]
