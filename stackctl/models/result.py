"""Operation result models"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    CANCELLED = "cancelled"
    UP_TO_DATE = "up_to_date"


@dataclass
class CommitInfo:
    """One entry of an upstream change preview"""

    revision: str
    summary: str

    @property
    def short(self) -> str:
        return self.revision[:7]

    def __str__(self) -> str:
        return f"{self.short} - {self.summary}"


@dataclass
class UpdateResult:
    """Result of updating one tracked component"""

    component: str
    status: OperationStatus
    previous: Optional[str] = None
    latest: Optional[str] = None
    commit_count: int = 0
    preview: List[CommitInfo] = field(default_factory=list)
    backup_ref: Optional[str] = None
    commit_message: Optional[str] = None
    duration: float = 0.0

    @property
    def updated(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.status == OperationStatus.CANCELLED


@dataclass
class SkippedItem:
    """An artifact deliberately left out of a snapshot"""

    name: str
    reason: str


@dataclass
class BackupSnapshot:
    """Point-in-time backup of configuration, data and component revisions"""

    snapshot_id: str
    directory: Path
    copied_files: List[Path] = field(default_factory=list)
    archives: List[Path] = field(default_factory=list)
    skipped: List[SkippedItem] = field(default_factory=list)
    revisions: Dict[str, Optional[str]] = field(default_factory=dict)
    manifest_path: Optional[Path] = None


@dataclass
class HealthResult:
    """Outcome of a single liveness probe"""

    name: str
    healthy: bool
    required: bool = True
    detail: str = ""


@dataclass
class HealthReport:
    """Per-target results in configured order"""

    results: List[HealthResult] = field(default_factory=list)

    @property
    def all_healthy(self) -> bool:
        return all(r.healthy for r in self.results)

    @property
    def failing(self) -> List[HealthResult]:
        return [r for r in self.results if not r.healthy]

    @property
    def failing_required(self) -> List[HealthResult]:
        return [r for r in self.results if not r.healthy and r.required]

    def get(self, name: str) -> Optional[HealthResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None


@dataclass
class ServiceState:
    """Running state of one declared service"""

    name: str
    running: bool


@dataclass
class StackStatus:
    """Read-only view of the stack"""

    services: List[ServiceState] = field(default_factory=list)
    disk_usage: str = ""
    networks: List[str] = field(default_factory=list)
