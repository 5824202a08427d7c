"""Core functionality for stackctl"""

from .path_resolver import PathResolver
from .project_manager import ProjectManager
from .preflight import (
    Preflight,
    PreflightCheck,
    ComposeFileCheck,
    EnvFileCheck,
    RuntimeDaemonCheck,
    OrchestratorToolCheck,
)

__all__ = [
    "PathResolver",
    "ProjectManager",
    "Preflight",
    "PreflightCheck",
    "ComposeFileCheck",
    "EnvFileCheck",
    "RuntimeDaemonCheck",
    "OrchestratorToolCheck",
]
