"""Adapters for the external orchestration tooling"""

from .base import Orchestrator, ContainerRuntime
from .compose import ComposeOrchestrator
from .docker import DockerRuntime
from .factory import OrchestratorFactory

__all__ = [
    "Orchestrator",
    "ContainerRuntime",
    "ComposeOrchestrator",
    "DockerRuntime",
    "OrchestratorFactory",
]
