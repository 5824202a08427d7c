# stackctl/runtime/base.py
"""Orchestration and container runtime abstract base classes"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from ..api.exceptions import ConfigError
from ..constants import DEFAULT_LOG_TAIL, PruneKind


class Orchestrator(ABC):
    """Abstract base class for stack orchestration tools

    One instance drives one orchestration file. Every mutating verb raises
    OrchestrationError when the underlying tool reports failure.
    """

    def __init__(self,
                 compose_file: Path,
                 env_file: Optional[Path] = None,
                 project_dir: Optional[Path] = None):
        """
        Initialize orchestrator

        Args:
            compose_file: Orchestration file
            env_file: Environment file passed to the tool
            project_dir: Directory the tool runs in (defaults to the
                orchestration file's directory)
        """
        self.compose_file = Path(compose_file)
        self.env_file = Path(env_file) if env_file else None
        self.project_dir = Path(project_dir) if project_dir else self.compose_file.parent

    @abstractmethod
    def is_installed(self) -> bool:
        """Check if the orchestration tool is available"""
        pass

    @abstractmethod
    def version(self) -> Optional[str]:
        """Version string reported by the tool, None if unavailable"""
        pass

    @abstractmethod
    def up(self, service: Optional[str] = None, build: bool = False) -> None:
        """
        Bring services up in the background

        Args:
            service: Single service to start (None for the whole stack)
            build: Rebuild images before starting
        """
        pass

    @abstractmethod
    def down(self) -> None:
        """Tear the whole stack down, including its networks"""
        pass

    @abstractmethod
    def stop(self, service: str) -> None:
        """Stop a single service, leaving the rest of the stack running"""
        pass

    @abstractmethod
    def logs(self, service: Optional[str] = None,
             tail: int = DEFAULT_LOG_TAIL, follow: bool = True) -> None:
        """
        Stream service logs to the terminal

        Blocks until the stream ends or the user interrupts it. The log
        process is always reaped before returning or re-raising.
        """
        pass

    @abstractmethod
    def ps(self) -> str:
        """Tabular service listing as printed by the tool"""
        pass

    @abstractmethod
    def running_services(self) -> List[str]:
        """Names of services with a running container"""
        pass

    @abstractmethod
    def exec(self, service: str, command: Sequence[str]) -> bool:
        """
        Run a command inside a service container

        Returns:
            True if the command exited with status 0
        """
        pass

    def restart(self, service: Optional[str] = None) -> None:
        """Stop then start, scoped like the other verbs"""
        if service:
            self.stop(service)
        else:
            self.down()
        self.up(service)

    def declared_services(self) -> List[str]:
        """
        Service names declared in the orchestration file

        Raises:
            ConfigError: If the file cannot be parsed
        """
        try:
            with open(self.compose_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read {self.compose_file}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{self.compose_file} is not a mapping")

        return list((data.get("services") or {}).keys())


class ContainerRuntime(ABC):
    """Abstract base class for the container engine behind the stack"""

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the runtime daemon is reachable"""
        pass

    @abstractmethod
    def disk_usage(self) -> str:
        """Aggregate disk usage report"""
        pass

    @abstractmethod
    def networks(self, name_filter: str) -> List[str]:
        """Names of networks whose name contains name_filter"""
        pass

    @abstractmethod
    def prune(self, kind: PruneKind) -> str:
        """
        Remove unused resources of one kind without prompting

        Returns:
            Tool output (reclaimed space summary)
        """
        pass

    @abstractmethod
    def run_ephemeral(self, image: str, volumes: Dict[Path, str],
                      command: Sequence[str]) -> None:
        """
        Run a throwaway helper container

        Args:
            image: Image to run
            volumes: Host path to container path bind mounts
            command: Command executed in the container
        """
        pass
