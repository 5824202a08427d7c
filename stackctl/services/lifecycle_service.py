"""Stack lifecycle operations"""

import logging
from typing import Dict, Optional

from rich.console import Console

from ..api.exceptions import UsageError
from ..constants import (
    DEFAULT_LOG_TAIL,
    EMOJI_BUILD,
    EMOJI_CLEAN,
    EMOJI_LOGS,
    EMOJI_RESTART,
    EMOJI_START,
    EMOJI_STOP,
    EMOJI_SUCCESS,
    PROMPT_CONFIRM_VOLUME_PRUNE,
    PruneKind,
    SERVICE_NAME_PATTERN,
)
from ..models.config import DeploymentConfig
from ..models.result import ServiceState, StackStatus
from ..runtime.base import ContainerRuntime, Orchestrator

logger = logging.getLogger(__name__)


class LifecycleService:
    """Maps lifecycle commands onto orchestration verbs

    Every verb targets either the whole stack or one named service.
    Orchestration failures propagate unchanged; nothing is retried.
    """

    def __init__(self,
                 deployment: DeploymentConfig,
                 orchestrator: Orchestrator,
                 runtime: ContainerRuntime,
                 console: Optional[Console] = None):
        self.deployment = deployment
        self.orchestrator = orchestrator
        self.runtime = runtime
        self.console = console or Console()

    @property
    def stack_name(self) -> str:
        return self.deployment.settings.project_name or self.deployment.root.name

    def validate_service(self, service: Optional[str]) -> None:
        """Ensure a named service is declared in the orchestration file

        Raises:
            UsageError: If the service is malformed or not declared
        """
        if service is None:
            return

        if not SERVICE_NAME_PATTERN.match(service):
            raise UsageError(f"Invalid service name: {service!r}")

        declared = self.orchestrator.declared_services()
        if service not in declared:
            raise UsageError(
                f"Service '{service}' is not defined in {self.deployment.compose_file.name}",
                hint=f"Available services: {', '.join(declared) or 'none'}",
            )

    def _done(self, service: Optional[str], verb: str) -> None:
        if service:
            self.console.print(f"[green]{EMOJI_SUCCESS} Service {service} {verb}[/green]")
        else:
            self.console.print(f"[green]{EMOJI_SUCCESS} All services {verb}[/green]")

    def start(self, service: Optional[str] = None) -> None:
        """Bring services up without rebuilding"""
        self.validate_service(service)
        self.console.print(f"[blue]{EMOJI_START} Starting {self.stack_name} services...[/blue]")
        self.orchestrator.up(service)
        self._done(service, "started")

    def stop(self, service: Optional[str] = None) -> None:
        """Stop one service, or tear the whole stack down with its networks"""
        self.validate_service(service)
        self.console.print(f"[blue]{EMOJI_STOP} Stopping {self.stack_name} services...[/blue]")
        if service:
            self.orchestrator.stop(service)
        else:
            self.orchestrator.down()
        self._done(service, "stopped")

    def restart(self, service: Optional[str] = None) -> None:
        """Stop then start with the same scoping"""
        self.validate_service(service)
        self.console.print(f"[blue]{EMOJI_RESTART} Restarting {self.stack_name} services...[/blue]")
        self.orchestrator.restart(service)
        self._done(service, "restarted")

    def build(self, service: Optional[str] = None) -> None:
        """Rebuild images then bring services up"""
        self.validate_service(service)
        self.console.print(
            f"[blue]{EMOJI_BUILD} Building and starting {self.stack_name} services...[/blue]"
        )
        self.orchestrator.up(service, build=True)
        self._done(service, "built and started")

    def logs(self, service: Optional[str] = None, tail: int = DEFAULT_LOG_TAIL) -> None:
        """Follow service logs until interrupted"""
        self.validate_service(service)
        self.console.print(f"[blue]{EMOJI_LOGS} Showing service logs...[/blue]")
        self.orchestrator.logs(service, tail=tail, follow=True)

    def status(self) -> StackStatus:
        """Collect per-service state, disk usage and stack networks"""
        running = set(self.orchestrator.running_services())
        declared = self.orchestrator.declared_services()

        services = [ServiceState(name=name, running=name in running) for name in declared]
        # Containers the file no longer declares are still worth showing
        services.extend(
            ServiceState(name=name, running=True)
            for name in sorted(running - set(declared))
        )

        return StackStatus(
            services=services,
            disk_usage=self.runtime.disk_usage(),
            networks=self.runtime.networks(self.deployment.settings.compose.network_filter),
        )

    def clean(self, confirm=None, force: bool = False) -> Dict[PruneKind, Optional[str]]:
        """Prune unused resources

        Containers, images and networks are pruned unconditionally. Volumes
        hold persisted data and are pruned only after an explicit yes; in
        forced mode the volume step is skipped without asking.

        Args:
            confirm: Confirmation provider with ``ask(prompt) -> bool``
            force: Non-interactive mode

        Returns:
            Mapping of prune kind to tool output (None when skipped)
        """
        self.console.print(f"[blue]{EMOJI_CLEAN} Cleaning up unused resources...[/blue]")

        results: Dict[PruneKind, Optional[str]] = {}
        for kind in (PruneKind.CONTAINER, PruneKind.IMAGE, PruneKind.NETWORK):
            results[kind] = self.runtime.prune(kind)
            logger.info("Pruned %ss: %s", kind.value, results[kind])

        results[PruneKind.VOLUME] = None
        if force:
            self.console.print("[yellow]Skipping volume prune in non-interactive mode[/yellow]")
        elif confirm is not None and confirm.ask(PROMPT_CONFIRM_VOLUME_PRUNE):
            results[PruneKind.VOLUME] = self.runtime.prune(PruneKind.VOLUME)
        else:
            self.console.print("[dim]Volumes kept[/dim]")

        self.console.print(f"[green]{EMOJI_SUCCESS} Cleanup complete[/green]")
        return results
