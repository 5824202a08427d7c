"""Orchestrator factory"""

import logging
import shlex
import shutil
import subprocess
from typing import Dict, Tuple, Type

from .base import Orchestrator
from .compose import ComposeOrchestrator
from ..constants import COMPOSE_COMMAND_AUTO, COMPOSE_V1_COMMAND, COMPOSE_V2_COMMAND
from ..models.config import DeploymentConfig

logger = logging.getLogger(__name__)


class OrchestratorFactory:
    """Factory for creating orchestrator instances"""

    # Registry of orchestrators by tool family
    _orchestrators: Dict[str, Type[Orchestrator]] = {
        "compose": ComposeOrchestrator,
    }

    @classmethod
    def create(cls, deployment: DeploymentConfig, family: str = "compose") -> Orchestrator:
        """Create an orchestrator for a deployment

        Args:
            deployment: Resolved deployment configuration
            family: Orchestrator family name

        Returns:
            Orchestrator instance

        Raises:
            ValueError: If the family is not supported
        """
        if family not in cls._orchestrators:
            raise ValueError(f"Unsupported orchestrator: {family}")

        orchestrator_class = cls._orchestrators[family]
        command = cls.resolve_compose_command(deployment.settings.compose.command)

        return orchestrator_class(
            compose_file=deployment.compose_file,
            env_file=deployment.env_file,
            project_dir=deployment.root,
            command=command,
        )

    @classmethod
    def resolve_compose_command(cls, setting: str) -> Tuple[str, ...]:
        """Turn the configured compose command into an argv prefix

        ``auto`` prefers the standalone ``docker-compose`` binary and falls
        back to the ``docker compose`` plugin. When neither is found the
        standalone form is returned so that the precondition check reports
        it as missing.

        Args:
            setting: "auto" or an explicit command such as "docker compose"

        Returns:
            Command tuple
        """
        if setting and setting != COMPOSE_COMMAND_AUTO:
            return tuple(shlex.split(setting))

        if shutil.which(COMPOSE_V1_COMMAND[0]):
            return COMPOSE_V1_COMMAND

        if shutil.which(COMPOSE_V2_COMMAND[0]) and cls._plugin_available():
            logger.debug("Using the docker compose plugin")
            return COMPOSE_V2_COMMAND

        return COMPOSE_V1_COMMAND

    @staticmethod
    def _plugin_available() -> bool:
        try:
            result = subprocess.run(
                [*COMPOSE_V2_COMMAND, "version"],
                capture_output=True,
                text=True
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0

