# stackctl/core/preflight.py
"""Precondition checks run before every command"""

import logging
from typing import List, Optional

from ..api.exceptions import ConfigMissingError, EnvironmentError, StackToolError
from ..constants import MIN_COMPOSE_VERSION
from ..models.config import DeploymentConfig
from ..runtime.base import ContainerRuntime, Orchestrator
from ..utils.file_utils import create_from_template
from ..utils.version_utils import extract_version, is_at_least

logger = logging.getLogger(__name__)


class PreflightCheck:
    """Base class for precondition checks"""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.passed = False
        self.message = ""
        self.error: Optional[StackToolError] = None

    def run(self) -> 'PreflightCheck':
        """Run the check, recording the outcome instead of raising"""
        raise NotImplementedError

    def fail(self, error: StackToolError) -> 'PreflightCheck':
        self.passed = False
        self.error = error
        self.message = str(error)
        return self

    def succeed(self, message: str) -> 'PreflightCheck':
        self.passed = True
        self.error = None
        self.message = message
        return self


class ComposeFileCheck(PreflightCheck):
    """Check the orchestration file exists"""

    def __init__(self, deployment: DeploymentConfig):
        super().__init__("Compose File", "Orchestration file is present")
        self.deployment = deployment

    def run(self):
        compose_file = self.deployment.compose_file
        if not compose_file.is_file():
            return self.fail(ConfigMissingError(
                f"{compose_file} not found",
                hint="Pass the orchestration file with -f/--file or run from the deployment root",
            ))
        return self.succeed(f"Using {compose_file.name}")


class EnvFileCheck(PreflightCheck):
    """Check the environment file exists, creating it from the template if needed

    Creating the file is the only mutation any precondition check performs.
    """

    def __init__(self, deployment: DeploymentConfig):
        super().__init__("Environment File", "Environment file is present")
        self.deployment = deployment
        self.created = False

    def run(self):
        env_file = self.deployment.env_file
        template = self.deployment.env_template

        if env_file.is_file():
            return self.succeed(f"Using {env_file.name}")

        logger.warning("%s not found, creating it from %s", env_file.name, template.name)

        try:
            self.created = create_from_template(template, env_file)
        except FileNotFoundError:
            return self.fail(ConfigMissingError(
                f"{env_file} not found and no {template.name} template to create it from",
                hint=f"Create it with 'cp {template.name} {env_file.name}' once a template exists, "
                     f"or pass an existing file with -e/--env",
            ))

        if self.created:
            return self.succeed(f"Created {env_file.name} from {template.name}")
        return self.succeed(f"Using {env_file.name}")


class RuntimeDaemonCheck(PreflightCheck):
    """Check the container runtime daemon is reachable"""

    def __init__(self, runtime: ContainerRuntime):
        super().__init__("Container Runtime", "Docker daemon is reachable")
        self.runtime = runtime

    def run(self):
        if not self.runtime.is_running():
            return self.fail(EnvironmentError(
                "Docker is not running",
                hint="Start the Docker daemon (e.g. 'sudo systemctl start docker') and retry",
            ))
        return self.succeed("Docker daemon is running")


class OrchestratorToolCheck(PreflightCheck):
    """Check the orchestration CLI is installed and recent enough"""

    def __init__(self, orchestrator: Orchestrator, minimum: str = MIN_COMPOSE_VERSION):
        super().__init__("Compose Tool", "Orchestration CLI is installed")
        self.orchestrator = orchestrator
        self.minimum = minimum

    def run(self):
        tool = " ".join(getattr(self.orchestrator, "command", ("docker-compose",)))

        if not self.orchestrator.is_installed():
            return self.fail(EnvironmentError(
                f"{tool} is not installed",
                hint="Install Docker Compose: https://docs.docker.com/compose/install/",
            ))

        reported = self.orchestrator.version()
        version = extract_version(reported or "")
        if version is not None and not is_at_least(version, self.minimum):
            return self.fail(EnvironmentError(
                f"{tool} {version} is too old (need {self.minimum} or newer)",
                hint="Upgrade Docker Compose",
            ))

        return self.succeed(f"{tool} {version or 'version unknown'}")


class Preflight:
    """Runs the precondition checks in order, stopping at the first failure"""

    def __init__(self,
                 deployment: DeploymentConfig,
                 orchestrator: Orchestrator,
                 runtime: ContainerRuntime):
        self.deployment = deployment
        self.orchestrator = orchestrator
        self.runtime = runtime

    def checks(self) -> List[PreflightCheck]:
        # Order matters: file checks must precede anything touching docker
        return [
            ComposeFileCheck(self.deployment),
            EnvFileCheck(self.deployment),
            RuntimeDaemonCheck(self.runtime),
            OrchestratorToolCheck(self.orchestrator),
        ]

    def run(self) -> List[PreflightCheck]:
        """Run all checks

        Returns:
            The passed checks, in order

        Raises:
            StackToolError: The first failing check's error
        """
        passed = []
        for check in self.checks():
            check.run()
            if not check.passed:
                logger.debug("Preflight check '%s' failed: %s", check.name, check.message)
                raise check.error
            logger.info("%s: %s", check.name, check.message)
            passed.append(check)
        return passed
