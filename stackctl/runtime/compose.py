"""Compose CLI orchestrator implementation"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .base import Orchestrator
from ..api.exceptions import OrchestrationError
from ..constants import COMPOSE_V1_COMMAND, DEFAULT_LOG_TAIL

logger = logging.getLogger(__name__)

# Seconds to wait for the log follower to exit after an interrupt
_LOGS_TERMINATE_TIMEOUT = 5


class ComposeOrchestrator(Orchestrator):
    """Drives ``docker-compose`` or the ``docker compose`` plugin"""

    def __init__(self,
                 compose_file: Path,
                 env_file: Optional[Path] = None,
                 project_dir: Optional[Path] = None,
                 command: Sequence[str] = COMPOSE_V1_COMMAND):
        """
        Initialize compose orchestrator

        Args:
            compose_file: Orchestration file
            env_file: Environment file (passed as --env-file)
            project_dir: Working directory for the tool
            command: Executable plus leading arguments, e.g.
                ("docker-compose",) or ("docker", "compose")
        """
        super().__init__(compose_file, env_file, project_dir)
        self.command: Tuple[str, ...] = tuple(command)

    def _base_command(self) -> List[str]:
        cmd = [*self.command, "-f", str(self.compose_file)]
        if self.env_file:
            cmd.extend(["--env-file", str(self.env_file)])
        return cmd

    def _run(self, args: Sequence[str], capture: bool = False) -> str:
        cmd = self._base_command() + list(args)
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                cwd=self.project_dir,
                capture_output=capture,
                text=True
            )
        except FileNotFoundError as e:
            raise OrchestrationError(cmd, 127, str(e)) from e

        if result.returncode != 0:
            raise OrchestrationError(cmd, result.returncode, result.stderr if capture else "")

        return result.stdout if capture else ""

    def is_installed(self) -> bool:
        if shutil.which(self.command[0]) is None:
            return False
        if len(self.command) == 1:
            return True

        # Plugin form: the docker binary exists but the plugin may not
        return self.version() is not None

    def version(self) -> Optional[str]:
        try:
            result = subprocess.run(
                [*self.command, "version", "--short"],
                capture_output=True,
                text=True
            )
        except FileNotFoundError:
            return None

        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def up(self, service: Optional[str] = None, build: bool = False) -> None:
        args = ["up"]
        if build:
            args.append("--build")
        args.append("-d")
        if service:
            args.append(service)
        self._run(args)

    def down(self) -> None:
        self._run(["down"])

    def stop(self, service: str) -> None:
        self._run(["stop", service])

    def logs(self, service: Optional[str] = None,
             tail: int = DEFAULT_LOG_TAIL, follow: bool = True) -> None:
        args = ["logs"]
        if follow:
            args.append("-f")
        args.append(f"--tail={tail}")
        if service:
            args.append(service)

        cmd = self._base_command() + args
        logger.debug("Streaming %s", " ".join(cmd))

        try:
            process = subprocess.Popen(cmd, cwd=self.project_dir)
        except FileNotFoundError as e:
            raise OrchestrationError(cmd, 127, str(e)) from e

        try:
            returncode = process.wait()
        except KeyboardInterrupt:
            self._reap(process)
            raise
        finally:
            if process.poll() is None:
                self._reap(process)

        if returncode != 0:
            raise OrchestrationError(cmd, returncode)

    @staticmethod
    def _reap(process: subprocess.Popen) -> None:
        process.terminate()
        try:
            process.wait(timeout=_LOGS_TERMINATE_TIMEOUT)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def ps(self) -> str:
        return self._run(["ps"], capture=True)

    def running_services(self) -> List[str]:
        output = self._run(["ps", "--services", "--filter", "status=running"], capture=True)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def exec(self, service: str, command: Sequence[str]) -> bool:
        try:
            self._run(["exec", "-T", service, *command], capture=True)
        except OrchestrationError as e:
            logger.debug("exec in %s failed: %s", service, e)
            return False
        return True
