"""Docker engine runtime implementation"""

import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Sequence

from .base import ContainerRuntime
from ..api.exceptions import OrchestrationError
from ..constants import DOCKER_BINARY, PruneKind

logger = logging.getLogger(__name__)


class DockerRuntime(ContainerRuntime):
    """Talks to the Docker daemon through the docker CLI"""

    def __init__(self, binary: str = DOCKER_BINARY):
        self.binary = binary

    def _run(self, args: Sequence[str], capture: bool = True) -> str:
        cmd = [self.binary, *args]
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(cmd, capture_output=capture, text=True)
        except FileNotFoundError as e:
            raise OrchestrationError(cmd, 127, str(e)) from e

        if result.returncode != 0:
            raise OrchestrationError(cmd, result.returncode, result.stderr if capture else "")

        return result.stdout if capture else ""

    def is_running(self) -> bool:
        try:
            self._run(["info"])
        except OrchestrationError as e:
            logger.debug("Docker daemon check failed: %s", e)
            return False
        return True

    def disk_usage(self) -> str:
        return self._run(["system", "df"])

    def networks(self, name_filter: str) -> List[str]:
        output = self._run([
            "network", "ls",
            "--filter", f"name={name_filter}",
            "--format", "{{.Name}}",
        ])
        return [line.strip() for line in output.splitlines() if line.strip()]

    def prune(self, kind: PruneKind) -> str:
        return self._run([kind.value, "prune", "-f"]).strip()

    def run_ephemeral(self, image: str, volumes: Dict[Path, str],
                      command: Sequence[str]) -> None:
        args = ["run", "--rm"]
        for host_path, container_path in volumes.items():
            args.extend(["-v", f"{Path(host_path).resolve()}:{container_path}"])
        args.append(image)
        args.extend(command)
        self._run(args)
