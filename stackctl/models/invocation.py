"""Command invocation model"""

from dataclasses import dataclass
from typing import Optional

from ..constants import Command, SERVICE_SCOPED_COMMANDS


@dataclass
class CommandInvocation:
    """One CLI execution: the command plus its scoping flags"""

    command: Command
    service: Optional[str] = None
    compose_file: Optional[str] = None
    env_file: Optional[str] = None
    force: bool = False

    @property
    def is_service_scoped(self) -> bool:
        return self.command in SERVICE_SCOPED_COMMANDS

