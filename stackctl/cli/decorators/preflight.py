# stackctl/cli/decorators/preflight.py
"""Precondition decorator for CLI commands"""

import logging
from functools import wraps
from typing import Callable

import click

from ...api.exceptions import UsageError
from ...constants import APP_NAME, Command
from ...core.preflight import Preflight
from ...models.invocation import CommandInvocation
from ..utils.output import print_warning

logger = logging.getLogger(__name__)


def require_stack(command: Command) -> Callable:
    """Decorator that validates the invocation and runs the precondition checks

    This decorator:
    1. Resolves the service scope from the global and local --service options
    2. Rejects --service on commands that act on the whole stack
    3. Runs the precondition checks against the deployment
    4. Stores the invocation on the CLI context for the handler

    Usage errors are raised before any check runs, so a rejected command
    never creates the environment file.

    Args:
        command: Command the decorated handler implements

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            ctx = click.get_current_context()
            stack = ctx.obj

            invocation = CommandInvocation(
                command=command,
                service=kwargs.get('service') or stack.service,
                compose_file=stack.compose_file,
                env_file=stack.env_file,
                force=bool(kwargs.get('force', False)),
            )

            if invocation.service and not invocation.is_service_scoped:
                raise UsageError(
                    f"'{command.value}' does not accept --service",
                    hint=f"Run '{APP_NAME} {command.value}' without -s/--service",
                )

            passed = Preflight(stack.deployment, stack.orchestrator, stack.runtime).run()
            for check in passed:
                if getattr(check, "created", False):
                    print_warning(f"{check.message}; review it before relying on it")
            logger.debug("Preflight passed: %s", ", ".join(check.name for check in passed))

            stack.invocation = invocation
            return func(*args, **kwargs)

        return wrapper

    return decorator
