# stackctl/cli/main.py
"""Main CLI entry point for stackctl"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional

import click
import requests
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..api.exceptions import StackToolError
from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..core import PathResolver, ProjectManager
from ..models.config import DeploymentConfig
from ..runtime import ContainerRuntime, DockerRuntime, Orchestrator, OrchestratorFactory
from ..services import BackupService, HealthService, LifecycleService, UpdateService
from ..utils.clock import Clock
from ..utils.git_utils import GitRepository
from .commands import backup, health, lifecycle, update
from .utils.interactive import ConsoleConfirmation
from .utils.output import console, print_error, print_stack_error

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Explicit level from the environment wins over flags
    override = os.environ.get(ENV_LOG_LEVEL)
    if override:
        level = logging.getLevelName(override.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy initialization

    Adapters are only created when a command first needs them, so that
    usage errors never touch the deployment. Every adapter can be passed
    in up front, which is how tests swap in fakes.
    """

    def __init__(self,
                 project_manager: Optional[ProjectManager] = None,
                 orchestrator: Optional[Orchestrator] = None,
                 runtime: Optional[ContainerRuntime] = None,
                 clock: Optional[Clock] = None,
                 confirm=None,
                 repo_factory: Optional[Callable[[Path], GitRepository]] = None,
                 http_session: Optional[requests.Session] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 output: Optional[Console] = None):
        """Initialize CLI context"""
        self.compose_file: Optional[str] = None
        self.env_file: Optional[str] = None
        self.service: Optional[str] = None
        self.root: Optional[str] = None
        self.verbose: bool = False
        self.debug: bool = False
        self.invocation = None

        self._project_manager = project_manager
        self._deployment: Optional[DeploymentConfig] = None
        self._orchestrator = orchestrator
        self._runtime = runtime
        self._confirm = confirm
        self.clock = clock or Clock()
        self.repo_factory = repo_factory or GitRepository
        self.http_session = http_session
        self.environ = environ
        self.console = output or console

    @property
    def project_manager(self) -> ProjectManager:
        if self._project_manager is None:
            self._project_manager = ProjectManager(PathResolver(self.root))
            if self.debug:
                self.console.print(f"[dim]Deployment root: {self._project_manager.root}[/dim]")
        return self._project_manager

    @property
    def deployment(self) -> DeploymentConfig:
        if self._deployment is None:
            self._deployment = self.project_manager.build_deployment(
                compose_file=self.compose_file,
                env_file=self.env_file,
            )
        return self._deployment

    @property
    def orchestrator(self) -> Orchestrator:
        if self._orchestrator is None:
            self._orchestrator = OrchestratorFactory.create(self.deployment)
        return self._orchestrator

    @property
    def runtime(self) -> ContainerRuntime:
        if self._runtime is None:
            self._runtime = DockerRuntime()
        return self._runtime

    @property
    def confirm(self):
        if self._confirm is None:
            self._confirm = ConsoleConfirmation(self.console)
        return self._confirm

    def health_service(self) -> HealthService:
        return HealthService(
            self.orchestrator,
            self.deployment.settings.health_targets,
            session=self.http_session,
            environ=self.environ,
        )

    def lifecycle_service(self) -> LifecycleService:
        return LifecycleService(self.deployment, self.orchestrator, self.runtime, console=self.console)

    def update_service(self) -> UpdateService:
        return UpdateService(
            self.project_manager.root,
            settings=self.deployment.settings.update,
            orchestrator=self.orchestrator,
            health=self.health_service(),
            primary_target=self.deployment.settings.primary_health_target,
            clock=self.clock,
            confirm=self.confirm,
            repo_factory=self.repo_factory,
            console=self.console,
        )

    def backup_service(self) -> BackupService:
        return BackupService(
            self.deployment,
            self.runtime,
            self.project_manager.tracked_components(),
            clock=self.clock,
            repo_factory=self.repo_factory,
            console=self.console,
        )


class StackGroup(click.Group):
    """Command group that owns the exit status contract

    Usage errors exit with 1 instead of click's 2, tool errors are shown
    as ``Error [code]: message`` and interrupts exit with 130.
    """

    def main(self, args=None, prog_name=None, complete_var=None,
             standalone_mode=True, **extra):
        if args is None:
            args = sys.argv[1:]
        debug = '-d' in args or '--debug' in args

        try:
            rv = super().main(args=args, prog_name=prog_name or APP_NAME,
                              complete_var=complete_var, standalone_mode=False, **extra)
            code = rv if isinstance(rv, int) else 0

        except click.UsageError as e:
            print_error(e.format_message())
            if e.ctx is not None:
                console.print(e.ctx.get_help(), markup=False, highlight=False)
            code = 1

        except click.ClickException as e:
            print_error(e.format_message())
            code = 1

        except (click.Abort, KeyboardInterrupt):
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            code = 130

        except StackToolError as e:
            print_stack_error(e)
            if debug:
                console.print_exception()
            code = 1

        if not standalone_mode:
            return code
        sys.exit(code)


@click.group(name=APP_NAME, cls=StackGroup, invoke_without_command=True,
             context_settings=CONTEXT_SETTINGS)
@click.option('-f', '--file', 'compose_file', metavar='FILE',
              help='Orchestration file (default: docker-compose.yml)')
@click.option('-e', '--env', 'env_file', metavar='FILE',
              help='Environment file (default: .env)')
@click.option('-s', '--service', metavar='SERVICE',
              help='Act on one service (start, stop, restart, build, logs)')
@click.option('-r', '--root', type=click.Path(file_okay=False), metavar='DIR',
              help='Deployment root (default: $STACKCTL_ROOT or current directory)')
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.version_option(__version__, '--version', prog_name=APP_NAME)
@click.pass_context
def cli(ctx, compose_file, env_file, service, root, verbose, debug, quiet):
    """stackctl - Operate a compose stack and its tracked components

    Starts, stops and inspects the services of a compose deployment,
    updates the git submodules it is built from, takes snapshots of its
    configuration and data, and checks its health.

    Every command first verifies that the orchestration file, the
    environment file and the container runtime are in place.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    stack = ctx.ensure_object(Context)
    stack.compose_file = compose_file
    stack.env_file = env_file
    stack.service = service
    stack.root = root
    stack.verbose = verbose
    stack.debug = debug

    if ctx.invoked_subcommand is None:
        raise click.UsageError("No command provided", ctx=ctx)


# Register commands
cli.add_command(lifecycle.start)
cli.add_command(lifecycle.stop)
cli.add_command(lifecycle.restart)
cli.add_command(lifecycle.build)
cli.add_command(lifecycle.logs)
cli.add_command(lifecycle.status)
cli.add_command(update.update)
cli.add_command(backup.backup)
cli.add_command(backup.restore)
cli.add_command(health.health)
cli.add_command(lifecycle.clean)


def main():
    """Main entry point for the CLI application

    This function handles unexpected exceptions with proper error display;
    tool errors and interrupts are handled by the command group.
    """
    try:
        cli(prog_name=APP_NAME)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
