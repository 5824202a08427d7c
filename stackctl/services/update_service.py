"""Tracked component update workflow"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console

from ..api.exceptions import CheckoutError, CommitError, ConfigMissingError, FetchError, UpdateError
from ..constants import (
    EMOJI_FETCH,
    EMOJI_DISK,
    EMOJI_SUCCESS,
    EMOJI_TEST,
    EMOJI_UPDATE,
    EMOJI_WARNING,
    ErrorCode,
    MSG_UP_TO_DATE,
    MSG_UPDATED,
    PROMPT_CONFIRM_SMOKE_TEST,
    PROMPT_CONFIRM_UPDATE,
)
from ..models.component import TrackedComponent
from ..models.config import HealthTarget, UpdateSettings
from ..models.result import OperationStatus, UpdateResult
from ..runtime.base import Orchestrator
from ..utils.clock import Clock
from ..utils.git_utils import GitCommandError, GitRepository
from .health_service import HealthService

logger = logging.getLogger(__name__)


class UpdateService:
    """Moves tracked components to the tip of their upstream branch

    Each component goes through: fetch, compare, preview, confirm, backup
    ref, checkout, commit of the new pin. Every step that can fail before
    the checkout leaves both repositories untouched; a failure after the
    checkout is reported as a partial update with its recovery command.
    """

    def __init__(self,
                 root: Path,
                 settings: Optional[UpdateSettings] = None,
                 orchestrator: Optional[Orchestrator] = None,
                 health: Optional[HealthService] = None,
                 primary_target: Optional[HealthTarget] = None,
                 clock: Optional[Clock] = None,
                 confirm=None,
                 repo_factory: Callable[[Path], GitRepository] = GitRepository,
                 console: Optional[Console] = None):
        """Initialize update service

        Args:
            root: Versioning root that pins the components
            settings: Preview limit, smoke test delay and backup prefix
            orchestrator: Used for the post-update smoke test
            health: Used to probe the primary target during the smoke test
            primary_target: Target probed by the smoke test
            clock: Time source for backup branch names and the settle wait
            confirm: Confirmation provider with ``ask(prompt) -> bool``
            repo_factory: Creates a git repository handle for a path
            console: Output console
        """
        self.root = Path(root)
        self.settings = settings or UpdateSettings()
        self.orchestrator = orchestrator
        self.health = health
        self.primary_target = primary_target
        self.clock = clock or Clock()
        self.confirm = confirm
        self.repo_factory = repo_factory
        self.console = console or Console()

    def _ask(self, prompt: str) -> bool:
        # No provider means nobody can answer, which counts as a no
        return self.confirm is not None and self.confirm.ask(prompt)

    def backup_branch_name(self, component: TrackedComponent) -> str:
        return f"{self.settings.backup_prefix}-{self.clock.timestamp()}-{component.slug}"

    def update_component(self, component: TrackedComponent, force: bool = False) -> UpdateResult:
        """Update one component to the tip of its upstream branch

        Args:
            component: Tracked component to update
            force: Skip the confirmation prompt

        Returns:
            UpdateResult describing what happened

        Raises:
            ConfigMissingError: If the component is not checked out
            FetchError: If fetching the remote failed (nothing changed)
            CheckoutError: If the new revision could not be checked out
            CommitError: If the new pin could not be committed (partial update)
        """
        started = self.clock.monotonic()
        path = component.resolve(self.root)
        repo = self.repo_factory(path)
        parent = self.repo_factory(self.root)

        if not repo.exists():
            raise ConfigMissingError(
                f"Component '{component.name}' is not checked out at {component.path}",
                hint=f"Run 'git submodule update --init {component.path}'",
            )

        self.console.print(f"\n[bold blue]{EMOJI_UPDATE} Updating {component.name}[/bold blue]")

        try:
            current = repo.rev_parse("HEAD")
            current_info = repo.describe(current)
        except GitCommandError as e:
            raise FetchError(component.name, f"cannot read current revision: {e}")
        component.revision = current
        self.console.print(f"Current commit: {current_info}")

        self.console.print(f"[blue]{EMOJI_FETCH} Fetching latest changes from {component.remote}...[/blue]")
        try:
            repo.fetch(component.remote)
            latest = repo.rev_parse(component.upstream_ref)
        except GitCommandError as e:
            raise FetchError(component.name, str(e))

        result = UpdateResult(component=component.name, status=OperationStatus.UP_TO_DATE,
                              previous=current, latest=latest)

        if current == latest:
            self.console.print(f"[green]{MSG_UP_TO_DATE.format(component=component.name)}[/green]")
            result.duration = self.clock.monotonic() - started
            return result

        try:
            latest_info = repo.describe(latest)
            result.preview = repo.log_range(current, latest, self.settings.preview_limit)
            result.commit_count = repo.count_range(current, latest)
        except GitCommandError as e:
            raise FetchError(component.name, f"cannot read upstream history: {e}")
        self.console.print(f"Latest available commit: {latest_info}")

        self.console.print(f"\n[yellow]{EMOJI_FETCH} Changes summary:[/yellow]")
        for commit in result.preview:
            self.console.print(f"  {commit}")
        self.console.print(f"Total commits: {result.commit_count}")

        if not force and not self._ask(PROMPT_CONFIRM_UPDATE.format(component=component.name)):
            self.console.print("[yellow]Update cancelled.[/yellow]")
            result.status = OperationStatus.CANCELLED
            result.duration = self.clock.monotonic() - started
            return result

        backup_ref = self.backup_branch_name(component)
        self.console.print(f"[blue]{EMOJI_DISK} Creating backup branch: {backup_ref}[/blue]")
        try:
            parent.create_branch(backup_ref, "HEAD")
        except GitCommandError as e:
            # Nothing has moved yet; usually a branch of the same name exists
            raise UpdateError(
                component.name,
                f"cannot create backup branch {backup_ref}: {e}",
                ErrorCode.BACKUP_REF_FAILED,
                f"Retry in a moment, or remove the branch with 'git branch -D {backup_ref}'",
            )
        result.backup_ref = backup_ref

        self.console.print(f"[blue]{EMOJI_UPDATE} Checking out {latest_info.short}...[/blue]")
        try:
            repo.checkout(latest)
            head = repo.rev_parse("HEAD")
        except GitCommandError as e:
            raise CheckoutError(component.name, str(e), str(path))
        if head != latest:
            raise CheckoutError(
                component.name,
                f"HEAD is {head[:7]} after checkout, expected {latest[:7]}",
                str(path),
            )

        # From here on the component has moved; any failure is a partial update
        message = f"Update {component.name} to {latest_info}"
        try:
            parent.add(component.path)
            staged = parent.staged_revision(component.path)
            if staged != latest:
                raise CommitError(
                    component.name,
                    f"staged pin is {(staged or 'missing')[:7]}, expected {latest[:7]}",
                    str(path), current, latest,
                )
            parent.commit(message, [component.path])
        except GitCommandError as e:
            raise CommitError(component.name, str(e), str(path), current, latest)

        self.console.print(
            f"[green]{MSG_UPDATED.format(component=component.name, revision=latest_info.short)}[/green]"
        )
        logger.info("Committed '%s'; backup branch %s", message, backup_ref)

        component.revision = latest
        result.status = OperationStatus.SUCCESS
        result.commit_message = message
        result.duration = self.clock.monotonic() - started
        return result

    def update_all(self, components: List[TrackedComponent], force: bool = False) -> List[UpdateResult]:
        """Update components in order, stopping at the first failure

        After at least one component moved, an interactive run is offered a
        smoke test of the whole stack.

        Args:
            components: Components to update
            force: Skip all prompts (and the smoke test)

        Returns:
            Per-component results
        """
        results = [self.update_component(component, force=force) for component in components]

        if not force and any(r.updated for r in results):
            if self._ask(PROMPT_CONFIRM_SMOKE_TEST):
                self.smoke_test()

        return results

    def smoke_test(self) -> Optional[bool]:
        """Rebuild and start the stack, probe it once, then tear it down

        The outcome is advisory: a failing probe is reported but does not
        undo the committed update.

        Returns:
            Probe outcome, or None when no primary target is configured
        """
        if self.orchestrator is None:
            raise ValueError("smoke test requires an orchestrator")

        self.console.print(f"\n[blue]{EMOJI_TEST} Running deployment test...[/blue]")
        passed = None
        self.orchestrator.up(build=True)
        try:
            self.clock.sleep(self.settings.smoke_test_delay)

            if self.health is None or self.primary_target is None:
                self.console.print(f"[yellow]{EMOJI_WARNING} No HTTP health target configured, skipping probe[/yellow]")
            else:
                passed = self.health.check_target(self.primary_target)
                if passed:
                    self.console.print(f"[green]{EMOJI_SUCCESS} Health check passed![/green]")
                else:
                    self.console.print(
                        f"[yellow]{EMOJI_WARNING} Health check failed - please verify manually[/yellow]"
                    )
        finally:
            self.orchestrator.down()

        return passed
