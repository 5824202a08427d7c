"""Point-in-time snapshots of the deployment"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console

from ..api.exceptions import BackupError, NotImplementedError, OrchestrationError
from ..constants import (
    BACKUP_NAME_PATTERN,
    DEFAULT_BACKUP_DIR,
    EMOJI_DISK,
    EMOJI_WARNING,
    MSG_BACKUP_CREATED,
    MSG_RESTORE_MISSING,
    REVISIONS_MANIFEST_FILE,
)
from ..models.component import TrackedComponent
from ..models.config import DeploymentConfig
from ..models.result import BackupSnapshot, SkippedItem
from ..runtime.base import ContainerRuntime
from ..utils.clock import Clock
from ..utils.file_utils import copy_into
from ..utils.git_utils import GitCommandError, GitRepository

logger = logging.getLogger(__name__)

NOT_CHECKED_OUT = "not checked out"


class BackupService:
    """Creates timestamped snapshots of configuration, data and revisions

    A snapshot directory is created exclusively; two runs in the same
    second never write into one directory. Artifacts that are absent on
    the host are recorded as skipped rather than silently dropped.
    """

    def __init__(self,
                 deployment: DeploymentConfig,
                 runtime: ContainerRuntime,
                 components: List[TrackedComponent],
                 clock: Optional[Clock] = None,
                 repo_factory: Callable[[Path], GitRepository] = GitRepository,
                 console: Optional[Console] = None):
        self.deployment = deployment
        self.runtime = runtime
        self.components = list(components)
        self.clock = clock or Clock()
        self.repo_factory = repo_factory
        self.console = console or Console()

    def create(self) -> BackupSnapshot:
        """Create a snapshot

        Returns:
            BackupSnapshot describing every artifact written or skipped

        Raises:
            BackupError: If the snapshot directory exists or a copy fails
        """
        snapshot_id = BACKUP_NAME_PATTERN.format(timestamp=self.clock.timestamp())
        directory = self.deployment.backups_dir / snapshot_id

        self.console.print(f"[blue]{EMOJI_DISK} Creating backup in {directory}...[/blue]")

        self.deployment.backups_dir.mkdir(parents=True, exist_ok=True)
        try:
            directory.mkdir(exist_ok=False)
        except FileExistsError:
            raise BackupError(f"Snapshot directory {directory} already exists")

        snapshot = BackupSnapshot(snapshot_id=snapshot_id, directory=directory)

        self._copy_files(snapshot)
        self._archive_volumes(snapshot)
        self._write_revisions(snapshot)

        for item in snapshot.skipped:
            self.console.print(f"[yellow]{EMOJI_WARNING} Skipped {item.name}: {item.reason}[/yellow]")
        self.console.print(f"[green]{MSG_BACKUP_CREATED.format(path=directory)}[/green]")
        return snapshot

    def _copy_files(self, snapshot: BackupSnapshot) -> None:
        compose_file = self.deployment.compose_file
        try:
            snapshot.copied_files.append(copy_into(compose_file, snapshot.directory))
        except OSError as e:
            raise BackupError(f"Failed to copy {compose_file.name}: {e}")

        env_file = self.deployment.env_file
        try:
            snapshot.copied_files.append(copy_into(env_file, snapshot.directory))
        except FileNotFoundError:
            snapshot.skipped.append(SkippedItem(env_file.name, "file not found"))
        except OSError as e:
            raise BackupError(f"Failed to copy {env_file.name}: {e}")

    def _archive_volumes(self, snapshot: BackupSnapshot) -> None:
        image = self.deployment.settings.backup.helper_image

        for volume in self.deployment.settings.backup.volumes:
            source = (self.deployment.root / volume.path).resolve()
            if not source.is_dir():
                snapshot.skipped.append(SkippedItem(volume.name, f"{volume.path} not found"))
                continue

            archive = snapshot.directory / volume.archive_name
            logger.info("Archiving %s into %s", source, archive)
            try:
                self.runtime.run_ephemeral(
                    image,
                    {source: "/source", snapshot.directory.resolve(): "/backup"},
                    ["tar", "czf", f"/backup/{volume.archive_name}", "-C", "/source", "."],
                )
            except OrchestrationError as e:
                raise BackupError(f"Failed to archive {volume.name} data: {e}")
            snapshot.archives.append(archive)

    def _revision_of(self, component: TrackedComponent) -> Optional[str]:
        repo = self.repo_factory(component.resolve(self.deployment.root))
        if not repo.exists():
            return None
        try:
            return repo.rev_parse("HEAD")
        except GitCommandError as e:
            logger.warning("Cannot read revision of %s: %s", component.name, e)
            return None

    def _write_revisions(self, snapshot: BackupSnapshot) -> None:
        lines = []
        for component in self.components:
            component.revision = self._revision_of(component)
            snapshot.revisions[component.name] = component.revision
            lines.append(f"{component.name} commit: {component.revision or NOT_CHECKED_OUT}")

        manifest = snapshot.directory / REVISIONS_MANIFEST_FILE
        manifest.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        snapshot.manifest_path = manifest

    @staticmethod
    def restore(snapshot_id: Optional[str] = None) -> BackupSnapshot:
        """Restore a snapshot (not available)

        Needs no deployment so that it fails the same way everywhere.

        Raises:
            NotImplementedError: Always
        """
        raise NotImplementedError(
            MSG_RESTORE_MISSING,
            hint=f"Copy files back by hand from a snapshot under {DEFAULT_BACKUP_DIR}/",
        )
