"""Backup and restore commands"""

import click

from ..decorators import require_stack
from ..utils.output import console, format_backup_result
from ...constants import Command
from ...services import BackupService


@click.command()
@click.pass_context
@require_stack(Command.BACKUP)
def backup(ctx):
    """Snapshot configuration, data volumes and component revisions

    Snapshots are written to backups/backup-<timestamp>/ and are never
    deleted by this tool.
    """
    snapshot = ctx.obj.backup_service().create()
    console.print(format_backup_result(snapshot))


@click.command()
@click.argument('snapshot', required=False)
def restore(snapshot):
    """Restore a snapshot (not available yet)"""
    BackupService.restore(snapshot)
