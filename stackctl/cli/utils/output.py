# stackctl/cli/utils/output.py
"""Output formatting utilities"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...api.exceptions import StackToolError
from ...constants import (
    EMOJI_DISK,
    EMOJI_ERROR,
    EMOJI_HEALTH,
    EMOJI_NETWORK,
    EMOJI_STATUS,
    EMOJI_SUCCESS,
    EMOJI_WARNING,
)
from ...models.result import BackupSnapshot, HealthReport, StackStatus, UpdateResult
from ...utils.formatting import format_duration, short_revision

console = Console()


def print_error(message: str, hint: Optional[str] = None, out: Optional[Console] = None) -> None:
    out = out or console
    out.print(f"[red]{EMOJI_ERROR} {escape(message)}[/red]")
    if hint:
        out.print(f"[dim]Hint: {hint}[/dim]")


def print_stack_error(error: StackToolError, out: Optional[Console] = None) -> None:
    """Print a tool error as ``Error [code]: message`` followed by its hint"""
    out = out or console
    code = f" [{error.error_code}]" if error.error_code else ""
    out.print(f"[red]{EMOJI_ERROR} Error{escape(code)}: {escape(str(error))}[/red]")
    if error.hint:
        out.print(f"[dim]Hint: {escape(error.hint)}[/dim]")


def print_warning(message: str, out: Optional[Console] = None) -> None:
    (out or console).print(f"[yellow]{EMOJI_WARNING} {message}[/yellow]")


def print_success(message: str, out: Optional[Console] = None) -> None:
    (out or console).print(f"[green]{EMOJI_SUCCESS} {message}[/green]")


def format_status(status: StackStatus, network_filter: str) -> List:
    """Build the renderables of the status view"""
    table = Table(title=f"{EMOJI_STATUS} Service Status", box=box.ROUNDED)
    table.add_column("Service", style="cyan")
    table.add_column("State")

    for service in status.services:
        state = "[green]running[/green]" if service.running else "[red]stopped[/red]"
        table.add_row(service.name, state)

    if not status.services:
        table.add_row("[dim]none declared[/dim]", "")

    disk = Panel(status.disk_usage.rstrip() or "No data", title=f"{EMOJI_DISK} Disk Usage",
                 border_style="blue")

    if status.networks:
        networks = "\n".join(f"  {name}" for name in status.networks)
    else:
        networks = f"  No {network_filter} networks found"
    network_panel = Panel(networks, title=f"{EMOJI_NETWORK} Networks", border_style="blue")

    return [table, disk, network_panel]


def format_update_results(results: List[UpdateResult]) -> Table:
    """Create a table summarizing an update run"""
    table = Table(title="Update Summary", box=box.ROUNDED)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Commits", justify="right")
    table.add_column("Backup Branch")
    table.add_column("Time", justify="right")

    colors = {
        "success": "green",
        "up_to_date": "green",
        "cancelled": "yellow",
    }

    for result in results:
        color = colors.get(result.status.value, "white")
        table.add_row(
            result.component,
            f"[{color}]{result.status.value.replace('_', ' ')}[/{color}]",
            short_revision(result.previous) or "-",
            short_revision(result.latest) or "-",
            str(result.commit_count) if result.commit_count else "-",
            result.backup_ref or "-",
            format_duration(result.duration),
        )

    return table


def format_next_steps(results: List[UpdateResult]) -> Optional[Panel]:
    """Recovery and follow-up instructions after components moved"""
    updated = [r for r in results if r.updated]
    if not updated:
        return None

    lines = [
        "1. Test the deployment: stackctl build",
        "2. If everything works: git push",
    ]
    for number, result in enumerate(updated, start=3):
        lines.append(f"{number}. If {result.component} misbehaves: git checkout {result.backup_ref}")

    return Panel("\n".join(lines), title="Next steps", border_style="blue")


def format_backup_result(snapshot: BackupSnapshot) -> Panel:
    """Create a panel describing a snapshot"""
    lines = [f"[bold]Snapshot:[/bold] {snapshot.snapshot_id}",
             f"[bold]Directory:[/bold] {snapshot.directory}"]

    if snapshot.copied_files:
        lines.append("\n[bold]Files:[/bold]")
        lines.extend(f"  {path.name}" for path in snapshot.copied_files)

    if snapshot.archives:
        lines.append("\n[bold]Data archives:[/bold]")
        lines.extend(f"  {path.name}" for path in snapshot.archives)

    if snapshot.skipped:
        lines.append("\n[bold yellow]Skipped:[/bold yellow]")
        lines.extend(f"  {item.name}: {item.reason}" for item in snapshot.skipped)

    if snapshot.revisions:
        lines.append("\n[bold]Component revisions:[/bold]")
        for name, revision in snapshot.revisions.items():
            lines.append(f"  {name}: {short_revision(revision) if revision else 'not checked out'}")

    return Panel("\n".join(lines), title=f"{EMOJI_DISK} Backup", border_style="green")


def format_health_report(report: HealthReport) -> Table:
    """Create a table of per-target probe results"""
    table = Table(title=f"{EMOJI_HEALTH} Health Check", box=box.ROUNDED)
    table.add_column("Target", style="cyan")
    table.add_column("Status")
    table.add_column("Required")
    table.add_column("Detail", style="dim")

    for result in report.results:
        if result.healthy:
            status = f"[green]{EMOJI_SUCCESS} healthy[/green]"
        elif result.required:
            status = f"[red]{EMOJI_ERROR} unhealthy[/red]"
        else:
            status = f"[yellow]{EMOJI_WARNING} unhealthy[/yellow]"
        table.add_row(result.name, status, "yes" if result.required else "no", result.detail)

    return table
