"""Health check command"""

import click

from ..decorators import require_stack
from ..utils.output import console, format_health_report, print_success, print_warning
from ...constants import Command, EMOJI_HEALTH


@click.command()
@click.pass_context
@require_stack(Command.HEALTH)
def health(ctx):
    """Probe the stack's health endpoints

    The report is advisory: failing targets are shown but the command
    still succeeds.
    """
    stack = ctx.obj
    console.print(f"[blue]{EMOJI_HEALTH} Checking service health...[/blue]")
    console.print(stack.orchestrator.ps().rstrip(), markup=False, highlight=False)

    report = stack.health_service().check()
    console.print(format_health_report(report))

    if report.all_healthy:
        print_success("All targets healthy")
    else:
        print_warning(f"{len(report.failing)} of {len(report.results)} targets failing")
