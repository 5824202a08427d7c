"""Stack lifecycle commands"""

import click

from ..decorators import require_stack
from ..utils.output import console, format_status
from ...constants import Command, DEFAULT_LOG_TAIL, EMOJI_STATUS

service_option = click.option(
    '-s', '--service', metavar='SERVICE',
    help='Act on one service instead of the whole stack'
)


@click.command()
@service_option
@click.pass_context
@require_stack(Command.START)
def start(ctx, service):
    """Start services

    Examples:

        stackctl start

        stackctl start -s api
    """
    stack = ctx.obj
    stack.lifecycle_service().start(stack.invocation.service)


@click.command()
@service_option
@click.pass_context
@require_stack(Command.STOP)
def stop(ctx, service):
    """Stop services

    Without a service the whole stack is taken down, networks included.
    """
    stack = ctx.obj
    stack.lifecycle_service().stop(stack.invocation.service)


@click.command()
@service_option
@click.pass_context
@require_stack(Command.RESTART)
def restart(ctx, service):
    """Restart services (stop, then start)"""
    stack = ctx.obj
    stack.lifecycle_service().restart(stack.invocation.service)


@click.command()
@service_option
@click.pass_context
@require_stack(Command.BUILD)
def build(ctx, service):
    """Rebuild images and start services"""
    stack = ctx.obj
    stack.lifecycle_service().build(stack.invocation.service)


@click.command()
@service_option
@click.option('--tail', type=int, default=DEFAULT_LOG_TAIL, show_default=True,
              help='Number of lines to show before following')
@click.pass_context
@require_stack(Command.LOGS)
def logs(ctx, service, tail):
    """Follow service logs (Ctrl+C to stop)"""
    stack = ctx.obj
    stack.lifecycle_service().logs(stack.invocation.service, tail=tail)


@click.command()
@click.pass_context
@require_stack(Command.STATUS)
def status(ctx):
    """Show service state, disk usage and stack networks"""
    stack = ctx.obj
    console.print(f"[blue]{EMOJI_STATUS} {stack.deployment.settings.project_name or 'Stack'} status[/blue]")

    result = stack.lifecycle_service().status()
    for renderable in format_status(result, stack.deployment.settings.compose.network_filter):
        console.print(renderable)


@click.command()
@click.option('--force', is_flag=True,
              help='Non-interactive: prune without prompting and never touch volumes')
@click.option('--require-healthy', is_flag=True,
              help='Refuse to clean unless the stack is healthy')
@click.pass_context
@require_stack(Command.CLEAN)
def clean(ctx, force, require_healthy):
    """Remove unused containers, images and networks

    Unused volumes are only removed after an explicit confirmation, as
    they may hold data.
    """
    stack = ctx.obj
    if require_healthy:
        stack.health_service().require_healthy()

    stack.lifecycle_service().clean(confirm=stack.confirm, force=force)
