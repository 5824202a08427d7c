"""Update command implementation"""

import click

from ..decorators import require_stack
from ..utils.output import console, format_next_steps, format_update_results
from ...constants import Command


@click.command()
@click.argument('components', nargs=-1)
@click.option('--force', is_flag=True,
              help='Update without confirmation and skip the deployment test')
@click.option('--require-healthy', is_flag=True,
              help='Refuse to update unless the stack is healthy')
@click.pass_context
@require_stack(Command.UPDATE)
def update(ctx, components, force, require_healthy):
    """Update tracked components to the latest upstream revision

    Each component is fetched, compared with its upstream branch and,
    after confirmation, checked out at the new revision. The new pin is
    committed in the deployment repository, and a backup branch is left
    pointing at the previous state.

    Examples:

        # Update every tracked component
        stackctl update

        # Update one component without prompts
        stackctl update LibreChat --force
    """
    stack = ctx.obj
    selected = stack.project_manager.select_components(components)

    if not selected:
        console.print("[yellow]No tracked components found[/yellow]")
        return

    if require_healthy:
        stack.health_service().require_healthy()

    results = stack.update_service().update_all(selected, force=force)

    console.print()
    console.print(format_update_results(results))

    next_steps = format_next_steps(results)
    if next_steps:
        console.print(next_steps)
