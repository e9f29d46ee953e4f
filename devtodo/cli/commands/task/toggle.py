"""Toggle task completion command."""

import click
from rich.console import Console
from rich.markup import escape

from devtodo.cli.helpers import get_storage_manager, load_tasks, resolve_task_id
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import TaskService


@click.command()
@click.argument('task_id')
@click.pass_context
def toggle(ctx, task_id):
    """Mark a task completed, or reopen a completed task"""
    console = Console()
    storage_manager = get_storage_manager()
    task = resolve_task_id(load_tasks(storage_manager), task_id)

    try:
        updated = TaskService(storage_manager).toggle_task_complete(task.id)
    except ServiceError as e:
        console.print(f"[red]Error toggling task: {e}[/red]")
        ctx.exit(1)

    if updated.is_completed:
        console.print(f"[green]✓ Completed: {escape(updated.title)}[/green]")
    else:
        console.print(f"[yellow]Reopened: {escape(updated.title)}[/yellow]")
