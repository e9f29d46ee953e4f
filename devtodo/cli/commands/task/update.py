"""Update task command."""

import click
from rich.console import Console
from rich.markup import escape

from devtodo.cli.helpers import get_storage_manager, load_tasks, resolve_task_id
from devtodo.core.constants import SHORT_ID_LENGTH, TASK_CATEGORIES, TASK_PRIORITIES, TASK_STATUSES
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import TaskService


@click.command()
@click.argument('task_id')
@click.option('--title', help='New title')
@click.option('--description', '-d', help='New description (empty string clears it)')
@click.option('--category', '-c', type=click.Choice(TASK_CATEGORIES), help='New category')
@click.option('--priority', '-p', type=click.Choice(TASK_PRIORITIES), help='New priority')
@click.option('--status', '-s', type=click.Choice(TASK_STATUSES), help='New status')
@click.option('--tag', '-t', 'tags', multiple=True, help='Replace tags (repeatable)')
@click.option('--due', type=click.DateTime(formats=['%Y-%m-%d', '%Y-%m-%d %H:%M']),
              help='New due date (YYYY-MM-DD)')
@click.option('--clear-due', is_flag=True, help='Remove the due date')
@click.option('--estimate', type=click.IntRange(min=1), help='Estimated time in minutes')
@click.pass_context
def update(ctx, task_id, title, description, category, priority, status, tags, due,
           clear_due, estimate):
    """Update fields of an existing task"""
    console = Console()
    storage_manager = get_storage_manager()
    service = TaskService(storage_manager)
    task = resolve_task_id(load_tasks(storage_manager), task_id)

    updates = {}
    if title is not None:
        updates['title'] = title
    if description is not None:
        updates['description'] = description or None
    if category:
        updates['category'] = category
    if priority:
        updates['priority'] = priority
    if status:
        updates['status'] = status
    if tags:
        updates['tags'] = list(tags)
    if due:
        updates['due_date'] = due
    elif clear_due:
        updates['due_date'] = None
    if estimate:
        updates['estimated_time'] = estimate

    if not updates:
        console.print("[yellow]Nothing to update[/yellow]")
        return

    try:
        updated = service.update_task(task.id, updates)
    except ServiceError as e:
        console.print(f"[red]Error updating task: {e}[/red]")
        ctx.exit(1)

    console.print(f"[green]Updated task {updated.id[:SHORT_ID_LENGTH]}: "
                  f"{escape(updated.title)}[/green]")
