"""Add task command."""

import click
from rich.console import Console
from rich.markup import escape

from devtodo.cli.helpers import get_storage_manager
from devtodo.core.constants import SHORT_ID_LENGTH, TASK_CATEGORIES, TASK_PRIORITIES, TASK_STATUSES
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import TaskService


@click.command()
@click.argument('title')
@click.option('--description', '-d', help='Longer description of the task')
@click.option('--category', '-c', type=click.Choice(TASK_CATEGORIES), default='personal',
              show_default=True, help='Task category')
@click.option('--priority', '-p', type=click.Choice(TASK_PRIORITIES),
              help='Task priority (default: from settings)')
@click.option('--status', '-s', type=click.Choice(TASK_STATUSES), default='pending',
              show_default=True, help='Initial status')
@click.option('--tag', '-t', 'tags', multiple=True, help='Tag to attach (repeatable)')
@click.option('--due', type=click.DateTime(formats=['%Y-%m-%d', '%Y-%m-%d %H:%M']),
              help='Due date (YYYY-MM-DD)')
@click.option('--estimate', type=click.IntRange(min=1), help='Estimated time in minutes')
@click.pass_context
def add(ctx, title, description, category, priority, status, tags, due, estimate):
    """Add a new task"""
    console = Console()
    storage_manager = get_storage_manager()
    service = TaskService(storage_manager)

    try:
        if priority is None:
            priority = storage_manager.get_settings().default_priority.value

        new_task = service.add_task({
            'title': title,
            'description': description,
            'category': category,
            'priority': priority,
            'status': status,
            'tags': list(tags),
            'due_date': due,
            'estimated_time': estimate,
        })
    except ServiceError as e:
        console.print(f"[red]Error adding task: {e}[/red]")
        ctx.exit(1)

    console.print(f"[green]Added task {new_task.id[:SHORT_ID_LENGTH]}: {escape(new_task.title)}[/green]")
