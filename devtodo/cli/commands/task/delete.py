"""Delete task command."""

import sys

import click

from devtodo.cli.helpers import get_storage_manager, load_tasks, resolve_task_id
from devtodo.core.constants import SHORT_ID_LENGTH
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import TaskService


@click.command()
@click.argument('task_id')
@click.confirmation_option(prompt='Are you sure you want to delete this task?')
def delete(task_id):
    """Delete a task"""
    storage_manager = get_storage_manager()
    task = resolve_task_id(load_tasks(storage_manager), task_id)

    try:
        TaskService(storage_manager).delete_task(task.id)
    except ServiceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✅ Task {task.id[:SHORT_ID_LENGTH]} deleted successfully")
    click.echo(f"   Title: {task.title}")
