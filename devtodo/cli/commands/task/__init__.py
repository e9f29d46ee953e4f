"""Task command group and sub-commands."""

import click

from .add import add
from .list_tasks import list_tasks
from .show import show
from .update import update
from .delete import delete
from .toggle import toggle
from .tags import tags
from .clear_completed import clear_completed

__all__ = [
    'task',
    'add',
    'list_tasks',
    'show',
    'update',
    'delete',
    'toggle',
    'tags',
    'clear_completed',
]


@click.group()
def task():
    """Manage tasks"""
    pass


# Register all sub-commands
task.add_command(add)
task.add_command(list_tasks)
task.add_command(show)
task.add_command(update)
task.add_command(delete)
task.add_command(toggle)
task.add_command(tags)
task.add_command(clear_completed)
