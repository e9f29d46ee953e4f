"""Clear completed tasks command."""

import sys

import click

from devtodo.cli.helpers import get_storage_manager
from devtodo.services.exceptions import ServiceError


@click.command(name='clear-completed')
@click.confirmation_option(prompt='Remove all completed tasks?')
def clear_completed():
    """Remove all completed tasks"""
    storage_manager = get_storage_manager()

    try:
        removed = storage_manager.clear_completed_tasks()
    except ServiceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if removed:
        click.echo(f"✅ Removed {removed} completed task(s)")
    else:
        click.echo("No completed tasks to remove")
