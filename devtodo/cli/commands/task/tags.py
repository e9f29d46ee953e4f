"""List tags command."""

from collections import Counter

import click

from devtodo.cli.helpers import get_storage_manager, load_tasks, print_table
from devtodo.core.search_filter import get_all_tags


@click.command()
def tags():
    """List every tag in use with its task count"""
    tasks = load_tasks(get_storage_manager())
    all_tags = get_all_tags(tasks)

    if not all_tags:
        click.echo("No tags found")
        return

    counts = Counter(tag for task in tasks for tag in set(task.tags))
    print_table(["TAG", "TASKS"], [[f"#{tag}", counts[tag]] for tag in all_tags])
