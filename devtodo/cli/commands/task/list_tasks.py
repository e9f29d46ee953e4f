"""List tasks command."""

from datetime import datetime, time

import click

from devtodo.cli.helpers import format_task_table, get_storage_manager
from devtodo.core.constants import TASK_CATEGORIES, TASK_PRIORITIES, TASK_STATUSES
from devtodo.core.search_filter import DateRange, SortDirection, SortOption, TaskFilters
from devtodo.models.task import TaskCategory, TaskPriority, TaskStatus
from devtodo.services.task_service import TaskService

DATE_TYPE = click.DateTime(formats=['%Y-%m-%d'])


def build_date_range(start, end):
    """Inclusive range covering whole days; either end may be open."""
    if start is None and end is None:
        return None
    return DateRange(
        start=start or datetime.min,
        end=datetime.combine(end.date(), time.max) if end else datetime.max,
    )


@click.command(name='list')
@click.option('--search', '-q', 'query', default='', help='Search title, description, tags and code')
@click.option('--regex', is_flag=True, help='Treat the search query as a regular expression')
@click.option('--category', '-c', 'categories', multiple=True, type=click.Choice(TASK_CATEGORIES),
              help='Filter by category (repeatable)')
@click.option('--priority', '-p', 'priorities', multiple=True, type=click.Choice(TASK_PRIORITIES),
              help='Filter by priority (repeatable)')
@click.option('--status', '-s', 'statuses', multiple=True, type=click.Choice(TASK_STATUSES),
              help='Filter by status (repeatable)')
@click.option('--tag', '-t', 'tags', multiple=True, help='Filter by tag (repeatable)')
@click.option('--due-from', type=DATE_TYPE, help='Only tasks due on or after this date')
@click.option('--due-to', type=DATE_TYPE, help='Only tasks due on or before this date')
@click.option('--sort', 'sort_by', type=click.Choice([o.value for o in SortOption]),
              default=SortOption.DATE.value, show_default=True, help='Sort key')
@click.option('--desc', is_flag=True, help='Sort in descending order')
@click.pass_context
def list_tasks(ctx, query, regex, categories, priorities, statuses, tags,
               due_from, due_to, sort_by, desc):
    """List tasks with optional search, filters and sorting"""
    service = TaskService(get_storage_manager())
    service.load_tasks()
    if service.error:
        click.echo(f"Error: {service.error}", err=True)
        ctx.exit(1)

    filters = TaskFilters(
        categories=[TaskCategory(c) for c in categories],
        priorities=[TaskPriority(p) for p in priorities],
        statuses=[TaskStatus(s) for s in statuses],
        tags=list(tags),
        date_range=build_date_range(due_from, due_to),
    )

    tasks = service.query(
        query,
        use_regex=regex,
        filters=filters,
        sort_by=SortOption(sort_by),
        direction=SortDirection.DESC if desc else SortDirection.ASC,
    )

    if not tasks:
        click.echo("No tasks found")
        return

    click.echo(format_task_table(tasks))
    click.echo(f"\n{len(tasks)} of {len(service.tasks)} task(s)")
