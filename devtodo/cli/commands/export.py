"""Export tasks command."""

from pathlib import Path

import click
from rich.console import Console

from devtodo.cli.helpers import get_storage_manager, load_tasks
from devtodo.core.constants import TASK_CATEGORIES
from devtodo.models.task import TaskCategory
from devtodo.services.export_service import ExportFormat, ExportOptions, ExportService
from devtodo.services.exceptions import ServiceError

from .task.list_tasks import DATE_TYPE, build_date_range


@click.command()
@click.option('--format', '-f', 'export_format', type=click.Choice([f.value for f in ExportFormat]),
              default=ExportFormat.JSON.value, show_default=True, help='Export format')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write to this file instead of stdout')
@click.option('--save', is_flag=True, help='Write to todo-export-<date>.<ext> in the current directory')
@click.option('--include-completed', is_flag=True, help='Include completed tasks')
@click.option('--include-archived', is_flag=True, help='Include archived tasks')
@click.option('--category', '-c', 'categories', multiple=True, type=click.Choice(TASK_CATEGORIES),
              help='Only export these categories (repeatable)')
@click.option('--from', 'created_from', type=DATE_TYPE, help='Only tasks created on or after this date')
@click.option('--to', 'created_to', type=DATE_TYPE, help='Only tasks created on or before this date')
@click.pass_context
def export(ctx, export_format, output, save, include_completed, include_archived,
           categories, created_from, created_to):
    """Export tasks as JSON, Markdown, plain text or GitHub issues"""
    console = Console(stderr=True)
    tasks = load_tasks(get_storage_manager())
    service = ExportService()

    options = ExportOptions(
        format=export_format,
        tasks=tasks,
        date_range=build_date_range(created_from, created_to),
        categories=[TaskCategory(c) for c in categories],
        include_completed=include_completed,
        include_archived=include_archived,
    )

    try:
        content = service.export(options)
    except ServiceError as e:
        console.print(f"[red]Error exporting tasks: {e}[/red]")
        ctx.exit(1)

    if output is None and save:
        output = Path.cwd() / ExportService.get_export_filename(export_format)

    if output is None:
        click.echo(content, nl=False)
        return

    output.write_text(content, encoding='utf-8')
    exported = len(ExportService.filter_tasks(tasks, options))
    console.print(f"[green]Exported {exported} task(s) to {output}[/green]")
