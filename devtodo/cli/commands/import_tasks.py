"""Import tasks command."""

import sys
from pathlib import Path

import click
import questionary
from rich.console import Console
from rich.markup import escape

from devtodo.cli.helpers import get_storage_manager, load_tasks
from devtodo.services.import_service import ImportFormat, ImportService
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import TaskService


def confirm_duplicates(count: int) -> bool:
    """Ask whether duplicates should be imported; never asks without a terminal."""
    if not sys.stdin.isatty():
        return False
    return bool(questionary.confirm(
        f"{count} task(s) already exist. Import them anyway?",
        default=False,
    ).ask())


@click.command(name='import')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'import_format', type=click.Choice([f.value for f in ImportFormat]),
              help='Input format (detected from the content if omitted)')
@click.option('--include-duplicates', is_flag=True,
              help='Also import tasks that match existing ones')
@click.pass_context
def import_tasks(ctx, file, import_format, include_duplicates):
    """Import tasks from a JSON or Markdown file"""
    console = Console()
    importer = ImportService()
    try:
        content = file.read_text(encoding='utf-8')
    except UnicodeDecodeError:
        console.print(f"[red]Not a UTF-8 text file: {escape(str(file))}[/red]")
        ctx.exit(1)

    if import_format is None:
        validation = importer.validate_content(content)
        if not validation.valid:
            console.print(f"[red]{validation.error}[/red]")
            ctx.exit(1)
        import_format = importer.detect_format(content)

    storage_manager = get_storage_manager()
    service = TaskService(storage_manager)
    result = importer.import_tasks(content, import_format, load_tasks(storage_manager))

    for error in result.errors:
        console.print(f"[yellow]⚠ {escape(error)}[/yellow]")

    to_add = list(result.tasks)
    if result.duplicates:
        if include_duplicates or confirm_duplicates(len(result.duplicates)):
            to_add.extend(result.duplicates)
        else:
            console.print(f"Skipped {len(result.duplicates)} duplicate task(s)")

    if not to_add:
        if result.stats.duplicates:
            console.print("Nothing new to import")
            return
        console.print("[red]No tasks imported[/red]")
        ctx.exit(1)

    try:
        added = service.import_tasks(to_add)
    except ServiceError as e:
        console.print(f"[red]Error importing tasks: {e}[/red]")
        ctx.exit(1)

    console.print(
        f"[green]Imported {len(added)} task(s)[/green] "
        f"(duplicates: {result.stats.duplicates}, skipped: {result.stats.skipped})"
    )
