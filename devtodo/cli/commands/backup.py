"""Backup and restore commands."""

from datetime import date
from pathlib import Path

import click
from rich.console import Console

from devtodo.cli.helpers import get_storage_manager
from devtodo.services.exceptions import ServiceError


def default_backup_path() -> Path:
    return Path.cwd() / f"devtodo-backup-{date.today().isoformat()}.json"


@click.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Backup file (default: devtodo-backup-<date>.json)')
@click.pass_context
def backup(ctx, output):
    """Write tasks, settings and username to a JSON snapshot"""
    console = Console()
    storage_manager = get_storage_manager()
    output = output or default_backup_path()

    try:
        snapshot = storage_manager.export_data()
    except ServiceError as e:
        console.print(f"[red]Error creating backup: {e}[/red]")
        ctx.exit(1)

    output.write_text(snapshot, encoding='utf-8')
    info = storage_manager.get_storage_info()
    console.print(f"[green]Backed up {info.task_count} task(s) to {output}[/green]")


@click.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.confirmation_option(prompt='This replaces all current tasks. Continue?')
@click.pass_context
def restore(ctx, file):
    """Restore a snapshot written by 'devtodo backup'"""
    console = Console()
    storage_manager = get_storage_manager()

    try:
        storage_manager.import_data(file.read_text(encoding='utf-8'))
        info = storage_manager.get_storage_info()
    except ServiceError as e:
        console.print(f"[red]Error restoring backup: {e}[/red]")
        ctx.exit(1)

    console.print(f"[green]Restored {info.task_count} task(s) from {file}[/green]")
