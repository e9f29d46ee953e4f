"""Main CLI entry point for devtodo."""

import logging
from pathlib import Path

import click

from devtodo import __version__
from devtodo.core.constants import HOME_ENV_VAR
from devtodo.logging_setup import setup_logging

from .commands.task import task
from .commands.export import export
from .commands.import_tasks import import_tasks
from .commands.backup import backup, restore
from .commands.settings import settings
from .commands.stats import stats
from .helpers import get_default_data_dir


@click.group()
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path),
              envvar=HOME_ENV_VAR,
              help=f'Directory holding the task store (default: ~/.devtodo, env: {HOME_ENV_VAR})')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.version_option(__version__, prog_name='devtodo')
@click.pass_context
def cli(ctx, data_dir, verbose):
    """devtodo - A developer-focused task manager for the terminal"""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    ctx.ensure_object(dict)
    ctx.obj['data_dir'] = data_dir or get_default_data_dir()


# Register commands
cli.add_command(task)
cli.add_command(export)
cli.add_command(import_tasks, name='import')
cli.add_command(backup)
cli.add_command(restore)
cli.add_command(settings)
cli.add_command(stats)


if __name__ == '__main__':
    cli()
