"""Statistics command."""

import click

from devtodo.cli.helpers import get_storage_manager, load_tasks, print_table
from devtodo.services.export_service import ExportService
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import StatsService


@click.command()
@click.pass_context
def stats(ctx):
    """Show completion streak and task counts"""
    storage_manager = get_storage_manager()
    service = StatsService(storage_manager)

    try:
        streak = service.calculate_streak()
        service.load_stats()
        info = storage_manager.get_storage_info()
    except ServiceError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    tasks = load_tasks(storage_manager)
    counts = ExportService.get_export_stats(tasks)

    click.echo(f"🔥 Streak: {streak} day(s)")
    click.echo(f"✅ Completed (lifetime): {service.total_completed}")
    click.echo(f"📋 Tasks: {info.task_count} ({info.completed_count} completed)")
    if info.last_sync:
        click.echo(f"🕒 Last change: {info.last_sync[:19].replace('T', ' ')}")

    for title, breakdown in (("STATUS", counts.by_status),
                             ("CATEGORY", counts.by_category),
                             ("PRIORITY", counts.by_priority)):
        if breakdown:
            click.echo("")
            print_table([title, "TASKS"], sorted(breakdown.items()))
