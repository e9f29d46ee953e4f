"""Show task command."""

import click

from devtodo.cli.helpers import format_date, get_storage_manager, load_tasks, resolve_task_id


@click.command()
@click.argument('task_id')
def show(task_id):
    """Show detailed information about a task"""
    storage_manager = get_storage_manager()

    # Get task (support short IDs)
    task = resolve_task_id(load_tasks(storage_manager), task_id)

    # Display task details
    click.echo("\n" + "=" * 80)
    click.echo(f"Task Details: {task.id}")
    click.echo("=" * 80)

    click.echo("\n📋 Basic Information:")
    click.echo(f"   Title: {task.title}")
    click.echo(f"   Status: {click.style(task.status.value.upper(), fg='yellow')}")
    click.echo(f"   Priority: {task.priority.value}")
    click.echo(f"   Category: {task.category.value}")
    click.echo(f"   Created: {format_date(task.created_at, with_time=True)}")

    if task.due_date:
        click.echo(f"   Due: {format_date(task.due_date, with_time=True)}")

    if task.completed_at:
        click.echo(f"   Completed: {format_date(task.completed_at, with_time=True)}")

    if task.tags:
        click.echo(f"   Tags: {', '.join(f'#{tag}' for tag in task.tags)}")

    if task.estimated_time:
        click.echo(f"   Estimated: {task.estimated_time} min")

    if task.actual_time:
        click.echo(f"   Actual: {task.actual_time} min")

    if task.pomodoro_count:
        click.echo(f"   Pomodoros: {task.pomodoro_count}")

    if task.description:
        click.echo("\n📄 Description:")
        for line in task.description.split('\n'):
            click.echo(f"   {line}")

    if task.subtasks:
        done = sum(1 for subtask in task.subtasks if subtask.completed)
        click.echo(f"\n✅ Subtasks ({done}/{len(task.subtasks)}):")
        for subtask in task.subtasks:
            click.echo(f"   {'[x]' if subtask.completed else '[ ]'} {subtask.title}")

    if task.code_snippet:
        click.echo(f"\n💻 Code ({task.code_snippet.language}):")
        for line in task.code_snippet.code.split('\n'):
            click.echo(f"   {line}")

    if task.dependencies:
        click.echo("\n🔗 Depends on:")
        for dependency in task.dependencies:
            click.echo(f"   {dependency}")

    if task.links:
        click.echo("\n🌐 Links:")
        for link in task.links:
            click.echo(f"   {link}")
