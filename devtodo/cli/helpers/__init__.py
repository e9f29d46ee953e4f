"""CLI Helper Functions for devtodo.

This module provides reusable helper functions for CLI commands to reduce
code duplication and standardize behavior across all commands.

The helpers provide:
- Data directory resolution
- Storage setup with consistent error handling
- Task ID resolution with short ID support
- Consistent table formatting for output
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

import click
from tabulate import tabulate

from devtodo.core.constants import DATA_DIR_NAME, MAX_TITLE_DISPLAY, SHORT_ID_LENGTH
from devtodo.core.kv_store import FileKeyValueStore
from devtodo.core.task_storage import TaskStorageManager
from devtodo.models.task import Task, TaskPriority, TaskStatus
from devtodo.services.exceptions import StorageError


STATUS_COLORS = {
    TaskStatus.PENDING: 'yellow',
    TaskStatus.IN_PROGRESS: 'cyan',
    TaskStatus.COMPLETED: 'green',
    TaskStatus.ARCHIVED: 'white',
}

PRIORITY_COLORS = {
    TaskPriority.HIGH: 'red',
    TaskPriority.MEDIUM: 'yellow',
    TaskPriority.LOW: 'blue',
}


def get_default_data_dir() -> Path:
    """Data directory used when neither --data-dir nor DEVTODO_HOME is given."""
    return Path.home() / DATA_DIR_NAME


def get_data_dir() -> Path:
    """Get the data directory chosen on the root command.

    Returns:
        The resolved data directory path
    """
    ctx = click.get_current_context()
    obj = ctx.find_object(dict) or {}
    return obj.get('data_dir') or get_default_data_dir()


def get_storage_manager() -> TaskStorageManager:
    """Open and initialize the task store for the current data directory.

    Note:
        Exits with error message if the store cannot be initialized.
    """
    data_dir = get_data_dir()
    try:
        storage_manager = TaskStorageManager(FileKeyValueStore(data_dir))
        storage_manager.initialize()
    except (OSError, StorageError) as e:
        click.echo(f"Error: Could not open task store in {data_dir}: {e}", err=True)
        sys.exit(1)
    return storage_manager


def load_tasks(storage_manager: TaskStorageManager) -> List[Task]:
    """Read all tasks, exiting with an error message if the store is unreadable."""
    try:
        return storage_manager.get_tasks()
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def resolve_task_id(tasks: List[Task], task_id: str) -> Task:
    """Resolve a task ID with short ID support.

    Args:
        tasks: Tasks to search
        task_id: Full or partial task ID

    Returns:
        The resolved task

    Note:
        Exits with error if task not found or multiple matches.
    """
    for task in tasks:
        if task.id == task_id:
            return task

    matching_tasks = [t for t in tasks if t.id.startswith(task_id)]
    if len(matching_tasks) == 1:
        return matching_tasks[0]

    if len(matching_tasks) > 1:
        click.echo(f"Error: Multiple tasks found starting with '{task_id}':", err=True)
        for task in matching_tasks:
            click.echo(f"  - {task.id}: {truncate(task.title)}", err=True)
    else:
        click.echo(f"Error: No task found with ID: {task_id}", err=True)
    sys.exit(1)


def truncate(text: str, max_length: int = MAX_TITLE_DISPLAY) -> str:
    if len(text) > max_length:
        return text[:max_length - 3] + "..."
    return text


def format_date(value: Optional[datetime], with_time: bool = False) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M" if with_time else "%Y-%m-%d")


def format_task_table(tasks: List[Task],
                      headers: Optional[List[str]] = None,
                      max_title_length: int = MAX_TITLE_DISPLAY) -> str:
    """Format tasks as a table with consistent styling.

    Args:
        tasks: List of tasks to display
        headers: Optional custom headers (defaults to standard headers)
        max_title_length: Maximum title length before truncation

    Returns:
        Formatted table string
    """
    if headers is None:
        headers = ["ID", "STATUS", "PRIORITY", "CATEGORY", "TITLE", "DUE", "TAGS"]

    table_data = []
    for task_item in tasks:
        status_display = click.style(
            task_item.status.value.upper(),
            fg=STATUS_COLORS.get(task_item.status, 'white')
        )
        priority_display = click.style(
            task_item.priority.value,
            fg=PRIORITY_COLORS.get(task_item.priority, 'white')
        )

        row = [
            task_item.id[:SHORT_ID_LENGTH],
            status_display,
            priority_display,
            task_item.category.value,
            truncate(task_item.title, max_title_length),
            format_date(task_item.due_date),
            ", ".join(task_item.tags),
        ]
        table_data.append(row)

    return tabulate(table_data, headers=headers, tablefmt="simple")


def print_table(headers: List[str], rows: List[List[Any]],
                tablefmt: str = "simple") -> None:
    """Print a table with project-wide defaults.

    Args:
        headers: Table headers
        rows: Table rows
        tablefmt: Table format (default: "simple")
    """
    table_str = tabulate(rows, headers=headers, tablefmt=tablefmt)
    click.echo(table_str)


__all__ = [
    'get_default_data_dir',
    'get_data_dir',
    'get_storage_manager',
    'load_tasks',
    'resolve_task_id',
    'truncate',
    'format_date',
    'format_task_table',
    'print_table',
]
