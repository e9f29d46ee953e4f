"""Export task collections to JSON, Markdown, plain text or GitHub issues."""
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from ..core.constants import (
    EXPORT_DATE_FORMAT,
    EXPORT_EXTENSIONS,
    EXPORT_FILENAME_PREFIX,
    EXPORT_FORMAT_VERSION,
    TASK_STATUSES,
)
from ..core.search_filter import DateRange
from ..models.task import Task, TaskCategory, TaskStatus
from .exceptions import UnsupportedFormatError

logger = logging.getLogger(__name__)

SECTION_WIDTH = 50


class ExportFormat(str, Enum):
    JSON = "json"
    MARKDOWN = "markdown"
    TEXT = "text"
    GITHUB = "github"


@dataclass
class ExportOptions:
    """What to export and how.

    Completed and archived tasks are excluded unless explicitly included.
    """
    format: Union[ExportFormat, str]
    tasks: Sequence[Task]
    date_range: Optional[DateRange] = None  # applied to created_at
    categories: List[TaskCategory] = field(default_factory=list)
    include_completed: bool = False
    include_archived: bool = False


@dataclass
class ExportStats:
    total: int
    by_status: Dict[str, int]
    by_category: Dict[str, int]
    by_priority: Dict[str, int]


def _format_date(value: datetime) -> str:
    return value.strftime(EXPORT_DATE_FORMAT)


def _group_by_status(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """Group tasks by status in the fixed status order, dropping empty groups."""
    groups: Dict[str, List[Task]] = {status: [] for status in TASK_STATUSES}
    for task in tasks:
        groups[task.status.value].append(task)
    return {status: grouped for status, grouped in groups.items() if grouped}


class ExportService:
    """Serializes tasks into shareable text formats."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        """Initialize export service.

        Args:
            clock: Source of the export timestamp
        """
        self._clock = clock

    def export(self, options: ExportOptions) -> str:
        """Export tasks in the requested format.

        Raises:
            UnsupportedFormatError: If ``options.format`` is not a known format
        """
        try:
            export_format = ExportFormat(options.format)
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported export format: {options.format}") from None

        tasks = self.filter_tasks(options.tasks, options)
        renderers = {
            ExportFormat.JSON: self.export_to_json,
            ExportFormat.MARKDOWN: self.export_to_markdown,
            ExportFormat.TEXT: self.export_to_text,
            ExportFormat.GITHUB: self.export_to_github_issues,
        }
        logger.info("Exporting %d task(s) as %s", len(tasks), export_format.value)
        return renderers[export_format](tasks)

    @staticmethod
    def filter_tasks(tasks: Sequence[Task], options: ExportOptions) -> List[Task]:
        """Apply the export options' date range, category and status filters."""
        filtered = list(tasks)

        if options.date_range is not None:
            filtered = [task for task in filtered if task.created_at in options.date_range]

        if options.categories:
            filtered = [task for task in filtered if task.category in options.categories]

        if not options.include_completed:
            filtered = [task for task in filtered if task.status != TaskStatus.COMPLETED]

        if not options.include_archived:
            filtered = [task for task in filtered if task.status != TaskStatus.ARCHIVED]

        return filtered

    def export_to_json(self, tasks: Sequence[Task]) -> str:
        payload = {
            "version": EXPORT_FORMAT_VERSION,
            "exportDate": self._clock().isoformat(),
            "taskCount": len(tasks),
            "tasks": [task.to_json_dict() for task in tasks],
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)

    def export_to_markdown(self, tasks: Sequence[Task]) -> str:
        lines = [
            "# Todo App Export",
            "",
            f"**Exported:** {_format_date(self._clock())}",
            f"**Total Tasks:** {len(tasks)}",
            "",
            "---",
            "",
        ]

        for status, grouped in _group_by_status(tasks).items():
            lines += [f"## {status.capitalize()} ({len(grouped)})", ""]

            for task in grouped:
                checkbox = "[x]" if task.is_completed else "[ ]"
                lines += [f"### {checkbox} {task.title}", ""]

                if task.description:
                    lines += [task.description, ""]

                lines.append("**Details:**")
                lines.append(f"- Priority: `{task.priority.value}`")
                lines.append(f"- Category: `{task.category.value}`")
                if task.due_date:
                    lines.append(f"- Due Date: {_format_date(task.due_date)}")
                if task.estimated_time:
                    lines.append(f"- Estimated Time: {task.estimated_time} minutes")
                if task.pomodoro_count:
                    lines.append(f"- Pomodoros: 🍅 {task.pomodoro_count}")
                if task.tags:
                    lines.append(f"- Tags: {', '.join(f'#{tag}' for tag in task.tags)}")

                if task.subtasks:
                    lines += ["", "**Subtasks:**", ""]
                    for subtask in task.subtasks:
                        lines.append(f"- {'[x]' if subtask.completed else '[ ]'} {subtask.title}")

                if task.code_snippet:
                    snippet = task.code_snippet
                    lines += [
                        "",
                        f"**Code Snippet ({snippet.language}):**",
                        "",
                        f"```{snippet.language}",
                        snippet.code,
                        "```",
                    ]

                lines += ["", "---", ""]

        return "\n".join(lines) + "\n"

    def export_to_text(self, tasks: Sequence[Task]) -> str:
        lines = [
            "TODO APP EXPORT",
            "=" * SECTION_WIDTH,
            "",
            f"Exported: {self._clock().strftime('%Y-%m-%d %H:%M:%S')}",
            f"Total Tasks: {len(tasks)}",
            "",
        ]

        for status, grouped in _group_by_status(tasks).items():
            lines += ["", f"{status.upper()} TASKS ({len(grouped)})", "-" * SECTION_WIDTH, ""]

            for task in grouped:
                checkbox = "[✓]" if task.is_completed else "[ ]"
                lines.append(f"{checkbox} {task.title}")

                if task.description:
                    lines.append(f"    {task.description}")

                lines.append(
                    f"    Priority: {task.priority.value.upper()} | Category: {task.category.value}"
                )
                if task.due_date:
                    lines.append(f"    Due: {_format_date(task.due_date)}")
                if task.tags:
                    lines.append(f"    Tags: {' '.join(f'#{tag}' for tag in task.tags)}")
                if task.pomodoro_count:
                    lines.append(f"    Pomodoros: {task.pomodoro_count} 🍅")
                if task.subtasks:
                    done = sum(1 for subtask in task.subtasks if subtask.completed)
                    lines.append(f"    Subtasks: {done}/{len(task.subtasks)} complete")

                lines.append("")

        return "\n".join(lines) + "\n"

    def export_to_github_issues(self, tasks: Sequence[Task]) -> str:
        """One issue block per open task; completed and archived tasks are skipped."""
        lines = [
            "# GitHub Issues Export",
            "",
            "Copy and paste each section below as a new GitHub issue.",
            "",
            "---",
            "",
        ]

        for task in tasks:
            if task.status in (TaskStatus.COMPLETED, TaskStatus.ARCHIVED):
                continue

            lines += [f"## Issue: {task.title}", ""]

            labels = [task.priority.value, task.category.value]
            if task.status == TaskStatus.IN_PROGRESS:
                labels.append(TaskStatus.IN_PROGRESS.value)
            labels.extend(task.tags)
            lines += [f"**Labels:** {', '.join(f'`{label}`' for label in labels)}", ""]

            if task.description:
                lines += ["### Description", "", task.description, ""]

            if task.subtasks:
                lines += ["### Tasks", ""]
                for subtask in task.subtasks:
                    lines.append(f"- {'[x]' if subtask.completed else '[ ]'} {subtask.title}")
                lines.append("")

            if task.code_snippet:
                snippet = task.code_snippet
                lines += [
                    "### Code Reference",
                    "",
                    f"```{snippet.language}",
                    snippet.code,
                    "```",
                    "",
                ]

            lines += ["### Metadata", ""]
            if task.estimated_time:
                lines.append(f"- Estimated Time: {task.estimated_time} minutes")
            if task.due_date:
                lines.append(f"- Due Date: {_format_date(task.due_date)}")
            if task.pomodoro_count:
                lines.append(f"- Pomodoros Completed: {task.pomodoro_count}")

            lines += ["", "---", ""]

        return "\n".join(lines) + "\n"

    @staticmethod
    def get_export_filename(export_format: Union[ExportFormat, str],
                            today: Optional[date] = None) -> str:
        """Build ``todo-export-YYYY-MM-DD.<ext>`` for a format."""
        export_format = ExportFormat(export_format)
        stamp = (today or date.today()).isoformat()
        return f"{EXPORT_FILENAME_PREFIX}-{stamp}.{EXPORT_EXTENSIONS[export_format.value]}"

    @staticmethod
    def get_export_stats(tasks: Sequence[Task]) -> ExportStats:
        """Count tasks by status, category and priority."""
        return ExportStats(
            total=len(tasks),
            by_status=dict(Counter(task.status.value for task in tasks)),
            by_category=dict(Counter(task.category.value for task in tasks)),
            by_priority=dict(Counter(task.priority.value for task in tasks)),
        )
