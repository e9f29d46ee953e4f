"""Search, filter and sort helpers for task collections.

All functions are pure: the input sequence is never mutated and a new list
is returned. Task objects themselves are shared with the input.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from ..models.task import Task, TaskCategory, TaskPriority, TaskStatus, to_local_naive
from .constants import PRIORITY_ORDER, STATUS_ORDER


class SortOption(str, Enum):
    """Keys a task list can be sorted by."""
    PRIORITY = "priority"
    DATE = "date"
    STATUS = "status"
    CATEGORY = "category"
    TITLE = "title"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class DateRange:
    """Inclusive datetime range. Aware bounds are compared in local time."""
    start: datetime
    end: datetime

    def __post_init__(self):
        self.start = to_local_naive(self.start)
        self.end = to_local_naive(self.end)

    def __contains__(self, value: datetime) -> bool:
        return self.start <= value <= self.end


@dataclass
class TaskFilters:
    """Filter selection.

    Values are OR'd within a field and AND'd across fields. Empty or missing
    fields do not restrict anything.
    """
    categories: List[TaskCategory] = field(default_factory=list)
    priorities: List[TaskPriority] = field(default_factory=list)
    statuses: List[TaskStatus] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    date_range: Optional[DateRange] = None  # applied to due dates


def _text_matcher(query: str) -> Callable[[str], bool]:
    needle = query.lower()
    return lambda text: needle in text.lower()


def _matches(task: Task, match: Callable[[str], bool], include_extras: bool = True) -> bool:
    if match(task.title):
        return True
    if task.description and match(task.description):
        return True
    if not include_extras:
        return False
    if any(match(tag) for tag in task.tags):
        return True
    return task.code_snippet is not None and match(task.code_snippet.code)


def search_tasks(tasks: Sequence[Task], query: str, use_regex: bool = False) -> List[Task]:
    """Search tasks by title, description, tags and code snippet.

    Args:
        tasks: Tasks to search
        query: Plain text (case-insensitive substring) or regular expression
        use_regex: Treat ``query`` as a case-insensitive regular expression

    Returns:
        Matching tasks in input order. A blank query matches everything.
        An invalid regular expression falls back to a plain substring search
        over title and description only.
    """
    if not query.strip():
        return list(tasks)

    if use_regex:
        try:
            pattern = re.compile(query, re.IGNORECASE)
        except re.error:
            match = _text_matcher(query)
            return [task for task in tasks if _matches(task, match, include_extras=False)]
        return [task for task in tasks if _matches(task, lambda text: bool(pattern.search(text)))]

    match = _text_matcher(query)
    return [task for task in tasks if _matches(task, match)]


def filter_tasks(tasks: Sequence[Task], filters: Optional[TaskFilters]) -> List[Task]:
    """Filter tasks by category, priority, status, tags and due-date range."""
    filtered = list(tasks)
    if filters is None:
        return filtered

    if filters.categories:
        filtered = [task for task in filtered if task.category in filters.categories]

    if filters.priorities:
        filtered = [task for task in filtered if task.priority in filters.priorities]

    if filters.statuses:
        filtered = [task for task in filtered if task.status in filters.statuses]

    if filters.tags:
        wanted = set(filters.tags)
        filtered = [task for task in filtered if wanted.intersection(task.tags)]

    if filters.date_range is not None:
        date_range = filters.date_range
        filtered = [
            task for task in filtered
            if task.due_date is not None and task.due_date in date_range
        ]

    return filtered


def sort_tasks(tasks: Sequence[Task], sort_by: SortOption,
               direction: SortDirection = SortDirection.ASC) -> List[Task]:
    """Stable sort of tasks by a single key.

    Ties keep their input order in both directions. When sorting by date,
    tasks without a due date always come last.
    """
    reverse = SortDirection(direction) == SortDirection.DESC
    sort_by = SortOption(sort_by)

    if sort_by == SortOption.DATE:
        dated = [task for task in tasks if task.due_date is not None]
        undated = [task for task in tasks if task.due_date is None]
        return sorted(dated, key=lambda task: task.due_date, reverse=reverse) + undated

    if sort_by == SortOption.PRIORITY:
        key = lambda task: PRIORITY_ORDER[task.priority.value]
    elif sort_by == SortOption.STATUS:
        key = lambda task: STATUS_ORDER[task.status.value]
    elif sort_by == SortOption.CATEGORY:
        key = lambda task: task.category.value
    else:
        key = lambda task: task.title.casefold()

    return sorted(tasks, key=key, reverse=reverse)


def get_all_tags(tasks: Iterable[Task]) -> List[str]:
    """Every tag used across ``tasks``, deduplicated and sorted."""
    return sorted({tag for task in tasks for tag in task.tags})


def process_task_list(tasks: Sequence[Task], query: str, use_regex: bool,
                      filters: Optional[TaskFilters], sort_by: SortOption,
                      direction: SortDirection = SortDirection.ASC) -> List[Task]:
    """Search, then filter, then sort."""
    processed = search_tasks(tasks, query, use_regex)
    processed = filter_tasks(processed, filters)
    return sort_tasks(processed, sort_by, direction)
