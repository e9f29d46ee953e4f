"""Stateful services wrapping TaskStorageManager with change notification."""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence, Union

from ..core.search_filter import SortDirection, SortOption, TaskFilters, process_task_list
from ..core.task_storage import TaskStorageManager
from ..models.settings import SettingsPatch, UserSettings
from ..models.task import Task, TaskCategory, TaskDraft, TaskPatch, TaskStatus

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ObservableService:
    """Keeps ``error``/``is_loading`` state and notifies subscribers on change."""

    def __init__(self, storage: TaskStorageManager):
        self.storage = storage
        self.error: Optional[str] = None
        self.is_loading = False
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _start(self) -> None:
        self.is_loading = True
        self.error = None
        self._notify()

    def _finish(self, error: Optional[Exception] = None) -> None:
        self.is_loading = False
        if error is not None:
            self.error = str(error)
        self._notify()

    def clear_error(self) -> None:
        self.error = None
        self._notify()


class TaskService(ObservableService):
    """In-memory task snapshot kept in sync with storage."""

    def __init__(self, storage: TaskStorageManager):
        super().__init__(storage)
        self.tasks: List[Task] = []

    def load_tasks(self) -> None:
        """Reload the snapshot. On failure the previous snapshot is kept."""
        self._start()
        try:
            self.tasks = self.storage.get_tasks()
        except Exception as e:
            logger.error("Failed to load tasks: %s", e)
            self._finish(e)
            return
        self._finish()

    def add_task(self, draft: Union[TaskDraft, dict]) -> Task:
        self._start()
        try:
            task = self.storage.add_task(draft)
        except Exception as e:
            self._finish(e)
            raise
        self.tasks = self.tasks + [task]
        self._finish()
        return task

    def update_task(self, task_id: str, updates: Union[TaskPatch, dict]) -> Task:
        self._start()
        try:
            updated = self.storage.update_task(task_id, updates)
        except Exception as e:
            self._finish(e)
            raise
        self._replace(updated)
        self._finish()
        return updated

    def delete_task(self, task_id: str) -> None:
        self._start()
        try:
            self.storage.delete_task(task_id)
        except Exception as e:
            self._finish(e)
            raise
        self.tasks = [task for task in self.tasks if task.id != task_id]
        self._finish()

    def toggle_task_complete(self, task_id: str) -> Task:
        """Toggle completion and bump the lifetime counter when a task gets completed."""
        self._start()
        try:
            updated = self.storage.toggle_task_complete(task_id)
            self._replace(updated)
            if updated.status == TaskStatus.COMPLETED:
                self.storage.increment_completed()
        except Exception as e:
            self._finish(e)
            raise
        self._finish()
        return updated

    def import_tasks(self, tasks: Sequence[Task]) -> List[Task]:
        """Add already-normalized tasks, giving each a fresh id and creation time."""
        added = []
        for task in tasks:
            draft = TaskDraft.model_validate({
                name: value for name, value in task
                if name in TaskDraft.model_fields
            })
            added.append(self.add_task(draft))
        logger.info("Imported %d task(s)", len(added))
        return added

    def _replace(self, updated: Task) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]

    # ---- selectors ------------------------------------------------------

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        return next((task for task in self.tasks if task.id == task_id), None)

    def get_tasks_by_status(self, status: TaskStatus) -> List[Task]:
        return [task for task in self.tasks if task.status == status]

    def get_tasks_by_category(self, category: TaskCategory) -> List[Task]:
        return [task for task in self.tasks if task.category == category]

    def get_tasks_due_today(self, today: Optional[datetime] = None) -> List[Task]:
        day = (today or datetime.now()).date()
        return [
            task for task in self.tasks
            if task.due_date is not None and task.due_date.date() == day
        ]

    def get_pending_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.PENDING)

    def get_completed_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.COMPLETED)

    def get_in_progress_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.IN_PROGRESS)

    def query(self, query: str = "", use_regex: bool = False,
              filters: Optional[TaskFilters] = None,
              sort_by: SortOption = SortOption.DATE,
              direction: SortDirection = SortDirection.ASC) -> List[Task]:
        """Search, filter and sort the current snapshot."""
        return process_task_list(self.tasks, query, use_regex, filters, sort_by, direction)


class SettingsService(ObservableService):
    """In-memory settings snapshot kept in sync with storage."""

    def __init__(self, storage: TaskStorageManager):
        super().__init__(storage)
        self.settings = UserSettings()

    def load_settings(self) -> None:
        """Reload settings. On failure the defaults are used."""
        self._start()
        try:
            self.settings = self.storage.get_settings()
        except Exception as e:
            logger.error("Failed to load settings: %s", e)
            self.settings = UserSettings()
            self._finish(e)
            return
        self._finish()

    def update_settings(self, updates: Union[SettingsPatch, dict]) -> UserSettings:
        self._start()
        try:
            self.settings = self.storage.set_settings(updates)
        except Exception as e:
            self._finish(e)
            raise
        self._finish()
        return self.settings

    def reset_settings(self) -> UserSettings:
        self._start()
        try:
            self.settings = self.storage.reset_settings()
        except Exception as e:
            self._finish(e)
            raise
        self._finish()
        return self.settings


class StatsService(ObservableService):
    """Completion streak and lifetime completed count."""

    def __init__(self, storage: TaskStorageManager,
                 clock: Callable[[], datetime] = datetime.now):
        super().__init__(storage)
        self.streak = 0
        self.total_completed = 0
        self._clock = clock

    def load_stats(self) -> None:
        self._start()
        try:
            self.streak = self.storage.get_streak()
            self.total_completed = self.storage.get_total_completed()
        except Exception as e:
            logger.error("Failed to load stats: %s", e)
            self._finish(e)
            return
        self._finish()

    def update_streak(self, days: int) -> None:
        try:
            self.storage.update_streak(days)
        except Exception as e:
            self._finish(e)
            raise
        self.streak = days
        self._notify()

    def increment_completed(self) -> int:
        try:
            self.total_completed = self.storage.increment_completed()
        except Exception as e:
            self._finish(e)
            raise
        self._notify()
        return self.total_completed

    def calculate_streak(self) -> int:
        """Recompute the streak from task completion dates and store it.

        The streak is 0 when nothing is completed or the most recent
        completion is older than yesterday. Otherwise it is the number of
        distinct days on which tasks were completed.
        """
        days = {
            task.completed_at.date() for task in self.storage.get_tasks()
            if task.status == TaskStatus.COMPLETED and task.completed_at is not None
        }

        today = self._clock().date()
        if not days or max(days) < today - timedelta(days=1):
            streak = 0
        else:
            streak = len(days)

        self.update_streak(streak)
        return streak
