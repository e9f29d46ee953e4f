"""Task storage manager for persistent task tracking."""
import json
import logging
import random
import string
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Union

from ..models.settings import SettingsPatch, UserSettings
from ..models.task import Task, TaskCategory, TaskDraft, TaskPatch, TaskStatus
from ..services.exceptions import StorageError, StorageErrorCode
from .constants import CURRENT_VERSION, STORAGE_KEYS
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

Code = StorageErrorCode


def generate_task_id() -> str:
    """Generate a task id from the current epoch milliseconds and a random suffix."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


@contextmanager
def storage_errors(message: str, code: StorageErrorCode) -> Iterator[None]:
    """Re-raise StorageError unchanged; wrap anything else with ``code``."""
    try:
        yield
    except StorageError:
        raise
    except Exception as e:
        raise StorageError(message, code) from e


@dataclass
class StorageInfo:
    """Summary of what is currently stored."""
    task_count: int
    completed_count: int
    streak: int
    last_sync: Optional[str]


class TaskStorageManager:
    """Manages persistent storage of tasks, settings and statistics.

    Every mutation reads the whole task collection, changes it in memory and
    writes the whole collection back. A re-entrant lock keeps that sequence
    atomic when one manager is shared between threads.
    """

    def __init__(self, store: KeyValueStore,
                 clock: Callable[[], datetime] = datetime.now,
                 id_factory: Callable[[], str] = generate_task_id):
        """Initialize task storage manager.

        Args:
            store: Key-value store holding all persisted state
            clock: Source of the current time for created/completed stamps
            id_factory: Source of new task ids
        """
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()

    # ---- initialization -------------------------------------------------

    def initialize(self) -> None:
        """Prepare storage on first launch or migrate an older schema version."""
        with storage_errors("Failed to initialize storage", Code.INIT_ERROR), self._lock:
            version = self.get_version()
            if version is None:
                logger.info("First launch, initializing storage v%d", CURRENT_VERSION)
                self.set_version(CURRENT_VERSION)
                self._write_settings(UserSettings())
                self.store.set(STORAGE_KEYS["FIRST_LAUNCH"], self._clock().isoformat())
            elif version < CURRENT_VERSION:
                self.migrate(version, CURRENT_VERSION)

    def get_version(self) -> Optional[int]:
        """Get the stored schema version, or None before first launch."""
        with storage_errors("Failed to get storage version", Code.VERSION_READ_ERROR):
            version = self.store.get(STORAGE_KEYS["APP_VERSION"])
            return int(version) if version else None

    def set_version(self, version: int) -> None:
        with storage_errors("Failed to set storage version", Code.VERSION_WRITE_ERROR):
            self.store.set(STORAGE_KEYS["APP_VERSION"], str(version))

    def migrate(self, from_version: int, to_version: int) -> None:
        """Migrate stored data between schema versions.

        No schema change exists yet; this only records the new version.
        """
        with storage_errors(f"Failed to migrate from v{from_version} to v{to_version}",
                            Code.MIGRATION_ERROR):
            logger.info("Migrating storage from v%d to v%d", from_version, to_version)
            self.set_version(to_version)

    # ---- tasks ----------------------------------------------------------

    def get_tasks(self) -> List[Task]:
        """Load the full task collection.

        Returns:
            List of tasks in insertion order (empty if nothing is stored)
        """
        with storage_errors("Failed to get tasks", Code.TASK_READ_ERROR):
            raw = self.store.get(STORAGE_KEYS["TASKS"])
            if not raw:
                return []
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                raise StorageError("Corrupted task data", Code.TASK_PARSE_ERROR) from e
            return [Task.model_validate(item) for item in data]

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        """Get a task by ID.

        Returns:
            Task if found, None otherwise
        """
        with storage_errors(f"Failed to get task with id: {task_id}", Code.TASK_READ_ERROR):
            return next((task for task in self.get_tasks() if task.id == task_id), None)

    def get_tasks_by_status(self, status: TaskStatus) -> List[Task]:
        return [task for task in self.get_tasks() if task.status == status]

    def get_tasks_by_category(self, category: TaskCategory) -> List[Task]:
        return [task for task in self.get_tasks() if task.category == category]

    def get_tasks_due_today(self) -> List[Task]:
        """Tasks whose due date falls on the current local day."""
        today = self._clock().date()
        return [
            task for task in self.get_tasks()
            if task.due_date is not None and task.due_date.date() == today
        ]

    def add_task(self, draft: Union[TaskDraft, dict]) -> Task:
        """Create a task, assigning its id and creation time.

        Args:
            draft: Task fields without ``id``/``created_at``

        Returns:
            The stored Task
        """
        with storage_errors("Failed to add task", Code.TASK_CREATE_ERROR), self._lock:
            if not isinstance(draft, TaskDraft):
                draft = TaskDraft.model_validate(draft)
            data = dict(draft)
            data.update(id=self._id_factory(), created_at=self._clock())
            task = self._sync_completed_at(Task.model_validate(data))

            tasks = self.get_tasks()
            tasks.append(task)
            self.save_tasks(tasks)
            logger.info("Added task %s: %s", task.id, task.title)
            return task

    def update_task(self, task_id: str, updates: Union[TaskPatch, dict]) -> Task:
        """Merge ``updates`` onto an existing task. The id never changes.

        Changing the status stamps ``completed_at`` on completion and clears it
        otherwise.

        Raises:
            StorageError: TASK_NOT_FOUND if no task has ``task_id``
        """
        with storage_errors(f"Failed to update task with id: {task_id}",
                            Code.TASK_UPDATE_ERROR), self._lock:
            if not isinstance(updates, TaskPatch):
                updates = TaskPatch.model_validate(updates)

            tasks = self.get_tasks()
            index = next((i for i, task in enumerate(tasks) if task.id == task_id), None)
            if index is None:
                raise StorageError(f"Task with id {task_id} not found", Code.TASK_NOT_FOUND)

            updated = self._sync_completed_at(tasks[index].apply(updates))
            tasks[index] = updated
            self.save_tasks(tasks)
            logger.debug("Updated task %s fields: %s", task_id, sorted(updates.model_fields_set))
            return updated

    def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Raises:
            StorageError: TASK_NOT_FOUND if no task has ``task_id``
        """
        with storage_errors(f"Failed to delete task with id: {task_id}",
                            Code.TASK_DELETE_ERROR), self._lock:
            tasks = self.get_tasks()
            remaining = [task for task in tasks if task.id != task_id]
            if len(remaining) == len(tasks):
                raise StorageError(f"Task with id {task_id} not found", Code.TASK_NOT_FOUND)
            self.save_tasks(remaining)
            logger.info("Deleted task %s", task_id)

    def toggle_task_complete(self, task_id: str) -> Task:
        """Flip a task between completed and pending.

        A task that is not completed (including in-progress and archived)
        becomes completed; a completed task becomes pending.
        """
        with storage_errors(f"Failed to toggle task completion: {task_id}",
                            Code.TASK_UPDATE_ERROR), self._lock:
            task = self.get_task_by_id(task_id)
            if task is None:
                raise StorageError(f"Task with id {task_id} not found", Code.TASK_NOT_FOUND)

            if task.status != TaskStatus.COMPLETED:
                patch = TaskPatch(status=TaskStatus.COMPLETED, completed_at=self._clock())
            else:
                patch = TaskPatch(status=TaskStatus.PENDING, completed_at=None)
            return self.update_task(task_id, patch)

    def _sync_completed_at(self, task: Task) -> Task:
        """Keep ``completed_at`` set exactly while the task is completed."""
        if task.is_completed and task.completed_at is None:
            return task.model_copy(update={"completed_at": self._clock()})
        if not task.is_completed and task.completed_at is not None:
            return task.model_copy(update={"completed_at": None})
        return task

    def save_tasks(self, tasks: List[Task]) -> None:
        """Replace the stored task collection."""
        with storage_errors("Failed to save tasks", Code.TASK_WRITE_ERROR), self._lock:
            payload = json.dumps([task.to_json_dict() for task in tasks])
            self.store.set(STORAGE_KEYS["TASKS"], payload)
            self.store.set(STORAGE_KEYS["LAST_SYNC"], self._clock().isoformat())

    def clear_completed_tasks(self) -> int:
        """Remove completed tasks.

        Returns:
            Number of tasks removed
        """
        with self._lock:
            tasks = self.get_tasks()
            remaining = [task for task in tasks if task.status != TaskStatus.COMPLETED]
            self.save_tasks(remaining)
            removed = len(tasks) - len(remaining)
            logger.info("Cleared %d completed task(s)", removed)
            return removed

    # ---- settings -------------------------------------------------------

    def get_settings(self) -> UserSettings:
        """Get user settings, filled with defaults where nothing is stored."""
        with storage_errors("Failed to get settings", Code.SETTINGS_READ_ERROR):
            raw = self.store.get(STORAGE_KEYS["SETTINGS"])
            if not raw:
                return UserSettings()
            return UserSettings.model_validate(json.loads(raw))

    def set_settings(self, updates: Union[SettingsPatch, dict]) -> UserSettings:
        """Shallow-merge ``updates`` into the stored settings.

        Returns:
            The complete updated settings
        """
        with storage_errors("Failed to save settings", Code.SETTINGS_WRITE_ERROR), self._lock:
            if not isinstance(updates, SettingsPatch):
                updates = SettingsPatch.model_validate(updates)
            settings = self.get_settings().apply(updates)
            self._write_settings(settings)
            return settings

    def reset_settings(self) -> UserSettings:
        """Replace stored settings with the defaults."""
        with storage_errors("Failed to save settings", Code.SETTINGS_WRITE_ERROR), self._lock:
            settings = UserSettings()
            self._write_settings(settings)
            return settings

    def _write_settings(self, settings: UserSettings) -> None:
        self.store.set(STORAGE_KEYS["SETTINGS"], json.dumps(settings.to_json_dict()))

    # ---- scalar values --------------------------------------------------

    def get_username(self) -> Optional[str]:
        with storage_errors("Failed to get username", Code.USERNAME_READ_ERROR):
            return self.store.get(STORAGE_KEYS["USERNAME"])

    def set_username(self, username: str) -> None:
        with storage_errors("Failed to set username", Code.USERNAME_WRITE_ERROR):
            self.store.set(STORAGE_KEYS["USERNAME"], username)

    def clear_username(self) -> None:
        with storage_errors("Failed to clear username", Code.USERNAME_DELETE_ERROR):
            self.store.remove(STORAGE_KEYS["USERNAME"])

    def get_streak(self) -> int:
        with storage_errors("Failed to get streak", Code.STATS_READ_ERROR):
            streak = self.store.get(STORAGE_KEYS["STREAK"])
            return int(streak) if streak else 0

    def update_streak(self, days: int) -> None:
        with storage_errors("Failed to update streak", Code.STREAK_WRITE_ERROR):
            self.store.set(STORAGE_KEYS["STREAK"], str(days))

    def get_total_completed(self) -> int:
        with storage_errors("Failed to get completed count", Code.STATS_READ_ERROR):
            total = self.store.get(STORAGE_KEYS["TOTAL_COMPLETED"])
            return int(total) if total else 0

    def increment_completed(self) -> int:
        """Increment the lifetime completed-task counter.

        Returns:
            The new count
        """
        with storage_errors("Failed to increment completed count",
                            Code.STATS_WRITE_ERROR), self._lock:
            total = self.get_total_completed() + 1
            self.store.set(STORAGE_KEYS["TOTAL_COMPLETED"], str(total))
            return total

    # ---- whole-state operations -----------------------------------------

    def clear_all(self) -> None:
        """Remove every stored key."""
        with storage_errors("Failed to clear all data", Code.CLEAR_ALL_ERROR), self._lock:
            self.store.clear()
            logger.warning("Cleared all stored data")

    def export_data(self) -> str:
        """Serialize tasks, settings and username into one JSON snapshot."""
        with storage_errors("Failed to export data", Code.EXPORT_ERROR):
            snapshot = {
                "version": CURRENT_VERSION,
                "exportDate": self._clock().isoformat(),
                "username": self.get_username(),
                "tasks": [task.to_json_dict() for task in self.get_tasks()],
                "settings": self.get_settings().to_json_dict(),
            }
            return json.dumps(snapshot, indent=2, ensure_ascii=False)

    def import_data(self, json_data: str) -> None:
        """Restore a snapshot produced by ``export_data``.

        Tasks are replaced, settings merged, and the username set if present.
        The whole snapshot is validated before anything is written.

        Raises:
            StorageError: IMPORT_INVALID_FORMAT if ``version`` or ``tasks`` is missing
        """
        with storage_errors("Failed to import data", Code.IMPORT_ERROR), self._lock:
            data = json.loads(json_data)
            if not isinstance(data, dict) or not data.get("version") or data.get("tasks") is None:
                raise StorageError("Invalid import data format", Code.IMPORT_INVALID_FORMAT)

            tasks = [Task.model_validate(item) for item in data["tasks"]]
            settings = None
            if data.get("settings"):
                patch = SettingsPatch.model_validate(data["settings"])
                settings = self.get_settings().apply(patch)

            self.save_tasks(tasks)
            if settings is not None:
                self._write_settings(settings)
            if data.get("username"):
                self.set_username(data["username"])
            logger.info("Restored %d task(s) from snapshot", len(tasks))

    def get_storage_info(self) -> StorageInfo:
        with storage_errors("Failed to get storage info", Code.INFO_ERROR):
            tasks = self.get_tasks()
            return StorageInfo(
                task_count=len(tasks),
                completed_count=sum(1 for task in tasks if task.is_completed),
                streak=self.get_streak(),
                last_sync=self.store.get(STORAGE_KEYS["LAST_SYNC"]),
            )
