"""Task data models."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.constants import MAX_TITLE_LENGTH


class TaskCategory(str, Enum):
    """Task category enumeration."""
    LEARNING = "learning"
    CODING = "coding"
    ASSIGNMENT = "assignment"
    PROJECT = "project"
    PERSONAL = "personal"


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Task status enumeration.

    Transitions are unrestricted: any status may follow any other.
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive local time; pass naive values through."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """Base model persisted with camelCase keys, accepting either form on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-compatible wire form (camelCase keys, ISO dates)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubTask(CamelModel):
    """A checklist item owned by a single task."""
    id: str
    title: str
    completed: bool = False


class CodeSnippet(CamelModel):
    """A code block attached to a task."""
    code: str
    language: str = "plaintext"


class TaskDraft(CamelModel):
    """Everything a caller supplies when creating a task.

    The store assigns ``id`` and ``created_at``.
    """
    title: str = Field(..., max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    category: TaskCategory = TaskCategory.PERSONAL
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    tags: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    reminder_enabled: bool = False
    notification_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    estimated_time: Optional[int] = None  # minutes
    actual_time: Optional[int] = None  # minutes
    timer_started_at: Optional[datetime] = None
    subtasks: List[SubTask] = Field(default_factory=list)
    code_snippet: Optional[CodeSnippet] = None
    dependencies: List[str] = Field(default_factory=list)  # task ids
    links: List[str] = Field(default_factory=list)
    pomodoro_count: Optional[int] = None
    total_focus_time: Optional[int] = None  # minutes

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("due_date", "reminder", "completed_at", "timer_started_at")
    @classmethod
    def _naive_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(value)


class Task(TaskDraft):
    """A stored task."""
    id: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _naive_created_at(cls, value: datetime) -> datetime:
        return to_local_naive(value)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def apply(self, patch: "TaskPatch") -> "Task":
        """Return a copy with the fields explicitly set on ``patch`` merged in.

        ``id`` and ``created_at`` are not patchable.
        """
        data = dict(self)
        data.update({name: getattr(patch, name) for name in patch.model_fields_set})
        return Task.model_validate(data)


class TaskPatch(CamelModel):
    """Partial update for a task.

    Only fields that were explicitly provided are applied, so passing
    ``None`` clears an optional field.
    """
    title: Optional[str] = Field(None, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    category: Optional[TaskCategory] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    tags: Optional[List[str]] = None
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    reminder_enabled: Optional[bool] = None
    notification_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    estimated_time: Optional[int] = None
    actual_time: Optional[int] = None
    timer_started_at: Optional[datetime] = None
    subtasks: Optional[List[SubTask]] = None
    code_snippet: Optional[CodeSnippet] = None
    dependencies: Optional[List[str]] = None
    links: Optional[List[str]] = None
    pomodoro_count: Optional[int] = None
    total_focus_time: Optional[int] = None
