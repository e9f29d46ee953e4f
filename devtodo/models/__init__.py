"""Models for devtodo."""

from .task import (
    CodeSnippet,
    SubTask,
    Task,
    TaskCategory,
    TaskDraft,
    TaskPatch,
    TaskPriority,
    TaskStatus,
)
from .settings import SettingsPatch, UserSettings

__all__ = [
    'CodeSnippet',
    'SubTask',
    'Task',
    'TaskCategory',
    'TaskDraft',
    'TaskPatch',
    'TaskPriority',
    'TaskStatus',
    'SettingsPatch',
    'UserSettings',
]
