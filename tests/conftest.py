import itertools
from datetime import datetime

import pytest
from click.testing import CliRunner

from devtodo.core.kv_store import MemoryKeyValueStore
from devtodo.core.task_storage import TaskStorageManager
from devtodo.models.task import Task


FIXED_NOW = datetime(2025, 3, 14, 9, 30, 0)


@pytest.fixture
def cli_runner():
    """Provides a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def memory_store():
    """Provides an empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def storage_manager(memory_store):
    """Provides an initialized TaskStorageManager with a fixed clock and sequential ids."""
    counter = itertools.count(1)
    manager = TaskStorageManager(
        memory_store,
        clock=lambda: FIXED_NOW,
        id_factory=lambda: f"task-{next(counter):04d}",
    )
    manager.initialize()
    return manager


@pytest.fixture
def data_dir(tmp_path):
    """Provides a data directory for CLI tests."""
    return tmp_path / ".devtodo"


def _make_task(task_id, title, **fields):
    fields.setdefault("created_at", FIXED_NOW)
    return Task(id=task_id, title=title, **fields)


@pytest.fixture
def make_task():
    """Provides a factory building a Task with sensible defaults."""
    return _make_task


@pytest.fixture
def sample_tasks():
    """Provides a small mixed task list."""
    return [
        _make_task("a1", "Write parser", priority="high", status="pending",
                   category="coding", tags=["python", "parser"],
                   due_date=datetime(2025, 3, 20)),
        _make_task("b2", "Read chapter 4", priority="low", status="in-progress",
                   category="learning", description="Graph algorithms",
                   due_date=datetime(2025, 3, 15)),
        _make_task("c3", "Submit homework", priority="high", status="completed",
                   category="assignment", tags=["school"],
                   completed_at=datetime(2025, 3, 13, 18, 0)),
        _make_task("d4", "Fix login bug", priority="medium", status="pending",
                   category="project", tags=["python"],
                   code_snippet={"code": "def login():\n    pass", "language": "python"}),
    ]
