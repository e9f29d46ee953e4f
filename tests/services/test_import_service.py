"""Tests for ImportService."""
import json
from datetime import datetime

import pytest

from devtodo.models.task import TaskPriority, TaskStatus
from devtodo.services.exceptions import InvalidImportError
from devtodo.services.export_service import ExportOptions, ExportService
from devtodo.services.import_service import ImportFormat, ImportService


@pytest.fixture
def import_service(fixed_now):
    return ImportService(clock=lambda: fixed_now)


MARKDOWN = """# Todo App Export

**Exported:** 2025-03-14
**Total Tasks:** 2

---

## Pending (1)

### [ ] Write docs

Explain the importer
in two lines

**Details:**
- Priority: `high`
- Category: `coding`
- Due Date: 2025-04-01
- Estimated Time: 90 minutes
- Pomodoros: 🍅 2
- Tags: #docs, #writing

**Subtasks:**

- [x] Outline
- [ ] Draft

**Code Snippet (python):**

```python
def main():
    return 1
```

---

## Completed (1)

### [x] Ship release

**Details:**
- Priority: `low`
- Category: `bogus`

---
"""


class TestParseJson:
    """Test JSON parsing."""

    def test_envelope(self, import_service):
        records = import_service.parse_json(json.dumps({"version": "1.0.0", "tasks": [{"title": "A"}]}))
        assert records == [{"title": "A"}]

    def test_bare_array(self, import_service):
        assert import_service.parse_json('[{"title": "A"}]') == [{"title": "A"}]

    def test_other_shapes_are_invalid(self, import_service):
        with pytest.raises(InvalidImportError, match="Invalid JSON format"):
            import_service.parse_json('{"tasks": []}')


class TestParseMarkdown:
    """Test the Markdown state machine."""

    def test_parses_export_layout(self, import_service):
        first, second = import_service.parse_markdown(MARKDOWN)

        assert first["title"] == "Write docs"
        assert first["status"] == "pending"
        assert first["description"] == "Explain the importer in two lines"
        assert first["priority"] == "high"
        assert first["category"] == "coding"
        assert first["dueDate"] == "2025-04-01T00:00:00"
        assert first["estimatedTime"] == 90
        assert first["pomodoroCount"] == 2
        assert first["tags"] == ["docs", "writing"]
        assert [(s["title"], s["completed"]) for s in first["subtasks"]] == [
            ("Outline", True), ("Draft", False),
        ]
        assert first["codeSnippet"] == {"code": "def main():\n    return 1", "language": "python"}

        assert second["title"] == "Ship release"
        assert second["status"] == "completed"
        assert second["priority"] == "low"
        # Unknown category keeps the default
        assert second["category"] == "personal"

    def test_code_block_without_language(self, import_service):
        records = import_service.parse_markdown("### [ ] Task\n```\nx = 1\n```\n")
        assert records[0]["codeSnippet"] == {"code": "x = 1", "language": "plaintext"}

    def test_text_before_first_heading_is_ignored(self, import_service):
        assert import_service.parse_markdown("just some notes\n- [ ] not a task\n") == []


class TestValidateTask:
    """Test per-record validation messages."""

    @pytest.mark.parametrize("record,message", [
        ({}, "Title is required"),
        ({"title": "   "}, "Title is required"),
        ({"title": "x" * 201}, "Title is too long (max 200 characters)"),
        ({"title": "A", "priority": "urgent"}, "Invalid priority: urgent"),
        ({"title": "A", "category": "chores"}, "Invalid category: chores"),
        ({"title": "A", "status": "done"}, "Invalid status: done"),
    ])
    def test_errors(self, record, message):
        assert ImportService.validate_task(record) == message

    def test_valid(self):
        assert ImportService.validate_task({"title": "A", "priority": "high"}) is None


class TestImportTasks:
    """Test the full import pipeline."""

    def test_blank_title_is_skipped(self, import_service):
        content = json.dumps([{"title": ""}])

        result = import_service.import_tasks(content, ImportFormat.JSON, [])

        assert result.success is False
        assert result.stats.skipped == 1
        assert result.stats.imported == 0
        assert len(result.errors) == 1
        assert "Title is required" in result.errors[0]

    def test_bad_record_does_not_abort_batch(self, import_service):
        content = json.dumps([
            {"title": "Good"},
            {"title": "Bad", "priority": "urgent"},
            {"title": "Bad date", "dueDate": "not a date"},
            "not an object",
        ])

        result = import_service.import_tasks(content, "json", [])

        assert result.success is True
        assert [t.title for t in result.tasks] == ["Good"]
        assert result.stats.skipped == 3
        assert result.errors[0] == 'Task "Bad": Invalid priority: urgent'
        assert result.errors[1].startswith('Error processing task "Bad date":')

    def test_normalization_fills_defaults(self, import_service, fixed_now):
        result = import_service.import_tasks('[{"title": "  Bare  "}]', "json", [])

        task = result.tasks[0]
        assert task.title == "Bare"
        assert task.id.startswith("imported-")
        assert task.created_at == fixed_now
        assert task.priority == TaskPriority.MEDIUM
        assert task.status == TaskStatus.PENDING
        assert task.tags == []
        assert task.reminder_enabled is False

    def test_existing_id_and_created_at_are_kept(self, import_service):
        content = json.dumps([{"id": "keep-me", "title": "A", "createdAt": "2024-01-01T08:00:00"}])

        task = import_service.import_tasks(content, "json", []).tasks[0]

        assert task.id == "keep-me"
        assert task.created_at == datetime(2024, 1, 1, 8, 0)

    def test_completed_records_get_completion_time(self, import_service, fixed_now):
        content = json.dumps([
            {"title": "Done earlier", "status": "completed", "createdAt": "2025-03-01T10:00:00"},
            {"title": "Done now", "status": "completed"},
            {"title": "Still open", "status": "pending", "completedAt": "2025-03-02T10:00:00"},
        ])

        done_earlier, done_now, still_open = import_service.import_tasks(content, "json", []).tasks

        assert done_earlier.completed_at == datetime(2025, 3, 1, 10, 0)
        assert done_now.completed_at == fixed_now
        assert still_open.completed_at is None

    def test_checked_markdown_heading_is_stamped(self, import_service, fixed_now):
        [task] = import_service.import_tasks("### [x] Done\n", "markdown", []).tasks

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at == fixed_now

    def test_duplicates_are_separated(self, import_service, make_task):
        existing = [make_task("e1", "Write Docs", description="Explain")]
        content = json.dumps([
            {"title": "write docs", "description": "EXPLAIN"},
            {"title": "write docs", "description": "Something else"},
        ])

        result = import_service.import_tasks(content, "json", existing)

        assert result.stats.duplicates == 1
        assert result.stats.imported == 1
        assert result.duplicates[0].title == "write docs"
        assert result.tasks[0].description == "Something else"

    def test_second_import_of_same_content_is_all_duplicates(self, import_service, sample_tasks):
        exported = ExportService().export(ExportOptions(
            format="json", tasks=sample_tasks, include_completed=True,
        ))

        first = import_service.import_tasks(exported, "json", [])
        second = import_service.import_tasks(exported, "json", first.tasks)

        assert first.stats.imported == len(sample_tasks)
        assert first.tasks == sample_tasks
        assert second.stats.imported == 0
        assert second.stats.duplicates == len(sample_tasks)
        assert second.success is False

    def test_markdown_export_reimports(self, import_service, make_task):
        tasks = [
            make_task("1", "Alpha", description="First task", priority="high",
                      tags=["x"], due_date=datetime(2025, 5, 1)),
            make_task("2", "Beta", category="learning"),
        ]
        markdown = ExportService().export_to_markdown(tasks)

        result = import_service.import_tasks(markdown, ImportFormat.MARKDOWN, [])

        assert [t.title for t in result.tasks] == ["Alpha", "Beta"]
        assert result.tasks[0].description == "First task"
        assert result.tasks[0].due_date == datetime(2025, 5, 1)
        assert result.tasks[0].tags == ["x"]
        assert result.tasks[1].category.value == "learning"

    def test_unparseable_content_fails_whole_import(self, import_service):
        result = import_service.import_tasks("{broken", "json", [])

        assert result.success is False
        assert result.tasks == []
        assert len(result.errors) == 1

    def test_unknown_format(self, import_service):
        result = import_service.import_tasks("[]", "csv", [])

        assert result.success is False
        assert "Unsupported import format" in result.errors[0]


class TestDetection:
    """Test format detection and content validation."""

    def test_detect_json(self, import_service):
        assert import_service.detect_format('  [{"title": "A"}]') == ImportFormat.JSON

    def test_detect_broken_json(self, import_service):
        assert import_service.detect_format("{nope") is None

    def test_detect_markdown(self, import_service):
        assert import_service.detect_format(MARKDOWN) == ImportFormat.MARKDOWN

    def test_detect_unknown(self, import_service):
        assert import_service.detect_format("plain words") is None

    def test_validate_empty(self, import_service):
        validation = import_service.validate_content("   ")
        assert validation.valid is False
        assert validation.error == "Content is empty"

    def test_validate_unknown(self, import_service):
        validation = import_service.validate_content("plain words")
        assert validation.valid is False
        assert "Unable to detect format" in validation.error

    def test_validate_ok(self, import_service):
        assert import_service.validate_content("[]").valid is True
