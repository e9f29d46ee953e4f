"""Import tasks from JSON or Markdown text."""
import json
import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..core.constants import (
    EXPORT_DATE_FORMAT,
    MAX_TITLE_LENGTH,
    TASK_CATEGORIES,
    TASK_PRIORITIES,
    TASK_STATUSES,
)
from ..models.task import Task
from .exceptions import ImportServiceError, InvalidImportError

logger = logging.getLogger(__name__)

TaskRecord = Dict[str, Any]

HEADING_RE = re.compile(r"###\s*\[([ x])\]\s*(.+)")
SUBTASK_RE = re.compile(r"^-\s*\[([ x])\]\s*(.+)")
PRIORITY_RE = re.compile(r"Priority:\s*`(\w+)`")
CATEGORY_RE = re.compile(r"Category:\s*`(\w+)`")
MINUTES_RE = re.compile(r"(\d+)\s*minutes?")
NUMBER_RE = re.compile(r"(\d+)")

# Accepted "- Due Date:" spellings, tried in order
DUE_DATE_FORMATS = [EXPORT_DATE_FORMAT, "%m/%d/%Y", "%d/%m/%Y", "%Y-%m-%dT%H:%M:%S"]


class ImportFormat(str, Enum):
    JSON = "json"
    MARKDOWN = "markdown"


@dataclass
class ImportStats:
    imported: int = 0
    duplicates: int = 0
    skipped: int = 0


@dataclass
class ImportResult:
    """Outcome of an import.

    ``tasks`` are ready to be added; ``duplicates`` match existing tasks and
    are left for the caller to decide on.
    """
    success: bool
    tasks: List[Task] = field(default_factory=list)
    duplicates: List[Task] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    stats: ImportStats = field(default_factory=ImportStats)


@dataclass
class ContentValidation:
    valid: bool
    error: Optional[str] = None


def _title_of(record: Any) -> str:
    if isinstance(record, dict) and record.get("title"):
        return str(record["title"])
    return "Unknown"


def _parse_due_date(value: str) -> Optional[datetime]:
    for fmt in DUE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _fold(value: Optional[str]) -> Optional[str]:
    """Case-fold a text field for duplicate detection; blank counts as missing."""
    if value is None:
        return None
    value = str(value).strip().lower()
    return value or None


class ImportService:
    """Parses external text into validated tasks."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        """Initialize import service.

        Args:
            clock: Source of ``created_at`` for records that lack one
        """
        self._clock = clock

    def import_tasks(self, content: str, import_format: Union[ImportFormat, str],
                     existing_tasks: Sequence[Task]) -> ImportResult:
        """Parse ``content`` and split it into new tasks, duplicates and errors.

        A record that fails validation is skipped and reported in
        ``errors``; it never aborts the rest of the batch. Only a failure to
        parse the content as a whole yields ``success=False`` with no tasks.
        """
        try:
            import_format = ImportFormat(import_format)
        except ValueError:
            return self._failed(f"Unsupported import format: {import_format}")

        try:
            if import_format == ImportFormat.JSON:
                records = self.parse_json(content)
            else:
                records = self.parse_markdown(content)
        except (ValueError, ImportServiceError) as e:
            logger.warning("Import failed: %s", e)
            return self._failed(str(e))

        return self.process_import(records, existing_tasks)

    @staticmethod
    def _failed(message: str) -> ImportResult:
        return ImportResult(success=False, errors=[message])

    def parse_json(self, content: str) -> List[TaskRecord]:
        """Accept ``{version, tasks: [...]}`` or a bare list of task objects.

        Raises:
            InvalidImportError: If the document has neither shape
        """
        data = json.loads(content)

        if isinstance(data, dict) and data.get("version") and data.get("tasks") is not None:
            tasks = data["tasks"]
            if isinstance(tasks, list):
                return tasks

        if isinstance(data, list):
            return data

        raise InvalidImportError("Invalid JSON format")

    def parse_markdown(self, content: str) -> List[TaskRecord]:
        """Parse the Markdown export layout back into task records.

        Each ``### [ ] Title`` heading starts a task; plain lines below it form
        the description, ``- Key: value`` bullets set metadata, ``- [x] item``
        lines add subtasks, and a fenced block becomes the code snippet.
        Anything else is ignored.
        """
        records: List[TaskRecord] = []
        current: Optional[TaskRecord] = None
        in_code_block = False
        code_lines: List[str] = []
        code_language = ""

        for raw_line in content.splitlines():
            line = raw_line.strip()

            if line.startswith("```"):
                if not in_code_block:
                    in_code_block = True
                    code_language = line[3:].strip() or "plaintext"
                    code_lines = []
                else:
                    in_code_block = False
                    if current is not None:
                        current["codeSnippet"] = {
                            "code": "\n".join(code_lines).strip("\n"),
                            "language": code_language,
                        }
                continue

            if in_code_block:
                code_lines.append(raw_line.rstrip())
                continue

            if line.startswith("###"):
                if current is not None:
                    records.append(current)
                match = HEADING_RE.match(line)
                current = None
                if match:
                    current = {
                        "title": match.group(2).strip(),
                        "status": "completed" if match.group(1) == "x" else "pending",
                        "priority": "medium",
                        "category": "personal",
                        "tags": [],
                        "subtasks": [],
                    }
                continue

            if current is None:
                continue

            if line and not line.startswith(("-", "**", "#")):
                description = current.get("description")
                current["description"] = f"{description} {line}" if description else line
                continue

            self._apply_metadata(current, line)

            subtask = SUBTASK_RE.match(line)
            if subtask:
                current["subtasks"].append({
                    "id": uuid.uuid4().hex,
                    "title": subtask.group(2).strip(),
                    "completed": subtask.group(1) == "x",
                })

        if current is not None:
            records.append(current)

        return records

    @staticmethod
    def _apply_metadata(record: TaskRecord, line: str) -> None:
        """Copy a recognised ``- Key: value`` bullet onto ``record``."""
        if line.startswith("- Priority:"):
            match = PRIORITY_RE.search(line)
            if match and match.group(1).lower() in TASK_PRIORITIES:
                record["priority"] = match.group(1).lower()
        elif line.startswith("- Category:"):
            match = CATEGORY_RE.search(line)
            if match and match.group(1).lower() in TASK_CATEGORIES:
                record["category"] = match.group(1).lower()
        elif line.startswith("- Due Date:"):
            due = _parse_due_date(line.split("Due Date:", 1)[1].strip())
            if due is not None:
                record["dueDate"] = due.isoformat()
        elif line.startswith("- Estimated Time:"):
            match = MINUTES_RE.search(line)
            if match and int(match.group(1)) > 0:
                record["estimatedTime"] = int(match.group(1))
        elif line.startswith("- Tags:"):
            tags = line.split("Tags:", 1)[1].split(",")
            record["tags"] = [
                tag.strip().removeprefix("#") for tag in tags
                if tag.strip().removeprefix("#")
            ]
        elif line.startswith("- Pomodoros:"):
            match = NUMBER_RE.search(line)
            if match and int(match.group(1)) > 0:
                record["pomodoroCount"] = int(match.group(1))

    def process_import(self, records: Sequence[Any],
                       existing_tasks: Sequence[Task]) -> ImportResult:
        """Validate, deduplicate and normalize parsed records."""
        result = ImportResult(success=False)

        for record in records:
            title = _title_of(record)
            try:
                error = self.validate_task(record)
                if error:
                    result.errors.append(f'Task "{title}": {error}')
                    result.stats.skipped += 1
                    logger.warning("Skipping task %r: %s", title, error)
                    continue

                if self.is_duplicate(record, existing_tasks):
                    result.duplicates.append(self.normalize_task(record))
                    result.stats.duplicates += 1
                    continue

                result.tasks.append(self.normalize_task(record))
                result.stats.imported += 1
            except (ValueError, TypeError, AttributeError) as e:
                result.errors.append(f'Error processing task "{title}": {e}')
                result.stats.skipped += 1
                logger.warning("Skipping task %r: %s", title, e)

        result.success = result.stats.imported > 0
        return result

    @staticmethod
    def validate_task(record: Any) -> Optional[str]:
        """Check a raw record.

        Returns:
            An error message, or None if the record is acceptable
        """
        if not isinstance(record, dict):
            return "Task must be an object"

        title = record.get("title")
        if not isinstance(title, str) or not title.strip():
            return "Title is required"

        if len(title) > MAX_TITLE_LENGTH:
            return f"Title is too long (max {MAX_TITLE_LENGTH} characters)"

        priority = record.get("priority")
        if priority and priority not in TASK_PRIORITIES:
            return f"Invalid priority: {priority}"

        category = record.get("category")
        if category and category not in TASK_CATEGORIES:
            return f"Invalid category: {category}"

        status = record.get("status")
        if status and status not in TASK_STATUSES:
            return f"Invalid status: {status}"

        return None

    @staticmethod
    def is_duplicate(record: TaskRecord, existing_tasks: Sequence[Task]) -> bool:
        """True if an existing task has the same title and description, ignoring case."""
        title = _fold(record.get("title"))
        description = _fold(record.get("description"))
        return any(
            _fold(existing.title) == title and _fold(existing.description) == description
            for existing in existing_tasks
        )

    def normalize_task(self, record: TaskRecord) -> Task:
        """Fill every missing field with its default and build a Task."""
        data = dict(record)
        if not data.get("id"):
            data["id"] = f"imported-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
        data["title"] = record["title"].strip()
        description = (record.get("description") or "").strip()
        data["description"] = description or None
        data["priority"] = record.get("priority") or "medium"
        data["category"] = record.get("category") or "personal"
        data["status"] = record.get("status") or "pending"
        data["createdAt"] = record.get("createdAt") or self._clock()
        data.pop("completed_at", None)
        if data["status"] == "completed":
            data["completedAt"] = (record.get("completedAt") or record.get("completed_at")
                                   or data["createdAt"])
        else:
            data.pop("completedAt", None)
        for key in ("tags", "subtasks", "dependencies", "links"):
            data[key] = record.get(key) or []
        data["reminderEnabled"] = bool(record.get("reminderEnabled", False))
        return Task.model_validate(data)

    def detect_format(self, content: str) -> Optional[ImportFormat]:
        """Guess the format of ``content`` without fully parsing it."""
        trimmed = content.strip()

        if trimmed.startswith(("{", "[")):
            try:
                json.loads(trimmed)
            except json.JSONDecodeError:
                return None
            return ImportFormat.JSON

        if "###" in trimmed or "# Todo" in trimmed:
            return ImportFormat.MARKDOWN

        return None

    def validate_content(self, content: str) -> ContentValidation:
        if not content or not content.strip():
            return ContentValidation(valid=False, error="Content is empty")

        if self.detect_format(content) is None:
            return ContentValidation(
                valid=False,
                error="Unable to detect format. Supported formats: JSON, Markdown",
            )

        return ContentValidation(valid=True)
