"""Tests for task commands."""

from devtodo.cli.commands.task import task


class TestTaskCommand:
    """Test task command functionality."""

    def test_task_help(self, cli_runner):
        """Test task command help."""
        result = cli_runner.invoke(task, ['--help'])

        assert result.exit_code == 0
        assert "Manage tasks" in result.output
        for name in ["add", "list", "show", "update", "delete", "toggle", "tags", "clear-completed"]:
            assert name in result.output

    # Tests for ADD command
    def test_add(self, invoke, stored):
        """Test adding a task with options."""
        result = invoke('task', 'add', 'Write parser', '-d', 'Recursive descent', '-c', 'coding',
                        '-p', 'high', '-t', 'python', '-t', 'parser', '--due', '2025-04-01',
                        '--estimate', '30')

        assert result.exit_code == 0, result.output
        assert "Added task" in result.output

        [saved] = stored().get_tasks()
        assert saved.title == "Write parser"
        assert saved.description == "Recursive descent"
        assert saved.category.value == "coding"
        assert saved.priority.value == "high"
        assert saved.tags == ["python", "parser"]
        assert saved.due_date.isoformat() == "2025-04-01T00:00:00"
        assert saved.estimated_time == 30

    def test_add_uses_default_priority_from_settings(self, invoke, stored):
        invoke('settings', 'set', 'default_priority', 'low')

        invoke('task', 'add', 'Quiet task')

        assert stored().get_tasks()[0].priority.value == "low"

    def test_add_blank_title_fails(self, invoke, stored):
        result = invoke('task', 'add', '   ')

        assert result.exit_code == 1
        assert "Error adding task" in result.output
        assert stored().get_tasks() == []

    def test_add_invalid_category(self, invoke):
        result = invoke('task', 'add', 'Task', '-c', 'chores')
        assert result.exit_code == 2

    # Tests for LIST command
    def test_list_empty(self, invoke):
        result = invoke('task', 'list')

        assert result.exit_code == 0
        assert "No tasks found" in result.output

    def test_list_filters_and_searches(self, invoke):
        invoke('task', 'add', 'Write parser', '-p', 'high', '-t', 'python')
        invoke('task', 'add', 'Read book', '-p', 'low')
        invoke('task', 'add', 'Fix parser bug', '-p', 'medium', '-s', 'in-progress')

        result = invoke('task', 'list', '--search', 'parser', '--priority', 'high')

        assert result.exit_code == 0
        assert "Write parser" in result.output
        assert "Read book" not in result.output
        assert "Fix parser bug" not in result.output
        assert "1 of 3 task(s)" in result.output

    def test_list_sorted_by_title_desc(self, invoke):
        for title in ["alpha", "Charlie", "bravo"]:
            invoke('task', 'add', title)

        output = invoke('task', 'list', '--sort', 'title', '--desc').output

        assert output.index("Charlie") < output.index("bravo") < output.index("alpha")

    def test_list_regex(self, invoke):
        invoke('task', 'add', 'bug-101 crash')
        invoke('task', 'add', 'feature request')

        output = invoke('task', 'list', '--search', r'bug-\d+', '--regex').output

        assert "bug-101 crash" in output
        assert "feature request" not in output

    def test_list_due_range(self, invoke):
        invoke('task', 'add', 'Soon', '--due', '2025-03-10')
        invoke('task', 'add', 'Later', '--due', '2025-06-10')

        output = invoke('task', 'list', '--due-from', '2025-03-01', '--due-to', '2025-03-31').output

        assert "Soon" in output
        assert "Later" not in output

    # Tests for SHOW command
    def test_show_by_short_id(self, invoke, stored):
        invoke('task', 'add', 'Detailed task', '-d', 'Line one', '-t', 'x')
        task_id = stored().get_tasks()[0].id

        result = invoke('task', 'show', task_id[:6])

        assert result.exit_code == 0
        assert f"Task Details: {task_id}" in result.output
        assert "Detailed task" in result.output
        assert "Line one" in result.output
        assert "#x" in result.output

    def test_show_unknown(self, invoke):
        invoke('task', 'add', 'Something')

        result = invoke('task', 'show', 'zzz')

        assert result.exit_code == 1
        assert "No task found with ID: zzz" in result.output

    # Tests for UPDATE command
    def test_update(self, invoke, stored):
        invoke('task', 'add', 'Old title', '-d', 'Keep me')
        task_id = stored().get_tasks()[0].id

        result = invoke('task', 'update', task_id, '--title', 'New title', '-s', 'in-progress')

        assert result.exit_code == 0, result.output
        saved = stored().get_tasks()[0]
        assert saved.title == "New title"
        assert saved.status.value == "in-progress"
        assert saved.description == "Keep me"

    def test_update_status_completed_sets_completion_time(self, invoke, stored):
        invoke('task', 'add', 'Task')
        task_id = stored().get_tasks()[0].id

        invoke('task', 'update', task_id, '-s', 'completed')
        assert stored().get_tasks()[0].completed_at is not None

        invoke('task', 'update', task_id, '-s', 'pending')
        assert stored().get_tasks()[0].completed_at is None

    def test_update_nothing(self, invoke, stored):
        invoke('task', 'add', 'Task')
        task_id = stored().get_tasks()[0].id

        result = invoke('task', 'update', task_id)

        assert result.exit_code == 0
        assert "Nothing to update" in result.output

    def test_update_clear_due(self, invoke, stored):
        invoke('task', 'add', 'Task', '--due', '2025-03-10')
        task_id = stored().get_tasks()[0].id

        invoke('task', 'update', task_id, '--clear-due')

        assert stored().get_tasks()[0].due_date is None

    # Tests for DELETE command
    def test_delete(self, invoke, stored):
        invoke('task', 'add', 'Doomed')
        task_id = stored().get_tasks()[0].id

        result = invoke('task', 'delete', task_id, '--yes')

        assert result.exit_code == 0
        assert "deleted successfully" in result.output
        assert stored().get_tasks() == []

    def test_delete_requires_confirmation(self, invoke, stored):
        invoke('task', 'add', 'Survivor')
        task_id = stored().get_tasks()[0].id

        result = invoke('task', 'delete', task_id, input='n\n')

        assert result.exit_code != 0
        assert len(stored().get_tasks()) == 1

    # Tests for TOGGLE command
    def test_toggle_twice(self, invoke, stored):
        invoke('task', 'add', 'Flip', '-s', 'in-progress')
        task_id = stored().get_tasks()[0].id

        first = invoke('task', 'toggle', task_id)
        assert "Completed: Flip" in first.output
        assert stored().get_tasks()[0].status.value == "completed"
        assert stored().get_total_completed() == 1

        second = invoke('task', 'toggle', task_id)
        assert "Reopened: Flip" in second.output
        assert stored().get_tasks()[0].status.value == "pending"

    # Tests for TAGS and CLEAR-COMPLETED commands
    def test_tags(self, invoke):
        invoke('task', 'add', 'One', '-t', 'python', '-t', 'cli')
        invoke('task', 'add', 'Two', '-t', 'python')

        result = invoke('task', 'tags')

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert any(line.startswith("#cli") and line.rstrip().endswith("1") for line in lines)
        assert any(line.startswith("#python") and line.rstrip().endswith("2") for line in lines)

    def test_clear_completed(self, invoke, stored):
        invoke('task', 'add', 'Open')
        invoke('task', 'add', 'Done', '-s', 'completed')

        result = invoke('task', 'clear-completed', '--yes')

        assert result.exit_code == 0
        assert "Removed 1 completed task(s)" in result.output
        assert [t.title for t in stored().get_tasks()] == ["Open"]
