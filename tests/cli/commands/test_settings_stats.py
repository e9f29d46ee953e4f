"""Tests for settings and stats commands."""

import yaml


class TestSettingsCommand:
    """Test settings command functionality."""

    def test_show_defaults(self, invoke):
        result = invoke('settings', 'show')

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["theme"] == "vscode-dark"
        assert data["fontSize"] == 14

    def test_set_accepts_camel_case_key(self, invoke, stored):
        result = invoke('settings', 'set', 'fontSize', '18')

        assert result.exit_code == 0, result.output
        assert stored().get_settings().font_size == 18

    def test_set_boolean(self, invoke, stored):
        invoke('settings', 'set', 'sound_enabled', 'true')
        assert stored().get_settings().sound_enabled is True

    def test_set_unknown_key(self, invoke):
        result = invoke('settings', 'set', 'colour', 'red')

        assert result.exit_code == 2
        assert "Unknown setting: colour" in result.output

    def test_set_invalid_value(self, invoke, stored):
        result = invoke('settings', 'set', 'week_starts_on', 'friday')

        assert result.exit_code == 1
        assert "Invalid value for week_starts_on" in result.output
        assert stored().get_settings().week_starts_on == "monday"

    def test_clear_optional_setting(self, invoke, stored):
        invoke('settings', 'set', 'focus_duration', '1500')
        invoke('settings', 'set', 'focus_duration', 'none')

        assert stored().get_settings().focus_duration is None

    def test_reset(self, invoke, stored):
        invoke('settings', 'set', 'theme', 'monokai')

        result = invoke('settings', 'reset', '--yes')

        assert result.exit_code == 0
        assert stored().get_settings().theme == "vscode-dark"


class TestStatsCommand:
    """Test stats command functionality."""

    def test_stats(self, invoke, stored):
        invoke('task', 'add', 'Open', '-c', 'coding')
        invoke('task', 'add', 'Done')
        done_id = stored().get_tasks()[1].id
        invoke('task', 'toggle', done_id)

        result = invoke('stats')

        assert result.exit_code == 0, result.output
        assert "Streak: 1 day(s)" in result.output
        assert "Completed (lifetime): 1" in result.output
        assert "Tasks: 2 (1 completed)" in result.output
        assert "coding" in result.output

    def test_stats_empty(self, invoke):
        result = invoke('stats')

        assert result.exit_code == 0
        assert "Streak: 0 day(s)" in result.output
