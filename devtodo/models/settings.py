"""User settings models."""

from typing import Literal, Optional

from .task import CamelModel, TaskPriority


WeekStart = Literal["monday", "sunday"]
DateFormat = Literal["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD"]


class UserSettings(CamelModel):
    """User preferences, stored as a single record."""
    theme: str = "vscode-dark"
    font_size: int = 14
    notifications: bool = True
    sound_enabled: bool = False
    default_priority: TaskPriority = TaskPriority.MEDIUM
    auto_archive: bool = True
    week_starts_on: WeekStart = "monday"
    # Notification preferences
    daily_summary_enabled: Optional[bool] = None
    daily_summary_time: Optional[str] = None  # "HH:MM"
    streak_notifications_enabled: Optional[bool] = None
    overdue_alerts_enabled: Optional[bool] = None
    upcoming_deadline_hours: Optional[int] = None
    # Display preferences
    date_format: Optional[DateFormat] = None
    use_24_hour_time: Optional[bool] = None
    # Timer preferences
    focus_duration: Optional[int] = None  # seconds
    break_duration: Optional[int] = None  # seconds
    long_break_interval: Optional[int] = None  # pomodoros before a long break

    def apply(self, patch: "SettingsPatch") -> "UserSettings":
        """Shallow merge: keys set on ``patch`` overwrite, everything else is kept."""
        data = dict(self)
        data.update({name: getattr(patch, name) for name in patch.model_fields_set})
        return UserSettings.model_validate(data)


class SettingsPatch(CamelModel):
    """Partial update for user settings."""
    theme: Optional[str] = None
    font_size: Optional[int] = None
    notifications: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    default_priority: Optional[TaskPriority] = None
    auto_archive: Optional[bool] = None
    week_starts_on: Optional[WeekStart] = None
    daily_summary_enabled: Optional[bool] = None
    daily_summary_time: Optional[str] = None
    streak_notifications_enabled: Optional[bool] = None
    overdue_alerts_enabled: Optional[bool] = None
    upcoming_deadline_hours: Optional[int] = None
    date_format: Optional[DateFormat] = None
    use_24_hour_time: Optional[bool] = None
    focus_duration: Optional[int] = None
    break_duration: Optional[int] = None
    long_break_interval: Optional[int] = None
