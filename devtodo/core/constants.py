"""Constants used throughout devtodo."""


# Local data directory
DATA_DIR_NAME = ".devtodo"
STORE_FILE_NAME = "store.json"
HOME_ENV_VAR = "DEVTODO_HOME"

# Storage keys
KEY_PREFIX = "@devtodo:"
STORAGE_KEYS = {
    "APP_VERSION": f"{KEY_PREFIX}app_version",
    "TASKS": f"{KEY_PREFIX}tasks",
    "SETTINGS": f"{KEY_PREFIX}settings",
    "USERNAME": f"{KEY_PREFIX}username",
    "THEME": f"{KEY_PREFIX}theme",
    "LAST_SYNC": f"{KEY_PREFIX}last_sync",
    "FIRST_LAUNCH": f"{KEY_PREFIX}first_launch",
    "STREAK": f"{KEY_PREFIX}streak",
    "TOTAL_COMPLETED": f"{KEY_PREFIX}total_completed",
}

# Storage schema version (bumped only together with a migration step)
CURRENT_VERSION = 1

# Version stamped into JSON task exports
EXPORT_FORMAT_VERSION = "1.0.0"

# Task field values
TASK_CATEGORIES = ["learning", "coding", "assignment", "project", "personal"]
TASK_PRIORITIES = ["high", "medium", "low"]
TASK_STATUSES = ["pending", "in-progress", "completed", "archived"]

# Ranks used by the query engine
PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}
STATUS_ORDER = {"pending": 0, "in-progress": 1, "completed": 2, "archived": 3}

MAX_TITLE_LENGTH = 200

# Export file extensions per format
EXPORT_EXTENSIONS = {
    "json": "json",
    "markdown": "md",
    "text": "txt",
    "github": "md",
}
EXPORT_FILENAME_PREFIX = "todo-export"

# Date format used in human readable exports and the markdown importer
EXPORT_DATE_FORMAT = "%Y-%m-%d"

# Table display
SHORT_ID_LENGTH = 8
MAX_TITLE_DISPLAY = 50
