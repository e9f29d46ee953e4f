"""Custom exceptions for service layer."""

from enum import Enum


class StorageErrorCode(str, Enum):
    """Stable codes carried by StorageError."""
    INIT_ERROR = "INIT_ERROR"
    VERSION_READ_ERROR = "VERSION_READ_ERROR"
    VERSION_WRITE_ERROR = "VERSION_WRITE_ERROR"
    MIGRATION_ERROR = "MIGRATION_ERROR"
    TASK_READ_ERROR = "TASK_READ_ERROR"
    TASK_PARSE_ERROR = "TASK_PARSE_ERROR"
    TASK_WRITE_ERROR = "TASK_WRITE_ERROR"
    TASK_CREATE_ERROR = "TASK_CREATE_ERROR"
    TASK_UPDATE_ERROR = "TASK_UPDATE_ERROR"
    TASK_DELETE_ERROR = "TASK_DELETE_ERROR"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    SETTINGS_READ_ERROR = "SETTINGS_READ_ERROR"
    SETTINGS_WRITE_ERROR = "SETTINGS_WRITE_ERROR"
    USERNAME_READ_ERROR = "USERNAME_READ_ERROR"
    USERNAME_WRITE_ERROR = "USERNAME_WRITE_ERROR"
    USERNAME_DELETE_ERROR = "USERNAME_DELETE_ERROR"
    STATS_READ_ERROR = "STATS_READ_ERROR"
    STREAK_WRITE_ERROR = "STREAK_WRITE_ERROR"
    STATS_WRITE_ERROR = "STATS_WRITE_ERROR"
    IMPORT_INVALID_FORMAT = "IMPORT_INVALID_FORMAT"
    IMPORT_ERROR = "IMPORT_ERROR"
    EXPORT_ERROR = "EXPORT_ERROR"
    CLEAR_ALL_ERROR = "CLEAR_ALL_ERROR"
    INFO_ERROR = "INFO_ERROR"


class ServiceError(Exception):
    """Base exception for all service-related errors."""

    pass


class StorageError(ServiceError):
    """Exception raised for task store operations.

    Attributes:
        code: StorageErrorCode identifying the failed operation
    """

    def __init__(self, message: str, code: StorageErrorCode):
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        return f"{self.args[0]} ({self.code.value})"


class ExportServiceError(ServiceError):
    """Exception raised for export operations."""

    pass


class UnsupportedFormatError(ExportServiceError):
    """Exception raised when an export format is not supported."""

    pass


class ImportServiceError(ServiceError):
    """Exception raised for import operations."""

    pass


class InvalidImportError(ImportServiceError):
    """Exception raised when import content cannot be parsed at all."""

    pass
