"""Service layer for exporting, importing and tracking tasks."""

from .export_service import ExportFormat, ExportOptions, ExportService
from .import_service import ImportFormat, ImportResult, ImportService
from .exceptions import (
    ServiceError,
    StorageError,
    StorageErrorCode,
    ExportServiceError,
    UnsupportedFormatError,
    ImportServiceError,
    InvalidImportError,
)

__all__ = [
    "ExportFormat",
    "ExportOptions",
    "ExportService",
    "ImportFormat",
    "ImportResult",
    "ImportService",
    "ServiceError",
    "StorageError",
    "StorageErrorCode",
    "ExportServiceError",
    "UnsupportedFormatError",
    "ImportServiceError",
    "InvalidImportError",
]
