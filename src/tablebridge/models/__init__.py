"""Data models for tablebridge."""

from tablebridge.models.connection import (
    ConnectionProfile,
    FileProfile,
    SelectedFile,
    SourceKind,
)
from tablebridge.models.selection import ColumnSelectionSet
from tablebridge.models.session import WorkflowSession
from tablebridge.models.workflow import (
    UNTYPED_COLUMN_TYPE,
    Column,
    FileLocator,
    OperationStatus,
    PreviewResult,
    Severity,
    SourceLocator,
    StatusMessage,
    TableLocator,
)

__all__ = [
    "UNTYPED_COLUMN_TYPE",
    "Column",
    "ColumnSelectionSet",
    "ConnectionProfile",
    "FileLocator",
    "FileProfile",
    "OperationStatus",
    "PreviewResult",
    "SelectedFile",
    "Severity",
    "SourceKind",
    "SourceLocator",
    "StatusMessage",
    "TableLocator",
    "WorkflowSession",
]
