"""Workflow state models: columns, previews, source locators and status."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tablebridge.models.connection import SelectedFile

# File headers carry no type information.
UNTYPED_COLUMN_TYPE = "String"


class Column(BaseModel):
    """A column discovered by a schema load."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = UNTYPED_COLUMN_TYPE
    nullable: bool = True

    @property
    def type_display(self) -> str:
        """Type with nullability, for display."""
        return f"{self.type} (Nullable)" if self.nullable else self.type


@dataclass(frozen=True)
class TableLocator:
    """A database table to read from."""

    table: str


@dataclass(frozen=True)
class FileLocator:
    """An uploaded file to read from."""

    file: SelectedFile

    @property
    def path(self) -> str:
        """Server-side path of the uploaded file."""
        return self.file.uploaded_path or ""


SourceLocator = TableLocator | FileLocator


class PreviewResult(BaseModel):
    """A bounded sample of rows for the selected columns."""

    columns: list[str] = Field(default_factory=list)
    rows: list[tuple[Any, ...]] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Number of sampled rows."""
        return len(self.rows)


class Severity(str, Enum):
    """Status message severity."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class StatusMessage(BaseModel):
    """A message shown to the user."""

    severity: Severity
    text: str


class OperationStatus(BaseModel):
    """Busy state and the single message slot for a workflow session."""

    busy: bool = False
    label: str = ""
    message: StatusMessage | None = None

    def info(self, text: str) -> None:
        self.message = StatusMessage(severity=Severity.INFO, text=text)

    def success(self, text: str) -> None:
        self.message = StatusMessage(severity=Severity.SUCCESS, text=text)

    def warn(self, text: str) -> None:
        self.message = StatusMessage(severity=Severity.WARNING, text=text)

    def error(self, text: str) -> None:
        self.message = StatusMessage(severity=Severity.ERROR, text=text)

    def clear_message(self) -> None:
        self.message = None

    @property
    def severity(self) -> Severity | None:
        """Severity of the current message, if any."""
        return self.message.severity if self.message else None
