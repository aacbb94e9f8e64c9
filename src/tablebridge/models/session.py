"""Session state shared by the workflow components."""

from dataclasses import dataclass, field

from tablebridge.models.connection import ConnectionProfile, FileProfile, SourceKind
from tablebridge.models.selection import ColumnSelectionSet
from tablebridge.models.workflow import (
    Column,
    FileLocator,
    OperationStatus,
    PreviewResult,
    SourceLocator,
    TableLocator,
)


@dataclass
class WorkflowSession:
    """Everything the workflow knows while the UI session is open.

    Passed explicitly to each component; nothing here is persisted.
    """

    source: SourceKind = SourceKind.DATABASE
    connection: ConnectionProfile = field(default_factory=ConnectionProfile)
    file: FileProfile = field(default_factory=FileProfile)
    tables: list[str] = field(default_factory=list)
    selected_table: str = ""
    # Explicit destination for file imports; derived from the file name when empty.
    target_table: str = ""
    columns: list[Column] = field(default_factory=list)
    selection: ColumnSelectionSet = field(default_factory=ColumnSelectionSet)
    preview: PreviewResult | None = None
    status: OperationStatus = field(default_factory=OperationStatus)

    @property
    def target(self) -> SourceKind:
        """The target is always the complement of the source."""
        return self.source.other

    @property
    def selected_columns(self) -> list[Column]:
        """Selected columns in schema order."""
        return self.selection.ordered(self.columns)

    @property
    def selected_column_names(self) -> list[str]:
        return [column.name for column in self.selected_columns]

    def resolve_locator(self) -> SourceLocator | None:
        """Return where the current source reads from, or None if unresolved."""
        if self.source is SourceKind.DATABASE:
            return TableLocator(self.selected_table) if self.selected_table else None
        selected = self.file.selected_file
        return FileLocator(selected) if selected is not None else None
