"""Source/target selection and the downstream resets it triggers."""

import logging

from tablebridge.models.connection import SelectedFile, SourceKind
from tablebridge.models.session import WorkflowSession

logger = logging.getLogger(__name__)


class SourceTargetSelector:
    """Owns the source kind and invalidates state that depends on it."""

    def __init__(self, session: WorkflowSession) -> None:
        self.session = session

    @property
    def source(self) -> SourceKind:
        return self.session.source

    @property
    def target(self) -> SourceKind:
        return self.session.target

    def set_source(self, kind: SourceKind) -> SelectedFile | None:
        """Switch the source kind and reset everything loaded for the old one.

        Returns the file selection that was dropped, if any.
        """
        session = self.session
        dropped = session.file.selected_file
        session.source = SourceKind(kind)
        self.reset_tables()
        session.target_table = ""
        session.file.selected_file = None
        session.status.clear_message()
        logger.info(f"Source set to {session.source.value}, target {session.target.value}")
        return dropped

    def reset_tables(self) -> None:
        """Forget discovered tables and anything loaded from them."""
        self.session.tables = []
        self.session.selected_table = ""
        self.reset_schema()

    def reset_schema(self) -> None:
        """Forget loaded columns, the selection and any preview."""
        self.session.columns = []
        self.session.selection.clear()
        self.session.preview = None
