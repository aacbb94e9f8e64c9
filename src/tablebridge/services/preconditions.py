"""Checks that gate preview and ingestion.

A failed check sets a warning on the session status and returns None. It
is guidance for the user, not an error.
"""

from tablebridge.models.connection import SourceKind
from tablebridge.models.session import WorkflowSession
from tablebridge.models.workflow import SourceLocator

NO_TABLE = "Please select a table first."
NO_FILE = "Please select a file first."


def require_columns(session: WorkflowSession, action: str) -> bool:
    """Warn and return False when no columns are selected."""
    if not session.selected_columns:
        session.status.warn(f"Please select columns to {action}.")
        return False
    return True


def require_locator(session: WorkflowSession) -> SourceLocator | None:
    """Resolve the source locator, warning when it is missing."""
    locator = session.resolve_locator()
    if locator is None:
        session.status.warn(NO_TABLE if session.source is SourceKind.DATABASE else NO_FILE)
    return locator
