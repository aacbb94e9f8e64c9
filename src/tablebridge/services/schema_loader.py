"""Table and column discovery for either source kind."""

import logging

from tablebridge.exceptions import ServiceError
from tablebridge.models.connection import SelectedFile
from tablebridge.models.session import WorkflowSession
from tablebridge.models.workflow import UNTYPED_COLUMN_TYPE, Column
from tablebridge.services.api_client import IngestApiClient
from tablebridge.services.source_selector import SourceTargetSelector

logger = logging.getLogger(__name__)


class SchemaLoader:
    """Loads tables and columns into the session.

    Each load clears the previous schema before issuing its first request,
    so a failed load leaves an empty column list rather than a stale one.
    Errors from the client propagate to the caller.
    """

    def __init__(
        self,
        session: WorkflowSession,
        client: IngestApiClient,
        selector: SourceTargetSelector,
    ) -> None:
        self.session = session
        self.client = client
        self.selector = selector

    async def connect(self) -> None:
        """Connect to the database and list its tables."""
        self.selector.reset_tables()
        profile = self.session.connection

        await self.client.connect(profile)
        tables = await self.client.list_tables(profile)

        self.session.tables = tables
        logger.info(f"Found {len(tables)} tables in {profile.database} on {profile.display_host}")
        self.session.status.success(f"Connected! Found {len(tables)} tables.")

    async def load_from_database(self, table: str) -> None:
        """Load column metadata for a table and select all of it."""
        self.session.selected_table = table
        self.selector.reset_schema()

        columns = await self.client.list_columns(self.session.connection, table)

        self._replace_columns(columns)
        self.session.status.success(f"Loaded {len(columns)} columns from {table}")

    async def load_from_file(self, file: SelectedFile) -> None:
        """Upload a file, read its header and select every column.

        The file selection is dropped on failure so the user picks again. A
        previously uploaded file is removed from the server first.
        """
        previous = self.session.file.selected_file
        self.session.file.selected_file = file
        self.selector.reset_schema()

        if previous is not None and previous.uploaded_path:
            try:
                await self.client.cleanup_file(previous.uploaded_path)
            except ServiceError as e:
                logger.warning(f"Could not remove {previous.uploaded_path}: {e.message}")

        try:
            file.uploaded_path = await self.client.upload_file(file.local_path, file.name)
            headers = await self.client.file_columns(
                file.uploaded_path, self.session.file.delimiter
            )
        except Exception:
            self.session.file.selected_file = None
            raise

        columns = [Column(name=name, type=UNTYPED_COLUMN_TYPE, nullable=True) for name in headers]
        self._replace_columns(columns)
        self.session.status.success(f"Found {len(columns)} columns in {file.name}")

    def _replace_columns(self, columns: list[Column]) -> None:
        self.session.columns = list(columns)
        self.session.selection.select_all(columns)
        logger.info(f"Loaded {len(columns)} columns")
