"""Guided ingestion workflow: one entry point over all components."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tablebridge.config import AppConfig, get_config
from tablebridge.models.connection import SelectedFile, SourceKind
from tablebridge.models.session import WorkflowSession
from tablebridge.models.workflow import Column, OperationStatus, PreviewResult
from tablebridge.services.api_client import IngestApiClient
from tablebridge.services.ingestion import IngestionOrchestrator, target_display_name
from tablebridge.services.preconditions import NO_FILE
from tablebridge.services.preview_fetcher import PreviewFetcher
from tablebridge.services.schema_loader import SchemaLoader
from tablebridge.services.source_selector import SourceTargetSelector
from tablebridge.services.task_runner import AsyncTaskRunner

logger = logging.getLogger(__name__)

INVALID_PORT = "Port must be a number between 1 and 65535"
RELOAD_FILE = "Delimiter changed; load the file again to read its columns."


class IngestionWorkflow:
    """Wires the session, client and components together.

    Every network operation runs through a single :class:`AsyncTaskRunner`,
    so at most one is in flight; ``on_change`` is called whenever the busy
    state flips.
    """

    def __init__(
        self,
        client: IngestApiClient,
        session: WorkflowSession | None = None,
        config: AppConfig | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._config = config or get_config()
        self.client = client
        self.session = session or self._new_session()
        self.runner = AsyncTaskRunner(self.session.status, on_change)
        self.selector = SourceTargetSelector(self.session)
        self.schema_loader = SchemaLoader(self.session, client, self.selector)
        self.preview_fetcher = PreviewFetcher(
            self.session, client, self._config.workflow.preview_row_limit
        )
        self.orchestrator = IngestionOrchestrator(self.session, client)
        self.pending_cleanup: list[str] = []

    def _new_session(self) -> WorkflowSession:
        defaults = self._config.workflow
        session = WorkflowSession()
        session.connection.host = defaults.host
        session.connection.port = defaults.port
        session.connection.database = defaults.database
        session.connection.user = defaults.user
        session.file.delimiter = defaults.default_delimiter
        return session

    @property
    def status(self) -> OperationStatus:
        return self.session.status

    @property
    def busy(self) -> bool:
        return self.runner.busy

    # Synchronous state changes

    def set_source(self, kind: SourceKind) -> None:
        """Switch the source; a dropped upload waits for :meth:`release_uploads`."""
        dropped = self.selector.set_source(kind)
        if dropped is not None and dropped.uploaded_path:
            self.pending_cleanup.append(dropped.uploaded_path)

    def update_connection(self, **fields: Any) -> bool:
        """Apply connection field changes.

        Tables are forgotten when the host, port or database changes. Returns
        False, leaving the profile unchanged, if a value is rejected.
        """
        connection = self.session.connection
        before = connection.target_key
        try:
            updated = connection.model_validate({**connection.model_dump(), **fields})
        except ValidationError:
            self.status.warn(INVALID_PORT if "port" in fields else "Invalid connection settings")
            return False

        for name in fields:
            setattr(connection, name, getattr(updated, name))
        if connection.target_key != before and self.session.tables:
            logger.info("Connection target changed; clearing table list")
            self.selector.reset_tables()
        return True

    def set_delimiter(self, delimiter: str) -> bool:
        """Change the delimiter.

        Columns read from a file header with the old delimiter are dropped;
        the file has to be loaded again.
        """
        file = self.session.file
        before = file.delimiter
        try:
            file.delimiter = delimiter
        except ValidationError:
            self.status.warn("Delimiter must be a single character")
            return False

        if (
            file.delimiter != before
            and self.session.source is SourceKind.FILE
            and self.session.columns
        ):
            self.selector.reset_schema()
            self.status.info(RELOAD_FILE)
        return True

    def set_output_path(self, path: str) -> None:
        self.session.file.output_path = path

    def set_target_table(self, table: str) -> None:
        self.session.target_table = table.strip()

    def toggle_column(self, column: Column) -> bool:
        """Toggle a loaded column; columns outside the schema are ignored."""
        if all(loaded.name != column.name for loaded in self.session.columns):
            logger.debug(f"Ignoring toggle of unknown column {column.name}")
            return False
        selected = self.session.selection.toggle(column)
        self.session.preview = None
        return selected

    def select_all_columns(self) -> None:
        self.session.selection.select_all(self.session.columns)
        self.session.preview = None

    def deselect_all_columns(self) -> None:
        self.session.selection.clear()
        self.session.preview = None

    def target_display_name(self) -> str:
        session = self.session
        selected = session.file.selected_file
        return target_display_name(
            session.connection.database,
            selected.name if selected else None,
            session.target_table,
        )

    def can_preview(self) -> bool:
        return (
            not self.busy
            and bool(self.session.selected_columns)
            and self.session.resolve_locator() is not None
        )

    def can_start(self) -> bool:
        if not self.can_preview():
            return False
        if self.session.source is SourceKind.DATABASE:
            return bool(self.session.file.output_path.strip())
        return True

    # Operations; each returns False if another one is in flight

    async def connect(self) -> bool:
        return await self.runner.run("Connecting to ClickHouse", self.schema_loader.connect)

    async def select_table(self, table: str) -> bool:
        if not table:
            self.session.selected_table = ""
            self.selector.reset_schema()
            return False
        return await self.runner.run(
            "Loading columns", self.schema_loader.load_from_database, table
        )

    async def select_file(self, path: str | Path) -> bool:
        if not str(path).strip():
            self.status.warn(NO_FILE)
            return False
        selected = SelectedFile.from_path(Path(str(path).strip()).expanduser())
        return await self.runner.run(
            "Reading file columns", self.schema_loader.load_from_file, selected
        )

    async def discard_file(self) -> bool:
        return await self.runner.run("Removing uploaded file", self._discard_file)

    async def release_uploads(self) -> bool:
        """Remove server copies of files dropped by a source switch."""
        if not self.pending_cleanup:
            return False
        return await self.runner.run("Removing uploaded file", self._release_uploads)

    async def preview(self) -> PreviewResult | None:
        """Fetch a preview; returns it only if this call produced a new one."""
        before = self.session.preview
        await self.runner.run("Fetching preview data", self.preview_fetcher.fetch)
        after = self.session.preview
        return after if after is not None and after is not before else None

    async def start(self) -> bool:
        return await self.runner.run("Starting ingestion", self.orchestrator.start)

    async def _discard_file(self) -> None:
        selected = self.session.file.selected_file
        if selected is None:
            return
        self.session.file.selected_file = None
        self.selector.reset_schema()
        if selected.uploaded_path:
            await self.client.cleanup_file(selected.uploaded_path)
        self.status.info(f"Removed {selected.name}")

    async def _release_uploads(self) -> None:
        while self.pending_cleanup:
            await self.client.cleanup_file(self.pending_cleanup[0])
            self.pending_cleanup.pop(0)
