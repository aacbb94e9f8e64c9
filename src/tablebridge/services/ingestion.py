"""Runs a transfer between the database and a flat file."""

import logging
import re
from pathlib import Path
from typing import Any, assert_never

from tablebridge.models.session import WorkflowSession
from tablebridge.models.workflow import FileLocator, TableLocator
from tablebridge.services.api_client import IngestApiClient
from tablebridge.services.export_writer import DelimitedFileWriter
from tablebridge.services.preconditions import require_columns, require_locator

logger = logging.getLogger(__name__)

_INVALID_TABLE_CHARS = re.compile(r"[^A-Za-z0-9_]")

NO_OUTPUT_PATH = "Please enter an output file path."
NO_FILE_PLACEHOLDER = "[select file]"


def derive_table_name(filename: str) -> str:
    """Turn a file name into a table name.

    Everything from the first dot on is dropped and any character outside
    [A-Za-z0-9_] becomes an underscore.
    """
    stem = filename.split(".")[0]
    return _INVALID_TABLE_CHARS.sub("_", stem)


def target_display_name(database: str, filename: str | None, table: str = "") -> str:
    """Qualified name of the table a file import writes to."""
    if table:
        return f"{database}.{table}"
    if not filename:
        return NO_FILE_PLACEHOLDER
    return f"{database}.{derive_table_name(filename)}"


def count_processed(data: Any) -> int:
    """Record count reported by an import response."""
    if isinstance(data, list):
        return len(data)
    if isinstance(data, dict):
        try:
            return int(data.get("rows_imported") or 0)
        except (TypeError, ValueError):
            return 0
    return 0


class IngestionOrchestrator:
    """Validates, uploads if needed, then dispatches the transfer.

    Steps run strictly in order and the first failure aborts the run;
    recovery is a full re-run.
    """

    def __init__(
        self,
        session: WorkflowSession,
        client: IngestApiClient,
        writer: DelimitedFileWriter | None = None,
    ) -> None:
        self.session = session
        self.client = client
        self.writer = writer

    async def start(self) -> int | None:
        """Run the transfer and return the processed record count.

        Returns None when a precondition is not met.
        """
        session = self.session
        if not require_columns(session, "ingest"):
            return None
        locator = require_locator(session)
        if locator is None:
            return None

        match locator:
            case TableLocator(table=table):
                if not session.file.output_path.strip():
                    session.status.warn(NO_OUTPUT_PATH)
                    return None
                count = await self._export(table)
            case FileLocator() as file_locator:
                count = await self._import(file_locator)
            case _:
                assert_never(locator)

        session.status.success(f"Successfully processed {count} records")
        return count

    async def _export(self, table: str) -> int:
        session = self.session
        names = session.selected_column_names
        rows = await self.client.export(session.connection, table, names)

        output = Path(session.file.output_path.strip()).expanduser()
        writer = self.writer or DelimitedFileWriter(session.file.delimiter)
        await writer.write_async(output, names, rows)

        logger.info(f"Exported {len(rows)} rows from {table} to {output}")
        return len(rows)

    async def _import(self, locator: FileLocator) -> int:
        session = self.session
        file = locator.file

        if not file.is_uploaded:
            file.uploaded_path = await self.client.upload_file(file.local_path, file.name)

        table = session.target_table.strip() or derive_table_name(file.name)
        data = await self.client.import_file(
            session.connection,
            table,
            session.selected_columns,
            file.uploaded_path,
            session.file.delimiter,
        )

        count = count_processed(data)
        logger.info(f"Imported {count} records from {file.name} into {table}")
        return count
