"""Bounded row samples for the current selection."""

import logging
from collections.abc import Sequence
from typing import Any, assert_never

from tablebridge.models.session import WorkflowSession
from tablebridge.models.workflow import Column, FileLocator, PreviewResult, TableLocator
from tablebridge.services.api_client import IngestApiClient
from tablebridge.services.preconditions import NO_FILE, require_columns, require_locator

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """Quote a ClickHouse identifier with backticks."""
    escaped = name.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def build_preview_query(table: str, columns: Sequence[str], limit: int) -> str:
    """Build the bounded SELECT used to sample a table."""
    column_list = ", ".join(quote_identifier(name) for name in columns)
    return f"SELECT {column_list} FROM {quote_identifier(table)} LIMIT {int(limit)}"


def project_rows(
    rows: Sequence[Sequence[Any]],
    header: Sequence[Column],
    selected: Sequence[str],
) -> list[tuple[Any, ...]]:
    """Keep only the selected cells of full-width file rows.

    Cells are located by header position; a short row yields None for the
    missing cells.
    """
    positions = {column.name: index for index, column in enumerate(header)}
    indexes = [positions[name] for name in selected]
    return [
        tuple(row[index] if index < len(row) else None for index in indexes)
        for row in rows
    ]


class PreviewFetcher:
    """Fetches a preview of the selected columns from the current source."""

    def __init__(
        self,
        session: WorkflowSession,
        client: IngestApiClient,
        row_limit: int = 100,
    ) -> None:
        self.session = session
        self.client = client
        self.row_limit = row_limit

    async def fetch(self) -> PreviewResult | None:
        """Fetch a new preview, replacing the previous one.

        Returns None when a precondition is not met.
        """
        session = self.session
        if not require_columns(session, "preview"):
            return None
        locator = require_locator(session)
        if locator is None:
            return None

        session.preview = None
        names = session.selected_column_names

        match locator:
            case TableLocator(table=table):
                query = build_preview_query(table, names, self.row_limit)
                rows = await self.client.export(session.connection, table, names, query=query)
                result = PreviewResult(columns=names, rows=[tuple(row) for row in rows])
            case FileLocator() as file_locator:
                if not file_locator.path:
                    session.status.warn(NO_FILE)
                    return None
                rows = await self.client.file_preview(
                    file_locator.path, session.file.delimiter, self.row_limit
                )
                result = PreviewResult(
                    columns=names, rows=project_rows(rows, session.columns, names)
                )
            case _:
                assert_never(locator)

        session.preview = result
        logger.info(f"Fetched preview with {result.row_count} rows")
        return result
