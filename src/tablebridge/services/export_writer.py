"""Writes exported rows to a local delimited file."""

import asyncio
import csv
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from tablebridge.exceptions import TableBridgeError

logger = logging.getLogger(__name__)


class DelimitedFileWriter:
    """Writes a header row followed by data rows."""

    def __init__(self, delimiter: str = ",") -> None:
        self.delimiter = delimiter

    def write(self, path: Path, header: Sequence[str], rows: Sequence[Sequence[Any]]) -> int:
        """Write the file and return the number of data rows written."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, delimiter=self.delimiter)
                writer.writerow(header)
                for row in rows:
                    writer.writerow(["" if value is None else value for value in row])
        except OSError as e:
            raise TableBridgeError(f"Failed to write {path}: {e.strerror}") from e

        logger.info(f"Wrote {len(rows)} rows to {path}")
        return len(rows)

    async def write_async(
        self, path: Path, header: Sequence[str], rows: Sequence[Sequence[Any]]
    ) -> int:
        """Write the file without blocking the event loop."""
        return await asyncio.get_running_loop().run_in_executor(
            None, self.write, path, header, rows
        )
