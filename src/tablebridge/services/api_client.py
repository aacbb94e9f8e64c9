"""HTTP client for the ingestion API server."""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from tablebridge.config import DEFAULT_MAX_UPLOAD_BYTES, AppConfig
from tablebridge.exceptions import ServiceError, UploadTooLargeError
from tablebridge.models.connection import ConnectionProfile
from tablebridge.models.workflow import Column

logger = logging.getLogger(__name__)


class ApiResponse(BaseModel):
    """Envelope returned by every API endpoint."""

    success: bool = False
    message: str = ""
    data: Any = None
    error: str | None = None


class IngestApiClient:
    """Request/response access to the ClickHouse and file services.

    Every failure, whether transport, HTTP status or an envelope with
    ``success`` unset, is raised as :class:`ServiceError` carrying the
    server-supplied text when there is one.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080/api",
        *,
        timeout: float | None = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_config(cls, config: AppConfig) -> "IngestApiClient":
        """Create a client from application config."""
        return cls(
            config.api.base_url,
            timeout=config.api.timeout_seconds,
            max_upload_bytes=config.api.max_upload_bytes,
        )

    async def __aenter__(self) -> "IngestApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def connect(self, profile: ConnectionProfile) -> None:
        """Check that the database accepts the connection parameters."""
        await self._request(
            "POST", "/clickhouse/connect", "Connection failed", json=profile.to_payload()
        )

    async def list_tables(self, profile: ConnectionProfile) -> list[str]:
        """List tables in the profile's database."""
        data = await self._request(
            "POST", "/clickhouse/tables", "Failed to load tables", json=profile.to_payload()
        )
        return [str(name) for name in data or []]

    async def list_columns(self, profile: ConnectionProfile, table: str) -> list[Column]:
        """Fetch column metadata for a table."""
        fallback = "Failed to load columns"
        data = await self._request(
            "POST",
            f"/clickhouse/columns/{quote(table, safe='')}",
            fallback,
            json=profile.to_payload(),
        )
        try:
            return [Column.model_validate(item) for item in data or []]
        except ValidationError as e:
            raise ServiceError(fallback) from e

    async def upload_file(self, path: Path, name: str | None = None) -> str:
        """Upload a local file and return the server-side path."""
        fallback = "Failed to upload file"
        name = name or path.name

        try:
            size = path.stat().st_size
        except OSError as e:
            raise ServiceError(f"Cannot read {path}: {e.strerror}") from e
        if size > self.max_upload_bytes:
            raise UploadTooLargeError(self.max_upload_bytes)

        try:
            content = await asyncio.get_running_loop().run_in_executor(None, path.read_bytes)
        except OSError as e:
            raise ServiceError(f"Cannot read {path}: {e.strerror}") from e

        logger.info(f"Uploading {name} ({size} bytes)")
        data = await self._request(
            "POST", "/file/upload", fallback, files={"file": (name, content)}
        )
        if not isinstance(data, dict) or not data.get("filePath"):
            raise ServiceError(fallback)
        return str(data["filePath"])

    async def file_columns(self, file_path: str, delimiter: str) -> list[str]:
        """Read the header row of an uploaded file."""
        data = await self._request(
            "GET",
            "/file/columns",
            "Failed to read file header",
            params={"filePath": file_path, "delimiter": delimiter},
        )
        return [str(name) for name in data or []]

    async def file_preview(self, file_path: str, delimiter: str, limit: int) -> list[list[Any]]:
        """Read up to ``limit`` data rows of an uploaded file."""
        data = await self._request(
            "GET",
            "/file/preview",
            "Failed to fetch preview data",
            params={"filePath": file_path, "delimiter": delimiter, "limit": limit},
        )
        return list(data or [])

    async def export(
        self,
        profile: ConnectionProfile,
        table: str,
        columns: Sequence[str],
        query: str | None = None,
    ) -> list[list[Any]]:
        """Read rows of the given columns from a table."""
        body: dict[str, Any] = {
            "config": profile.to_payload(),
            "table": table,
            "columns": list(columns),
        }
        if query:
            body["query"] = query
        data = await self._request("POST", "/clickhouse/export", "Failed to process data", json=body)
        return list(data or [])

    async def import_file(
        self,
        profile: ConnectionProfile,
        table: str,
        columns: Sequence[Column],
        file_path: str,
        delimiter: str,
    ) -> Any:
        """Load an uploaded file into a table; returns the raw response data."""
        body = {
            "config": profile.to_payload(),
            "table": table,
            "columns": [column.model_dump() for column in columns],
            "filePath": file_path,
            "delimiter": delimiter,
        }
        return await self._request("POST", "/clickhouse/import", "Failed to process data", json=body)

    async def cleanup_file(self, file_path: str) -> None:
        """Remove an uploaded file from the server."""
        await self._request(
            "POST", "/file/cleanup", "Failed to clean up file", params={"filePath": file_path}
        )

    async def _request(self, method: str, path: str, fallback: str, **kwargs: Any) -> Any:
        """Send a request and unwrap the response envelope."""
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ServiceError(str(e) or fallback) from e

        try:
            envelope = ApiResponse.model_validate(response.json())
        except ValueError:
            raise ServiceError(fallback, status_code=response.status_code) from None

        if response.is_error or not envelope.success:
            raise ServiceError(envelope.error or fallback, status_code=response.status_code)
        return envelope.data
