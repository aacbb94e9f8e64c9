"""Tests for the ingestion API client."""

import httpx
import pytest
from pydantic import SecretStr

from tablebridge.config import AppConfig
from tablebridge.exceptions import ServiceError, UploadTooLargeError
from tablebridge.models.connection import ConnectionProfile
from tablebridge.models.workflow import Column
from tablebridge.services.api_client import IngestApiClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def profile():
    return ConnectionProfile(
        host="ch.local", port=8123, database="analytics", user="loader",
        credential=SecretStr("token"),
    )


class TestEnvelope:
    """Tests for response envelope handling."""

    async def test_returns_data_on_success(self, server, client, profile):
        """Test the data field is unwrapped."""
        server.ok("POST", "/clickhouse/tables", ["events", "users"])

        assert await client.list_tables(profile) == ["events", "users"]

    async def test_null_data_is_empty(self, server, client, profile):
        """Test a null list comes back empty."""
        server.ok("POST", "/clickhouse/tables", None)

        assert await client.list_tables(profile) == []

    async def test_server_error_text_surfaced(self, server, client, profile):
        """Test the envelope error becomes the exception message."""
        server.fail("POST", "/clickhouse/connect", "auth failed", status=401)

        with pytest.raises(ServiceError) as exc_info:
            await client.connect(profile)

        assert exc_info.value.message == "auth failed"
        assert exc_info.value.status_code == 401

    async def test_missing_error_uses_fallback(self, server, client, profile):
        """Test an error without text uses the operation's fallback."""
        server.fail("POST", "/clickhouse/connect", None)

        with pytest.raises(ServiceError, match="Connection failed"):
            await client.connect(profile)

    async def test_unsuccessful_envelope_with_ok_status(self, server, client, profile):
        """Test success=false is a failure even on HTTP 200."""
        server.fail("POST", "/clickhouse/tables", "database missing", status=200)

        with pytest.raises(ServiceError, match="database missing"):
            await client.list_tables(profile)

    async def test_non_json_body_uses_fallback(self, server, client, profile):
        """Test an unparseable body raises with the fallback text."""
        server.on(
            "POST", "/clickhouse/tables", lambda request: httpx.Response(502, text="Bad gateway")
        )

        with pytest.raises(ServiceError) as exc_info:
            await client.list_tables(profile)

        assert exc_info.value.message == "Failed to load tables"
        assert exc_info.value.status_code == 502

    async def test_transport_error_wrapped(self, server, client, profile):
        """Test a connection failure becomes a ServiceError."""
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        server.on("POST", "/clickhouse/connect", refuse)

        with pytest.raises(ServiceError, match="connection refused"):
            await client.connect(profile)


class TestDatabaseEndpoints:
    """Tests for the ClickHouse endpoints."""

    async def test_connect_sends_profile(self, server, client, profile):
        """Test the connection payload is posted."""
        server.ok("POST", "/clickhouse/connect")

        await client.connect(profile)

        assert server.body("POST", "/clickhouse/connect") == {
            "host": "ch.local",
            "port": 8123,
            "database": "analytics",
            "user": "loader",
            "jwtToken": "token",
        }

    async def test_list_columns(self, server, client, profile):
        """Test column metadata is parsed."""
        server.ok(
            "POST",
            "/clickhouse/columns/events",
            [
                {"name": "id", "type": "UInt64", "nullable": False},
                {"name": "note", "type": "String", "nullable": True},
            ],
        )

        columns = await client.list_columns(profile, "events")

        assert columns == [
            Column(name="id", type="UInt64", nullable=False),
            Column(name="note", type="String", nullable=True),
        ]

    async def test_malformed_columns_use_fallback(self, server, client, profile):
        """Test entries without a name are rejected."""
        server.ok("POST", "/clickhouse/columns/events", [{"type": "UInt64"}])

        with pytest.raises(ServiceError, match="Failed to load columns"):
            await client.list_columns(profile, "events")

    async def test_table_name_quoted_in_path(self, server, client, profile):
        """Test reserved URL characters in a table name stay in the path segment."""
        server.ok("POST", "/clickhouse/columns/a/b#c?d", [{"name": "id"}])

        columns = await client.list_columns(profile, "a/b#c?d")

        assert [c.name for c in columns] == ["id"]
        assert server.requests[-1].url.raw_path == b"/api/clickhouse/columns/a%2Fb%23c%3Fd"

    async def test_export_body(self, server, client, profile):
        """Test the export request carries table, columns and query."""
        server.ok("POST", "/clickhouse/export", [[1, "a"], [2, "b"]])

        rows = await client.export(profile, "events", ["id", "name"], query="SELECT 1")

        assert rows == [[1, "a"], [2, "b"]]
        body = server.body("POST", "/clickhouse/export")
        assert body["table"] == "events"
        assert body["columns"] == ["id", "name"]
        assert body["query"] == "SELECT 1"
        assert body["config"]["database"] == "analytics"

    async def test_export_without_query_omits_field(self, server, client, profile):
        """Test no query key is sent for a full export."""
        server.ok("POST", "/clickhouse/export", [])

        await client.export(profile, "events", ["id"])

        assert "query" not in server.body("POST", "/clickhouse/export")

    async def test_import_body(self, server, client, profile):
        """Test the import request carries columns with their metadata."""
        server.ok("POST", "/clickhouse/import", {"rows_imported": 2})

        data = await client.import_file(
            profile, "sales", [Column(name="id")], "uploads/1_sales.csv", ";"
        )

        assert data == {"rows_imported": 2}
        body = server.body("POST", "/clickhouse/import")
        assert body["table"] == "sales"
        assert body["columns"] == [{"name": "id", "type": "String", "nullable": True}]
        assert body["filePath"] == "uploads/1_sales.csv"
        assert body["delimiter"] == ";"


class TestFileEndpoints:
    """Tests for the file endpoints."""

    async def test_upload_returns_server_path(self, server, client, sales_csv):
        """Test upload posts multipart content and returns filePath."""
        server.ok("POST", "/file/upload", {"filePath": "uploads/1_sales.csv"})

        uploaded = await client.upload_file(sales_csv)

        assert uploaded == "uploads/1_sales.csv"
        request = server.requests[-1]
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'filename="sales.csv"' in request.content
        assert b"id,amount" in request.content

    async def test_upload_over_limit_sends_nothing(self, server, client, tmp_path):
        """Test oversized files are refused before any request."""
        big = tmp_path / "big.csv"
        big.write_bytes(b"x" * 2048)

        with pytest.raises(UploadTooLargeError) as exc_info:
            await client.upload_file(big)

        assert exc_info.value.limit == 1024
        assert server.requests == []

    async def test_upload_missing_file(self, server, client, tmp_path):
        """Test a missing local file raises a ServiceError."""
        with pytest.raises(ServiceError, match="Cannot read"):
            await client.upload_file(tmp_path / "absent.csv")

        assert server.requests == []

    async def test_upload_without_path_in_reply(self, server, client, sales_csv):
        """Test a reply lacking filePath is a failure."""
        server.ok("POST", "/file/upload", {})

        with pytest.raises(ServiceError, match="Failed to upload file"):
            await client.upload_file(sales_csv)

    async def test_file_columns_params(self, server, client):
        """Test header lookup passes path and delimiter."""
        server.ok("GET", "/file/columns", ["id", "amount"])

        headers = await client.file_columns("uploads/1_sales.csv", "\t")

        assert headers == ["id", "amount"]
        assert server.params("GET", "/file/columns") == {
            "filePath": "uploads/1_sales.csv",
            "delimiter": "\t",
        }

    async def test_file_preview_params(self, server, client):
        """Test preview passes the row limit."""
        server.ok("GET", "/file/preview", [["1", "9.99"]])

        rows = await client.file_preview("uploads/1_sales.csv", ",", 100)

        assert rows == [["1", "9.99"]]
        assert server.params("GET", "/file/preview")["limit"] == "100"

    async def test_cleanup(self, server, client):
        """Test cleanup names the uploaded path."""
        server.ok("POST", "/file/cleanup")

        await client.cleanup_file("uploads/1_sales.csv")

        assert server.params("POST", "/file/cleanup") == {"filePath": "uploads/1_sales.csv"}


class TestClientLifecycle:
    """Tests for construction and closing."""

    async def test_from_config(self, config):
        """Test settings are taken from config."""
        config.api.max_upload_bytes = 42

        client = IngestApiClient.from_config(config)
        try:
            assert client.max_upload_bytes == 42
            assert str(client._client.base_url).startswith("http://localhost:8080/api")
        finally:
            await client.aclose()

    async def test_borrowed_client_left_open(self):
        """Test an injected HTTP client is not closed."""
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

        async with IngestApiClient(client=http):
            pass

        assert not http.is_closed
        await http.aclose()

    async def test_owned_client_closed(self):
        """Test a client created internally is closed on exit."""
        async with IngestApiClient(AppConfig().api.base_url) as client:
            inner = client._client

        assert inner.is_closed
