"""Shared fixtures: an in-memory ingestion API and clients wired to it."""

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from tablebridge.config import AppConfig
from tablebridge.services.api_client import IngestApiClient
from tablebridge.services.workflow import IngestionWorkflow

BASE_URL = "http://testserver/api"

Reply = tuple[int, dict[str, Any]] | Callable[[httpx.Request], httpx.Response]


class FakeIngestServer:
    """Answers API calls from canned replies and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Reply] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, reply: Reply) -> None:
        self.routes[(method, path)] = reply

    def ok(self, method: str, path: str, data: Any = None) -> None:
        self.on(method, path, (200, {"success": True, "data": data}))

    def fail(self, method: str, path: str, error: str | None, status: int = 500) -> None:
        body: dict[str, Any] = {"success": False}
        if error is not None:
            body["error"] = error
        self.on(method, path, (status, body))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get((request.method, self._path(request)))
        if reply is None:
            return httpx.Response(404, json={"success": False, "error": "Not found"})
        if callable(reply):
            return reply(request)
        status, body = reply
        return httpx.Response(status, json=body)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(request.method, self._path(request)) for request in self.requests]

    def body(self, method: str, path: str) -> Any:
        """JSON body of the last request to a route."""
        for request in reversed(self.requests):
            if (request.method, self._path(request)) == (method, path):
                return json.loads(request.content)
        raise AssertionError(f"No {method} {path} request was made")

    def params(self, method: str, path: str) -> dict[str, str]:
        """Query parameters of the last request to a route."""
        for request in reversed(self.requests):
            if (request.method, self._path(request)) == (method, path):
                return dict(request.url.params)
        raise AssertionError(f"No {method} {path} request was made")

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix("/api")


@pytest.fixture
def server() -> FakeIngestServer:
    return FakeIngestServer()


@pytest_asyncio.fixture
async def client(server: FakeIngestServer) -> AsyncIterator[IngestApiClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(server.handle), base_url=BASE_URL)
    try:
        yield IngestApiClient(client=http, max_upload_bytes=1024)
    finally:
        await http.aclose()


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    for name in (
        "TABLEBRIDGE_API_URL",
        "TABLEBRIDGE_MAX_UPLOAD_SIZE",
        "TABLEBRIDGE_LOG_LEVEL",
        "TABLEBRIDGE_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return AppConfig()


@pytest.fixture
def workflow(client: IngestApiClient, config: AppConfig) -> IngestionWorkflow:
    return IngestionWorkflow(client, config=config)


@pytest.fixture
def sales_csv(tmp_path):
    path = tmp_path / "sales.csv"
    path.write_text("id,amount\n1,9.99\n2,5.00\n")
    return path
