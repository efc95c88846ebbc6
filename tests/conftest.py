"""Pytest fixtures for pipedrive-export tests."""

from typing import Any, Optional

import httpx
import pytest

from pipedrive_export.models.connection import Connection


def make_page(
    data: Optional[list[dict[str, Any]]],
    *,
    more: bool = False,
    start: int = 0,
    limit: int = 100,
) -> dict[str, Any]:
    """Successful list response body with pagination metadata."""
    return {
        "success": True,
        "data": data,
        "additional_data": {
            "pagination": {
                "more_items_in_collection": more,
                "start": start,
                "limit": limit,
            }
        },
    }


class FakePipedrive:
    """Serves queued responses per API path and records every request."""

    def __init__(self) -> None:
        self._queues: dict[str, list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        body: Any = None,
        *,
        status_code: int = 200,
        text: Optional[str] = None,
    ) -> "FakePipedrive":
        """Queue one response for GET /v1{path}."""
        self._queues.setdefault(path, []).append(
            {"status_code": status_code, "body": body, "text": text}
        )
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        queue = self._queues.get(path)
        if not queue:
            return httpx.Response(404, json={"success": False, "errorCode": 404, "error": f"No fake for {path}"})
        queued = queue.pop(0)
        if queued["text"] is not None:
            return httpx.Response(queued["status_code"], text=queued["text"])
        return httpx.Response(queued["status_code"], json=queued["body"])

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def requests_for(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/v1" + path]

    def offsets(self, path: str) -> list[int]:
        return [int(r.url.params["start"]) for r in self.requests_for(path)]


@pytest.fixture
def connection() -> Connection:
    """Connection for a fake company account."""
    return Connection(company_domain="acme", api_token="secret-token")


@pytest.fixture
def fake_api() -> FakePipedrive:
    """Empty fake Pipedrive API."""
    return FakePipedrive()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove Pipedrive credentials from the environment."""
    monkeypatch.delenv("PIPEDRIVE_COMPANY_DOMAIN", raising=False)
    monkeypatch.delenv("PIPEDRIVE_API_TOKEN", raising=False)
    return monkeypatch


@pytest.fixture
def page():
    """Factory for successful list response bodies."""
    return make_page
