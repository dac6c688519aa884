"""
Configuracion de fixtures para pytest.

Airtable se reemplaza por un servidor en memoria que implementa la misma
interfaz que requests.Session.request (GET paginado, POST, PATCH).
"""
from __future__ import annotations

from typing import Any, Optional

import pytest

from roadmap_sync.domain.table_schema import epic_table_schema, task_table_schema
from roadmap_sync.infrastructure.external.airtable import AirtableRecordStore
from roadmap_sync.shared.utils.rate_limiter import RateLimiter

EPIC_URL = "https://api.airtable.test/v0/app/Epics"
TASK_URL = "https://api.airtable.test/v0/app/Tasks"


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        text: str = "",
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.headers = headers or {}

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


class FakeSession:
    """Devuelve respuestas encoladas en orden y registra cada llamada."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._responses: list[Any] = []

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    def request(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeAirtableServer:
    """
    Tablas Airtable en memoria.

    - GET pagina de a page_size y devuelve 'offset' mientras queden registros
    - POST asigna ids recXXXX correlativos
    - PATCH reemplaza los fields enviados
    - reject_issues: Issues que responden 422
    """

    def __init__(self, page_size: int = 100) -> None:
        self.page_size = page_size
        self.tables: dict[str, list[dict[str, Any]]] = {EPIC_URL: [], TASK_URL: []}
        self.calls: list[tuple[str, str, Any]] = []
        self.reject_issues: set[str] = set()
        self._next_id = 1

    def seed(self, url: str, fields: dict[str, Any]) -> str:
        record_id = f"rec{self._next_id:04d}"
        self._next_id += 1
        self.tables[url].append({"id": record_id, "fields": dict(fields)})
        return record_id

    def find(self, url: str, issue: str) -> Optional[dict[str, Any]]:
        for record in self.tables[url]:
            if record["fields"].get("Issue") == issue:
                return record
        return None

    def request(
        self,
        *,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        timeout: Any = None,
    ) -> FakeResponse:
        self.calls.append((method, url, json if json is not None else params))

        if method == "GET":
            records = self.tables[url]
            start = int((params or {}).get("offset", 0))
            page = records[start:start + self.page_size]
            payload: dict[str, Any] = {"records": [dict(r) for r in page]}
            if start + self.page_size < len(records):
                payload["offset"] = str(start + self.page_size)
            return FakeResponse(200, payload)

        fields = (json or {}).get("fields", {})
        if fields.get("Issue") in self.reject_issues:
            return FakeResponse(422, text='{"error": {"type": "INVALID_VALUE_FOR_COLUMN"}}')

        if method == "POST":
            record_id = self.seed(url, fields)
            return FakeResponse(200, {"id": record_id, "fields": fields})

        if method == "PATCH":
            table_url, record_id = url.rsplit("/", 1)
            for record in self.tables[table_url]:
                if record["id"] == record_id:
                    record["fields"] = dict(fields)
                    return FakeResponse(200, record)
            return FakeResponse(404, text="NOT_FOUND")

        return FakeResponse(405, text="METHOD_NOT_ALLOWED")


class NoSleepLimiter(RateLimiter):
    """RateLimiter que cuenta llamadas y nunca duerme."""

    def __init__(self, max_per_second: int = 5) -> None:
        super().__init__(max_per_second, clock=lambda: 0.0, sleep=lambda _s: None)
        self.calls = 0

    def throttle(self) -> float:
        self.calls += 1
        return super().throttle()


@pytest.fixture
def epic_schema():
    return epic_table_schema(EPIC_URL)


@pytest.fixture
def task_schema():
    return task_table_schema(TASK_URL)


@pytest.fixture
def limiter() -> NoSleepLimiter:
    return NoSleepLimiter()


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def airtable_server() -> FakeAirtableServer:
    return FakeAirtableServer()


@pytest.fixture
def session_store(fake_session, limiter) -> AirtableRecordStore:
    return AirtableRecordStore("pat-test", limiter, session=fake_session)


@pytest.fixture
def server_store(airtable_server, limiter) -> AirtableRecordStore:
    return AirtableRecordStore("pat-test", limiter, session=airtable_server)


@pytest.fixture
def make_response():
    """Fabrica de respuestas falsas (status, payload, text, headers)."""
    return FakeResponse
