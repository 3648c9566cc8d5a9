import json
import re
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

sys.path.append(str(Path(__file__).parents[1] / "src"))

from budget_api.api.deps import get_store_transport
from budget_api.config import Settings, get_settings
from budget_api.main import app
from budget_api.store.client import AirtableClient

TEST_TOKEN = "test-token"

_MONTH_FORMULA = re.compile(r"DATETIME_FORMAT\(\{Date\}, 'YYYY-MM'\)='(\d{4}-\d{2})'")
_RECORD_ID = re.compile(r"RECORD_ID\(\)='([^']+)'")


class FakeAirtable:
    """In-memory stand-in for the Airtable REST API, served via httpx.MockTransport.

    Tables are lists of records keyed by table ID. Every request is kept in
    ``requests``; every create body in ``create_calls``. Set ``fail_list_call``
    or ``fail_create_call`` (1-based) to make that call return ``error``.
    """

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []
        self.create_calls: list[dict[str, Any]] = []
        self.fail_list_call: int | None = None
        self.fail_create_call: int | None = None
        self.error: tuple[int, Any] = (
            422,
            {"error": {"type": "INVALID_VALUE_FOR_COLUMN", "message": "Field \"Planned $\" cannot accept the provided value"}},
        )
        self._list_calls = 0
        self._created = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def list_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.method == "GET"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != f"Bearer {TEST_TOKEN}":
            return httpx.Response(
                401,
                json={"error": {"type": "AUTHENTICATION_REQUIRED", "message": "Authentication required"}},
            )

        base_id, table_id = request.url.path.strip("/").split("/")[-2:]
        if request.method == "GET":
            return self._list(request, table_id)
        if request.method == "POST":
            return self._create(request, table_id)
        return httpx.Response(405, json={"error": "METHOD_NOT_ALLOWED"})

    def _list(self, request: httpx.Request, table_id: str) -> httpx.Response:
        self._list_calls += 1
        if self.fail_list_call == self._list_calls:
            status, body = self.error
            return httpx.Response(status, json=body)
        if table_id not in self.tables:
            return httpx.Response(404, json={"error": "NOT_FOUND"})

        params = request.url.params
        records = self._filter(self.tables[table_id], params.get("filterByFormula"))
        page_size = int(params.get("pageSize", 100))
        start = int(params["offset"].removeprefix("itr")) if "offset" in params else 0
        page = records[start : start + page_size]

        body: dict[str, Any] = {"records": page}
        if start + page_size < len(records):
            body["offset"] = f"itr{start + page_size}"
        return httpx.Response(200, json=body)

    def _filter(self, records: list[dict[str, Any]], formula: str | None) -> list[dict[str, Any]]:
        if not formula:
            return list(records)
        month = _MONTH_FORMULA.fullmatch(formula)
        if month:
            return [
                record
                for record in records
                if str(record["fields"].get("Date", "")).startswith(month.group(1))
            ]
        ids = set(_RECORD_ID.findall(formula))
        return [record for record in records if record["id"] in ids]

    def _create(self, request: httpx.Request, table_id: str) -> httpx.Response:
        body = json.loads(request.content)
        self.create_calls.append(body)
        if self.fail_create_call == len(self.create_calls):
            status, error = self.error
            return httpx.Response(status, json=error)

        created = []
        for item in body["records"]:
            self._created += 1
            record = {
                "id": f"recNew{self._created:04d}",
                "createdTime": "2025-10-01T00:00:00.000Z",
                "fields": item["fields"],
            }
            self.tables.setdefault(table_id, []).append(record)
            created.append(record)
        return httpx.Response(200, json={"records": created})


def transaction(record_id: str, date: str, amount: Any, category: Any = None) -> dict[str, Any]:
    fields: dict[str, Any] = {"Date": date, "Amount": amount}
    if category is not None:
        fields["Category"] = category
    return {"id": record_id, "fields": fields}


def category(record_id: str, name: str | None = None, **fields: Any) -> dict[str, Any]:
    if name is not None:
        fields["Name"] = name
    return {"id": record_id, "fields": fields}


@pytest.fixture
def fake_airtable() -> FakeAirtable:
    """Provide an empty fake Airtable API."""
    return FakeAirtable()


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at the fake base, independent of the environment."""
    return Settings(
        _env_file=None,
        airtable_token=TEST_TOKEN,
        x_api_key=None,
        airtable_base_id="appTest",
        airtable_transactions_table_id="tblTxn",
        airtable_categories_table_id="tblCat",
        airtable_budgets_table_id="tblBudget",
    )


@pytest.fixture
async def store(fake_airtable: FakeAirtable):
    """Provide an Airtable client wired to the fake API."""
    async with AirtableClient(TEST_TOKEN, transport=fake_airtable.transport()) as client:
        yield client


@pytest.fixture
async def client(test_settings: Settings, fake_airtable: FakeAirtable):
    """Provide test client with settings and Airtable transport overrides."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_store_transport] = fake_airtable.transport

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
