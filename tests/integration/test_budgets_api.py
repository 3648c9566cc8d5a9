"""Integration tests for the budget creation endpoint."""

import pytest
from httpx import AsyncClient

from budget_api.config import get_settings
from budget_api.main import app
from conftest import category


@pytest.fixture
def categories(fake_airtable):
    fake_airtable.tables["tblCat"] = [category("recTravel", "Travel"), category("recFood", "Food")]
    return fake_airtable


class TestCreateBudgets:
    @pytest.mark.asyncio
    async def test_creates_and_reports_failures(self, client: AsyncClient, categories):
        response = await client.post(
            "/api/v1/budgets",
            json={
                "rows": [
                    {"Month": "2025-10", "CategoryName": "Travel", "Planned": 800},
                    {"Month": "2025-10", "CategoryName": "Nonexistent", "Planned": 50},
                ]
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["created_count"] == 1
        assert data["failed_count"] == 1
        assert data["failures"] == [{"index": 1, "reason": "Missing CategoryId/CategoryName or not found"}]
        assert data["records"][0]["fields"] == {
            "Month": "2025-10",
            "Category": ["recTravel"],
            "Planned $": 800,
        }
        assert categories.create_calls == [
            {
                "records": [{"fields": {"Month": "2025-10", "Category": ["recTravel"], "Planned $": 800}}],
                "typecast": True,
            }
        ]

    @pytest.mark.asyncio
    async def test_odd_value_types_fail_only_their_rows(self, client: AsyncClient, categories):
        response = await client.post(
            "/api/v1/budgets",
            json={
                "rows": [
                    {"Month": "2025-10", "CategoryName": "Travel", "Planned": 800},
                    {"Month": "2025-10", "CategoryId": 123, "Planned": 5},
                    {"Month": "2025-10", "CategoryName": "Food", "Planned": True},
                ]
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["created_count"] == 1
        assert data["failed_count"] == 2
        assert data["failures"] == [
            {"index": 1, "reason": "Missing CategoryId/CategoryName or not found"},
            {"index": 2, "reason": "Planned must be a number"},
        ]
        assert len(categories.create_calls) == 1

    @pytest.mark.asyncio
    async def test_category_id_and_notes(self, client: AsyncClient, categories):
        response = await client.post(
            "/api/v1/budgets",
            json={"rows": [{"Month": "2025-11", "CategoryId": "recFood", "Planned": "", "Notes": "Groceries"}]},
        )

        assert response.json()["records"][0]["fields"] == {
            "Month": "2025-11",
            "Category": ["recFood"],
            "Planned $": 0,
            "Notes": "Groceries",
        }

    @pytest.mark.asyncio
    async def test_chunks_of_ten(self, client: AsyncClient, categories):
        rows = [{"Month": "2025-10", "CategoryName": "food", "Planned": i} for i in range(23)]

        response = await client.post("/api/v1/budgets", json={"rows": rows})

        assert response.json()["created_count"] == 23
        assert [len(call["records"]) for call in categories.create_calls] == [10, 10, 3]
        assert [r["fields"]["Planned $"] for r in response.json()["records"]] == list(range(23))

    @pytest.mark.asyncio
    async def test_all_rows_invalid_sends_nothing(self, client: AsyncClient, categories):
        response = await client.post("/api/v1/budgets", json={"rows": [{"Month": "2025-10", "Planned": 5}]})

        assert response.status_code == 200
        assert response.json()["created_count"] == 0
        assert response.json()["failed_count"] == 1
        assert categories.create_calls == []

    @pytest.mark.asyncio
    async def test_table_overrides(self, client: AsyncClient, fake_airtable):
        fake_airtable.tables["tblCats2"] = [category("recX", "Gifts")]

        response = await client.post(
            "/api/v1/budgets",
            params={"baseId": "appOther", "budgetsTableId": "tblBud2", "categoriesTableId": "tblCats2"},
            json={"rows": [{"Month": "2025-10", "CategoryName": "gifts", "Planned": 1}]},
        )

        assert response.json()["created_count"] == 1
        assert fake_airtable.requests[-1].url.path.endswith("/appOther/tblBud2")


class TestCreateBudgetsErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"rows": []}, {}])
    async def test_empty_rows(self, client: AsyncClient, categories, body):
        response = await client.post("/api/v1/budgets", json=body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "REQ_002"
        assert response.json()["message"] == "Body must include non-empty rows[]"
        assert categories.requests == []

    @pytest.mark.asyncio
    async def test_missing_body(self, client: AsyncClient, categories):
        response = await client.post("/api/v1/budgets")

        assert response.status_code == 400
        assert response.json()["error_code"] == "REQ_002"

    @pytest.mark.asyncio
    async def test_malformed_rows(self, client: AsyncClient, categories):
        response = await client.post("/api/v1/budgets", json={"rows": "not-a-list"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client: AsyncClient):
        response = await client.get("/api/v1/budgets")

        assert response.status_code == 405
        assert response.headers["allow"].split(", ") == ["POST"]

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient, test_settings, categories):
        no_token = test_settings.model_copy(update={"airtable_token": None})
        app.dependency_overrides[get_settings] = lambda: no_token

        response = await client.post("/api/v1/budgets", json={"rows": [{"CategoryName": "Travel"}]})

        assert response.status_code == 500
        assert response.json()["error_code"] == "CFG_001"
        assert categories.requests == []

    @pytest.mark.asyncio
    async def test_category_scan_failure(self, client: AsyncClient, categories):
        categories.fail_list_call = 1

        response = await client.post("/api/v1/budgets", json={"rows": [{"CategoryName": "Travel"}]})

        assert response.status_code == 502
        assert response.json()["error_code"] == "STORE_001"
        assert categories.create_calls == []

    @pytest.mark.asyncio
    async def test_mid_batch_failure_aborts(self, client: AsyncClient, categories):
        categories.fail_create_call = 2
        rows = [{"Month": "2025-10", "CategoryName": "Travel", "Planned": i} for i in range(25)]

        response = await client.post("/api/v1/budgets", json={"rows": rows})

        assert response.status_code == 502
        data = response.json()
        assert data["error_code"] == "STORE_002"
        assert data["message"] == 'Field "Planned $" cannot accept the provided value'
        assert data["created_count"] == 10
        assert len(data["created_ids"]) == 10
        assert "failures" not in data
        assert len(categories.create_calls) == 2

    @pytest.mark.asyncio
    async def test_requires_api_key_when_configured(self, client: AsyncClient, test_settings, categories):
        keyed = test_settings.model_copy(update={"x_api_key": "s3cret"})
        app.dependency_overrides[get_settings] = lambda: keyed

        denied = await client.post("/api/v1/budgets", json={"rows": [{"CategoryName": "Travel"}]})
        allowed = await client.post(
            "/api/v1/budgets",
            json={"rows": [{"CategoryName": "Travel"}]},
            headers={"x-api-key": "s3cret"},
        )

        assert denied.status_code == 401
        assert allowed.status_code == 200
