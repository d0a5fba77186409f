"""API tests for quote and job endpoints."""

from src.core.entities import DocumentStatus, DocumentTotals


def _quote_body(sample_items, **overrides) -> dict:
    body = {
        "title": "Window graphics",
        "customer_name": "Corner Cafe",
        "items": sample_items.model_dump(),
    }
    body.update(overrides)
    return body


class TestQuotes:
    async def test_create_quote(self, client, api_headers, sample_items):
        response = await client.post(
            "/api/quotes", json=_quote_body(sample_items), headers=api_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "Q-00001"
        assert data["kind"] == "quote"
        assert data["status"] == "open"
        assert data["margin_pct"] == 50
        assert data["totals"]["total_charge_pre_tax"] == 214.1
        assert data["totals"]["profit_pct"] == 371.59

    async def test_client_totals_ignored(self, client, api_headers, sample_items):
        body = _quote_body(sample_items, totals={"total_charge_pre_tax": 1})

        response = await client.post("/api/quotes", json=body, headers=api_headers)

        assert response.json()["totals"]["total_charge_pre_tax"] == 214.1

    async def test_loose_numbers_accepted(self, client, api_headers):
        body = {
            "title": "Mugs",
            "margin_pct": 0,
            "items": {
                "equipments": [{"equipment_id": "eq-uv", "c": "4", "m": ""}],
                "addons": [{"name": "Box", "qty": "2", "price": "1.25"}],
            },
        }

        response = await client.post("/api/quotes", json=body, headers=api_headers)

        assert response.status_code == 201
        totals = response.json()["totals"]
        assert totals["ink_charge"] == 2.0
        assert totals["addon_charge"] == 2.5

    async def test_title_required(self, client, api_headers):
        response = await client.post("/api/quotes", json={"title": ""}, headers=api_headers)

        assert response.status_code == 422

    async def test_get_quote(self, client, api_headers, mock_document_store, make_document):
        mock_document_store.get_document.return_value = make_document("quote", document_id=4)

        response = await client.get("/api/quotes/4", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["code"] == "Q-00004"

    async def test_get_missing_quote(self, client, api_headers):
        response = await client.get("/api/quotes/404", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "QUOTE_NOT_FOUND"

    async def test_list_has_more(self, client, api_headers, mock_document_store, make_document):
        mock_document_store.list_documents.return_value = [
            make_document("quote", document_id=n) for n in (3, 2, 1)
        ]

        response = await client.get(
            "/api/quotes?limit=2&status=open", headers=api_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert [q["id"] for q in data["items"]] == [3, 2]
        assert data["has_more"] is True
        assert data["limit"] == 2
        call = mock_document_store.list_documents.call_args
        assert call.kwargs["status"] == DocumentStatus.OPEN
        assert call.kwargs["limit"] == 3

    async def test_update_quote(self, client, api_headers, mock_document_store, make_document, sample_items):
        mock_document_store.get_document.return_value = make_document("quote")

        response = await client.put(
            "/api/quotes/1",
            json=_quote_body(sample_items, title="Window graphics v2", margin_pct=0),
            headers=api_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Window graphics v2"
        assert data["totals"]["ink_charge"] == 9.4

    async def test_update_converted_quote_conflicts(
        self, client, api_headers, mock_document_store, make_document, sample_items
    ):
        mock_document_store.get_document.return_value = make_document(
            "quote", status=DocumentStatus.CONVERTED
        )

        response = await client.put(
            "/api/quotes/1", json=_quote_body(sample_items), headers=api_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DOCUMENT_LOCKED"

    async def test_convert(self, client, api_headers, mock_document_store, make_document):
        mock_document_store.get_document.return_value = make_document(
            "quote", totals=DocumentTotals(total_charge_pre_tax=214.1)
        )

        response = await client.post("/api/quotes/1/convert", headers=api_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["quote"]["status"] == "converted"
        assert data["job"]["code"] == "J-00001"
        assert data["job"]["source_quote_id"] == 1
        assert data["job"]["totals"]["total_charge_pre_tax"] == 214.1

    async def test_convert_twice_conflicts(
        self, client, api_headers, mock_document_store, make_document
    ):
        mock_document_store.get_document.return_value = make_document(
            "quote", status=DocumentStatus.CONVERTED
        )

        response = await client.post("/api/quotes/1/convert", headers=api_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATUS_TRANSITION"


class TestJobs:
    async def test_create_job(self, client, api_headers, sample_items):
        response = await client.post(
            "/api/jobs", json=_quote_body(sample_items), headers=api_headers
        )

        assert response.status_code == 201
        assert response.json()["status"] == "active"
        assert response.json()["code"] == "J-00001"

    async def test_complete(self, client, api_headers, mock_document_store, make_document):
        mock_document_store.get_document.return_value = make_document("job")

        response = await client.post("/api/jobs/1/complete", headers=api_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["job"]["status"] == "completed"
        assert data["stock_movements"] == [
            {"material_id": "mat-acrylic", "quantity": 3.0, "on_hand": 47.0}
        ]

    async def test_complete_missing_job(self, client, api_headers):
        response = await client.post("/api/jobs/9/complete", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "JOB_NOT_FOUND"

    async def test_invoice_without_body(
        self, client, api_headers, mock_document_store, make_document
    ):
        mock_document_store.get_document.return_value = make_document(
            "job",
            status=DocumentStatus.COMPLETED,
            totals=DocumentTotals(total_charge_pre_tax=100),
        )

        response = await client.post("/api/jobs/1/invoice", headers=api_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "INV-00001"
        assert data["adjustments"]["tax_rate_pct"] == 8.0
        assert data["totals"]["total"] == 108.0

    async def test_invoice_with_adjustments(
        self, client, api_headers, mock_document_store, make_document
    ):
        mock_document_store.get_document.return_value = make_document(
            "job",
            status=DocumentStatus.COMPLETED,
            totals=DocumentTotals(total_charge_pre_tax=100),
        )

        response = await client.post(
            "/api/jobs/1/invoice",
            json={
                "discount_type": "percent",
                "discount_value": 10,
                "discount_apply_tax": True,
            },
            headers=api_headers,
        )

        assert response.status_code == 201
        assert response.json()["totals"]["total"] == 97.2

    async def test_invoice_active_job_conflicts(
        self, client, api_headers, mock_document_store, make_document
    ):
        mock_document_store.get_document.return_value = make_document("job")

        response = await client.post("/api/jobs/1/invoice", headers=api_headers)

        assert response.status_code == 409
