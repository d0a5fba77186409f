"""API tests for stateless pricing previews."""


class TestDocumentPreview:
    async def test_preview(self, client, api_headers, sample_items, mock_document_store):
        response = await client.post(
            "/api/pricing/document",
            json={"items": sample_items.model_dump(), "margin_pct": 50},
            headers=api_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["total_charge_pre_tax"] == 214.1
        assert data["missing_equipment"] == []
        mock_document_store.create_document.assert_not_called()

    async def test_unknown_references_listed(self, client, api_headers):
        response = await client.post(
            "/api/pricing/document",
            json={"items": {"materials": [{"material_id": "mat-gone", "qty": 2}]}},
            headers=api_headers,
        )

        assert response.status_code == 200
        assert response.json()["missing_materials"] == ["mat-gone"]

    async def test_requires_tenant(self, client):
        response = await client.post("/api/pricing/document", json={})

        assert response.status_code == 400


class TestInvoicePreview:
    async def test_preview(self, client):
        response = await client.post(
            "/api/pricing/invoice",
            json={
                "snapshot": {"total_charge_pre_tax": 100},
                "tax_rate_pct": 8,
                "discount_type": "flat",
                "discount_value": 15,
                "deposit": 20,
            },
        )

        assert response.status_code == 200
        totals = response.json()["totals"]
        assert totals["tax"] == 8
        assert totals["total"] == 93
        assert totals["total_due"] == 73

    async def test_bare_amount(self, client):
        response = await client.post("/api/pricing/invoice", json={"snapshot": 40})

        assert response.json()["totals"]["total_due"] == 40
