"""Tests for GenerateInvoiceUseCase."""

import pytest

from src.application.dto.requests import GenerateInvoiceRequest
from src.application.use_cases.generate_invoice import GenerateInvoiceUseCase
from src.core.entities import DiscountType, DocumentStatus, DocumentTotals, InvoiceStatus
from src.core.exceptions import InvalidStatusTransitionError, SalesDocumentNotFoundError


@pytest.fixture
def completed_job(make_document):
    return make_document(
        "job",
        status=DocumentStatus.COMPLETED,
        document_id=3,
        totals=DocumentTotals(
            ink_cost_raw=9.4,
            ink_charge=14.1,
            total_charge_pre_tax=214.1,
            total_cost=45.4,
            profit=168.7,
            total_after_tax=214.1,
        ),
    )


@pytest.fixture
def use_case(mock_document_store, mock_invoice_store, mock_tenant_store):
    return GenerateInvoiceUseCase(
        document_store=mock_document_store,
        invoice_store=mock_invoice_store,
        tenant_store=mock_tenant_store,
    )


class TestGenerateInvoiceUseCase:
    async def test_snapshot_and_tenant_tax(
        self, use_case, mock_document_store, completed_job, tenant_id
    ):
        mock_document_store.get_document.return_value = completed_job

        invoice = await use_case.execute(tenant_id, 3)

        assert invoice.id == 1
        assert invoice.code == "INV-00001"
        assert invoice.job_id == 3
        assert invoice.status == InvoiceStatus.UNPAID
        assert invoice.title == completed_job.title
        assert invoice.snapshot == completed_job.totals
        assert invoice.items == completed_job.items
        assert invoice.adjustments.tax_rate_pct == 8.0
        assert invoice.totals.tax == 17.13
        assert invoice.totals.total == 231.23

    async def test_request_adjustments_applied(
        self, use_case, mock_document_store, mock_tenant_store, completed_job, tenant_id
    ):
        mock_document_store.get_document.return_value = completed_job
        request = GenerateInvoiceRequest.model_validate(
            {
                "discount_type": "percent",
                "discount_value": 10,
                "discount_apply_tax": True,
                "deposit": 50,
                "tax_rate_pct": 0,
                "memo": "Thanks!",
            }
        )

        invoice = await use_case.execute(tenant_id, 3, request)

        assert invoice.adjustments.discount_type == DiscountType.PERCENT
        assert invoice.adjustments.apply_tax_to_discount is True
        assert invoice.memo == "Thanks!"
        assert invoice.totals.discount == 21.41
        assert invoice.totals.total == 192.69
        assert invoice.totals.total_due == 142.69
        # Explicit rate wins over the tenant default
        mock_tenant_store.get_settings.assert_not_called()

    async def test_job_can_be_invoiced_twice(
        self, use_case, mock_document_store, completed_job, tenant_id
    ):
        mock_document_store.get_document.return_value = completed_job

        first = await use_case.execute(tenant_id, 3)
        second = await use_case.execute(tenant_id, 3)

        assert first.code == "INV-00001"
        assert second.code == "INV-00002"

    @pytest.mark.parametrize("status", [DocumentStatus.ACTIVE, DocumentStatus.OPEN])
    async def test_only_completed_jobs(
        self, use_case, mock_document_store, mock_invoice_store, make_document, tenant_id, status
    ):
        mock_document_store.get_document.return_value = make_document("job", status=status)

        with pytest.raises(InvalidStatusTransitionError):
            await use_case.execute(tenant_id, 1)
        mock_invoice_store.create_invoice.assert_not_called()

    async def test_job_not_found(self, use_case, tenant_id):
        with pytest.raises(SalesDocumentNotFoundError):
            await use_case.execute(tenant_id, 77)
