"""Preview Totals Use Case: stateless pricing for live editing."""

from src.application.dto.requests import DocumentPricingRequest, InvoicePricingRequest
from src.application.dto.responses import DocumentPricingResponse, InvoicePricingResponse
from src.application.services import DocumentPricer, get_document_pricer
from src.config import get_logger
from src.core.interfaces import ITenantSettingsStore
from src.core.services import compute_invoice_totals

logger = get_logger(__name__)


class PreviewTotalsUseCase:
    """Compute document or invoice totals without persisting anything."""

    def __init__(
        self,
        tenant_store: ITenantSettingsStore | None = None,
        pricer: DocumentPricer | None = None,
    ):
        self._tenant_store = tenant_store
        self._pricer = pricer

    async def _get_tenant_store(self) -> ITenantSettingsStore:
        if self._tenant_store is None:
            from src.infrastructure.storage.sqlite import get_tenant_store

            self._tenant_store = await get_tenant_store()
        return self._tenant_store

    def _get_pricer(self) -> DocumentPricer:
        if self._pricer is None:
            self._pricer = get_document_pricer()
        return self._pricer

    async def preview_document(
        self, tenant_id: str, request: DocumentPricingRequest
    ) -> DocumentPricingResponse:
        margin_pct = request.margin_pct
        if margin_pct is None:
            tenant_store = await self._get_tenant_store()
            margin_pct = (await tenant_store.get_settings(tenant_id)).default_margin_pct

        pricing = await self._get_pricer().price(tenant_id, request.items, margin_pct)
        logger.debug(
            "document_preview_computed",
            tenant_id=tenant_id,
            total=pricing.totals.total_charge_pre_tax,
        )
        return DocumentPricingResponse(
            totals=pricing.totals,
            missing_equipment=pricing.missing_equipment,
            missing_materials=pricing.missing_materials,
        )

    def preview_invoice(self, request: InvoicePricingRequest) -> InvoicePricingResponse:
        totals = compute_invoice_totals(
            request.snapshot,
            tax_rate_pct=request.tax_rate_pct,
            discount_type=request.discount_type,
            discount_value=request.discount_value,
            apply_tax_to_discount=request.apply_tax_to_discount,
            deposit=request.deposit,
        )
        return InvoicePricingResponse(totals=totals)
