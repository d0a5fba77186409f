"""Entity -> response DTO conversion shared by use cases and routes."""

from src.application.dto.responses import (
    EquipmentResponse,
    InvoiceAdjustmentsResponse,
    InvoiceResponse,
    MaterialResponse,
    SalesDocumentResponse,
    TenantSettingsResponse,
)
from src.core.entities.equipment import Equipment
from src.core.entities.invoice import Invoice
from src.core.entities.material import Material
from src.core.entities.sales_document import SalesDocument
from src.core.entities.tenant import TenantSettings
from src.core.services.numbering import CodeKind, format_code


def equipment_to_response(
    equipment: Equipment, ink_categories: frozenset[str] | None = None
) -> EquipmentResponse:
    return EquipmentResponse(
        id=equipment.id,  # type: ignore[arg-type]
        name=equipment.name,
        type=equipment.type,
        mode=equipment.mode.value,
        hourly_rate=equipment.hourly_rate,
        flat_fee=equipment.flat_fee,
        ink_rates=equipment.ink_rates.model_dump(),
        use_soft_white=equipment.use_soft_white,
        uses_ink=equipment.uses_ink(ink_categories) if ink_categories else False,
        created_at=equipment.created_at,
        updated_at=equipment.updated_at,
    )


def material_to_response(material: Material) -> MaterialResponse:
    return MaterialResponse(
        id=material.id,  # type: ignore[arg-type]
        name=material.name,
        unit=material.unit,
        purchase_price=material.purchase_price,
        selling_price=material.selling_price,
        on_hand=material.on_hand,
        created_at=material.created_at,
        updated_at=material.updated_at,
    )


def settings_to_response(settings: TenantSettings, code_width: int = 5) -> TenantSettingsResponse:
    return TenantSettingsResponse(
        tenant_id=settings.tenant_id,
        tax_rate=settings.tax_rate,
        currency=settings.currency,
        default_margin_pct=settings.default_margin_pct,
        quote_prefix=settings.quote_prefix,
        job_prefix=settings.job_prefix,
        invoice_prefix=settings.invoice_prefix,
        next_codes={
            kind.value: format_code(settings.prefix_for(kind), settings.counter_for(kind), code_width)
            for kind in CodeKind
        },
        updated_at=settings.updated_at,
    )


def document_to_response(document: SalesDocument) -> SalesDocumentResponse:
    return SalesDocumentResponse(
        id=document.id,  # type: ignore[arg-type]
        kind=document.kind.value,
        code=document.code,
        title=document.title,
        customer_name=document.customer_name,
        margin_pct=document.margin_pct,
        status=document.status.value,  # type: ignore[union-attr]
        items=document.items.model_dump(),
        totals=document.totals,
        source_quote_id=document.source_quote_id,
        notes=document.notes,
        created_at=document.created_at,
        updated_at=document.updated_at,
    )


def invoice_to_response(invoice: Invoice) -> InvoiceResponse:
    adj = invoice.adjustments
    return InvoiceResponse(
        id=invoice.id,  # type: ignore[arg-type]
        code=invoice.code,
        job_id=invoice.job_id,
        title=invoice.title,
        customer_name=invoice.customer_name,
        status=invoice.status.value,
        items=invoice.items.model_dump(),
        snapshot=invoice.snapshot,
        adjustments=InvoiceAdjustmentsResponse(
            discount_type=adj.discount_type.value,
            discount_value=adj.discount_value,
            apply_tax_to_discount=adj.apply_tax_to_discount,
            deposit=adj.deposit,
            tax_rate_pct=adj.tax_rate_pct,
        ),
        totals=invoice.totals,
        memo=invoice.memo,
        paid_at=invoice.paid_at,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )
