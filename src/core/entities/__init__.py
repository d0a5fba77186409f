"""Core domain entities."""

from src.core.entities.equipment import (
    BillingMode,
    Equipment,
    InkChannel,
    InkRates,
)
from src.core.entities.invoice import (
    Invoice,
    InvoiceAdjustments,
    InvoiceStatus,
)
from src.core.entities.material import (
    Material,
    MaterialPrice,
)
from src.core.entities.sales_document import (
    AddonLine,
    DocumentKind,
    DocumentStatus,
    EquipmentLine,
    LaborLine,
    LineItems,
    MaterialLine,
    SalesDocument,
)
from src.core.entities.tenant import TenantSettings
from src.core.entities.totals import (
    DiscountType,
    DocumentTotals,
    InvoiceTotals,
)

__all__ = [
    # Equipment entities
    "Equipment",
    "InkRates",
    "InkChannel",
    "BillingMode",
    # Material entities
    "Material",
    "MaterialPrice",
    # Sales document entities
    "SalesDocument",
    "DocumentKind",
    "DocumentStatus",
    "LineItems",
    "EquipmentLine",
    "MaterialLine",
    "LaborLine",
    "AddonLine",
    # Totals
    "DocumentTotals",
    "InvoiceTotals",
    "DiscountType",
    # Invoice entities
    "Invoice",
    "InvoiceAdjustments",
    "InvoiceStatus",
    # Tenant entities
    "TenantSettings",
]
