"""
Material domain entity for the materials catalog.

Materials carry a purchase price (cost basis) and a selling price. Quotes
and jobs always read the current prices; invoices keep a frozen snapshot.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from src.core.numeric import Numeric


class MaterialPrice(BaseModel):
    """Price pair consumed by the totals engine."""

    purchase_price: Numeric = 0.0
    selling_price: Numeric = 0.0


class Material(BaseModel):
    """A stocked material/product in the tenant's catalog."""

    id: str | None = None
    tenant_id: str | None = None
    name: str
    unit: str | None = None
    purchase_price: Numeric = 0.0
    selling_price: Numeric = 0.0
    on_hand: Numeric = 0.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def price(self) -> MaterialPrice:
        return MaterialPrice(
            purchase_price=self.purchase_price,
            selling_price=self.selling_price,
        )

