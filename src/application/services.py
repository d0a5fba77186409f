"""
Service factory functions for dependency injection.

Wires the pure pricing engine to live tenant reference data loaded from
the catalog store. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from src.config import get_logger, get_settings
from src.core.entities.sales_document import LineItems
from src.core.entities.totals import DocumentTotals
from src.core.services import compute_document_totals

if TYPE_CHECKING:
    from src.core.interfaces import ICatalogStore

logger = get_logger(__name__)


@dataclass
class PricingResult:
    """Totals plus the references that could not be resolved."""

    totals: DocumentTotals
    missing_equipment: list[str] = field(default_factory=list)
    missing_materials: list[str] = field(default_factory=list)


class DocumentPricer:
    """
    Prices line items against the tenant's current equipment rates and
    material prices.

    Missing references are reported but still contribute 0, so a draft
    referencing deleted equipment keeps its line.
    """

    def __init__(
        self,
        catalog_store: "ICatalogStore | None" = None,
        ink_categories: frozenset[str] | None = None,
    ):
        self._catalog_store = catalog_store
        self._ink_categories = ink_categories

    async def _get_catalog_store(self) -> "ICatalogStore":
        if self._catalog_store is None:
            from src.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    @property
    def ink_categories(self) -> frozenset[str]:
        if self._ink_categories is None:
            self._ink_categories = frozenset(get_settings().pricing.ink_categories)
        return self._ink_categories

    async def price(
        self,
        tenant_id: str,
        items: LineItems,
        margin_pct: float,
    ) -> PricingResult:
        store = await self._get_catalog_store()

        equipment_ids = items.equipment_ids()
        material_ids = items.material_ids()
        equipment = await store.get_equipment_by_ids(tenant_id, equipment_ids)
        materials = await store.get_materials_by_ids(tenant_id, material_ids)

        totals = compute_document_totals(
            equipment,
            {material_id: m.price for material_id, m in materials.items()},
            items,
            margin_pct,
            ink_categories=self.ink_categories,
        )

        result = PricingResult(
            totals=totals,
            missing_equipment=sorted(equipment_ids - equipment.keys()),
            missing_materials=sorted(material_ids - materials.keys()),
        )
        if result.missing_equipment or result.missing_materials:
            logger.warning(
                "pricing_references_missing",
                tenant_id=tenant_id,
                missing_equipment=result.missing_equipment,
                missing_materials=result.missing_materials,
            )
        return result


# Singleton service instances
_document_pricer: DocumentPricer | None = None


def get_document_pricer(catalog_store: "ICatalogStore | None" = None) -> DocumentPricer:
    """
    Get or create the DocumentPricer.

    A pricer built around an explicit store is never cached.
    """
    global _document_pricer
    if catalog_store is not None:
        return DocumentPricer(catalog_store=catalog_store)
    if _document_pricer is None:
        _document_pricer = DocumentPricer()
    return _document_pricer


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _document_pricer
    _document_pricer = None
