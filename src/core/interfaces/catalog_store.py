"""
Abstract interface for tenant reference data (equipment and materials).

Lookups by id set feed the pricing engine with live rates and prices.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from src.core.entities.equipment import Equipment
from src.core.entities.material import Material


class ICatalogStore(ABC):
    """Equipment and material persistence, scoped by tenant."""

    # Equipment

    @abstractmethod
    async def create_equipment(self, equipment: Equipment) -> Equipment:
        """Create an equipment row for ``equipment.tenant_id``."""

    @abstractmethod
    async def get_equipment(self, tenant_id: str, equipment_id: str) -> Equipment | None:
        """Get equipment by ID."""

    @abstractmethod
    async def list_equipment(
        self, tenant_id: str, limit: int = 100, offset: int = 0
    ) -> list[Equipment]:
        """List equipment ordered by name."""

    @abstractmethod
    async def get_equipment_by_ids(
        self, tenant_id: str, equipment_ids: Iterable[str]
    ) -> dict[str, Equipment]:
        """Equipment rows keyed by id; unknown ids are simply absent."""

    @abstractmethod
    async def update_equipment(self, equipment: Equipment) -> Equipment:
        """Overwrite an equipment row (last writer wins)."""

    @abstractmethod
    async def delete_equipment(self, tenant_id: str, equipment_id: str) -> bool:
        """Delete equipment; False when it did not exist."""

    # Materials

    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Create a material row for ``material.tenant_id``."""

    @abstractmethod
    async def get_material(self, tenant_id: str, material_id: str) -> Material | None:
        """Get material by ID."""

    @abstractmethod
    async def list_materials(
        self, tenant_id: str, limit: int = 100, offset: int = 0
    ) -> list[Material]:
        """List materials ordered by name."""

    @abstractmethod
    async def get_materials_by_ids(
        self, tenant_id: str, material_ids: Iterable[str]
    ) -> dict[str, Material]:
        """Material rows keyed by id; unknown ids are simply absent."""

    @abstractmethod
    async def update_material(self, material: Material) -> Material:
        """Overwrite a material row (last writer wins)."""

    @abstractmethod
    async def delete_material(self, tenant_id: str, material_id: str) -> bool:
        """Delete a material; False when it did not exist."""

    @abstractmethod
    async def adjust_stock(self, tenant_id: str, material_id: str, delta: float) -> Material:
        """Add ``delta`` (negative to consume) to a material's on-hand quantity."""
