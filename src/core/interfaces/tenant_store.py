"""Abstract interface for tenant settings and document numbering."""

from abc import ABC, abstractmethod

from src.core.entities.tenant import TenantSettings
from src.core.services.numbering import CodeKind


class ITenantSettingsStore(ABC):
    """Tenant settings persistence."""

    @abstractmethod
    async def get_settings(self, tenant_id: str) -> TenantSettings:
        """Get settings, creating the row with defaults when missing."""
        pass

    @abstractmethod
    async def update_settings(self, settings: TenantSettings) -> TenantSettings:
        """Overwrite tax/currency/margin defaults and code prefixes."""
        pass

    @abstractmethod
    async def allocate_code(self, tenant_id: str, kind: CodeKind) -> str:
        """
        Reserve the next document code for ``kind``.

        Reading and incrementing the counter happen in one transaction.
        """
        pass
