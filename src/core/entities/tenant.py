"""Per-tenant settings: tax rate, defaults and document numbering."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from src.core.numeric import Numeric
from src.core.services.numbering import CodeKind, default_prefix


class TenantSettings(BaseModel):
    """Settings row of a tenant."""

    tenant_id: str
    tax_rate: Numeric = 0.0
    currency: str = "USD"
    default_margin_pct: Numeric = 100.0
    quote_prefix: str = Field(default_factory=lambda: default_prefix(CodeKind.QUOTE))
    quote_counter: int = 1
    job_prefix: str = Field(default_factory=lambda: default_prefix(CodeKind.JOB))
    job_counter: int = 1
    invoice_prefix: str = Field(default_factory=lambda: default_prefix(CodeKind.INVOICE))
    invoice_counter: int = 1
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def prefix_for(self, kind: CodeKind | str) -> str:
        return getattr(self, f"{CodeKind(kind).value}_prefix") or default_prefix(kind)

    def counter_for(self, kind: CodeKind | str) -> int:
        return max(int(getattr(self, f"{CodeKind(kind).value}_counter") or 1), 1)
