"""
Quote and job domain entities.

A sales document is authored as four line lists (equipment, materials,
labor, add-ons) plus a margin percentage. Its totals are derived by the
pricing engine against live reference data on every save.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from src.core.entities.equipment import BillingMode, InkChannel
from src.core.entities.totals import DocumentTotals
from src.core.numeric import Numeric, OptionalFlag, OptionalNumeric

_CHANNEL_KEYS = tuple(channel.value for channel in InkChannel)
_BILLING_MODES = frozenset(mode.value for mode in BillingMode)


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


class DocumentKind(str, Enum):
    """Sales document flavour."""

    QUOTE = "quote"
    JOB = "job"


class DocumentStatus(str, Enum):
    """Lifecycle status of a quote or job."""

    OPEN = "open"  # quote being negotiated
    CONVERTED = "converted"  # quote turned into a job
    ACTIVE = "active"  # job in production
    COMPLETED = "completed"  # job done, inventory applied


INITIAL_STATUS: dict[DocumentKind, DocumentStatus] = {
    DocumentKind.QUOTE: DocumentStatus.OPEN,
    DocumentKind.JOB: DocumentStatus.ACTIVE,
}


class _Line(BaseModel):
    """Base for serialized line items: extra keys ignored, text fields coerced."""

    model_config = ConfigDict(extra="ignore")

    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def coerce_text_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        for key in cls.TEXT_FIELDS:
            if key in data:
                text = _as_text(data[key])
                if text is None:
                    del data[key]
                else:
                    data[key] = text
        return data


class EquipmentLine(_Line):
    """
    Equipment usage on a document.

    Ink-based equipment reads ``inks``; everything else is billed by
    ``hours`` x ``rate`` or a flat fee depending on ``mode``. ``mode``,
    ``rate``, ``flat_fee`` and ``use_soft_white`` fall back to the
    equipment when left unset or unreadable.
    """

    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("equipment_id", "type")

    equipment_id: str | None = None
    type: str | None = None
    mode: str | None = None
    hours: Numeric = 0.0
    rate: OptionalNumeric = None
    flat_fee: OptionalNumeric = None
    inks: dict[str, Numeric] = Field(default_factory=dict)
    use_soft_white: OptionalFlag = None

    @model_validator(mode="before")
    @classmethod
    def lift_channel_fields(cls, data: Any) -> Any:
        """Accept channel quantities given as top-level keys (``{"c": 3}``)."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        inks = data.get("inks")
        inks = {str(k): v for k, v in inks.items()} if isinstance(inks, Mapping) else {}
        for key in _CHANNEL_KEYS:
            if key in data:
                inks.setdefault(key, data.pop(key))
        data["inks"] = inks
        if "mode" in data:
            mode = data["mode"]
            mode = mode.strip().lower() if isinstance(mode, str) else None
            data["mode"] = mode if mode in _BILLING_MODES else None
        return data

    def usage(self, channel: InkChannel | str) -> float:
        """Consumed quantity for a channel (0 when absent)."""
        key = channel.value if isinstance(channel, InkChannel) else str(channel)
        return float(self.inks.get(key, 0.0))

    def toggle_soft_white(self, use_soft_white: bool) -> "EquipmentLine":
        """Switch the active white variant; both quantities are kept."""
        return self.model_copy(
            update={"use_soft_white": use_soft_white, "inks": dict(self.inks)}
        )


class MaterialLine(_Line):
    """Material consumption, priced from the catalog at compute time."""

    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("material_id",)

    material_id: str | None = None
    qty: Numeric = 0.0


class LaborLine(_Line):
    """Free-text labour entry."""

    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("description", "desc")

    description: str = Field(
        default="", validation_alias=AliasChoices("description", "desc")
    )
    hours: Numeric = 0.0
    rate: Numeric = 0.0


class AddonLine(_Line):
    """Add-on sold with the document."""

    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("addon_id", "name")

    addon_id: str | None = None
    name: str = ""
    qty: Numeric = 0.0
    price: Numeric = 0.0


class LineItems(BaseModel):
    """The serialized item list of a sales document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    equipment: list[EquipmentLine] = Field(
        default_factory=list,
        validation_alias=AliasChoices("equipment", "equipments"),
    )
    materials: list[MaterialLine] = Field(default_factory=list)
    labor: list[LaborLine] = Field(default_factory=list)
    addons: list[AddonLine] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def drop_unreadable_lines(cls, data: Any) -> Any:
        """Null lists become empty and entries that are not objects are dropped."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        for key in ("equipment", "equipments", "materials", "labor", "addons"):
            if key not in data:
                continue
            entries = data[key]
            if not isinstance(entries, list | tuple):
                entries = []
            data[key] = [e for e in entries if isinstance(e, Mapping | BaseModel)]
        return data

    def equipment_ids(self) -> set[str]:
        return {line.equipment_id for line in self.equipment if line.equipment_id}

    def material_ids(self) -> set[str]:
        return {line.material_id for line in self.materials if line.material_id}


class SalesDocument(BaseModel):
    """A quote or a job."""

    id: int | None = None
    tenant_id: str | None = None
    kind: DocumentKind
    code: str | None = None
    title: str
    customer_name: str | None = None
    margin_pct: Numeric = 0.0
    items: LineItems = Field(default_factory=LineItems)
    totals: DocumentTotals = Field(default_factory=DocumentTotals)
    status: DocumentStatus | None = None
    source_quote_id: int | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def default_status(self) -> "SalesDocument":
        """New documents start in their kind's initial status."""
        if self.status is None:
            self.status = INITIAL_STATUS[self.kind]
        return self
