"""
Equipment domain entity.

Equipment rows are tenant reference data: hourly/flat billing defaults and,
for ink-based printers, a per-channel ink rate table.
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from src.core.numeric import Flag, Numeric


class InkChannel(str, Enum):
    """Ink channels tracked on UV / sublimation printers."""

    CYAN = "c"
    MAGENTA = "m"
    YELLOW = "y"
    BLACK = "k"
    WHITE = "white"
    SOFT_WHITE = "soft_white"
    GLOSS = "gloss"


# Channels that always contribute; white and soft-white are exclusive
ALWAYS_PRICED_CHANNELS: tuple[InkChannel, ...] = (
    InkChannel.CYAN,
    InkChannel.MAGENTA,
    InkChannel.YELLOW,
    InkChannel.BLACK,
    InkChannel.GLOSS,
)


class BillingMode(str, Enum):
    """How a non-ink equipment line is charged."""

    HOURLY = "hourly"
    FLAT = "flat"

    @classmethod
    def coerce(cls, value: Any) -> "BillingMode":
        """Parse a stored or submitted mode; unknown values bill hourly."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.HOURLY


class InkRates(BaseModel):
    """Unit rate per ink channel (typically currency per mL)."""

    c: Numeric = 0.0
    m: Numeric = 0.0
    y: Numeric = 0.0
    k: Numeric = 0.0
    white: Numeric = 0.0
    soft_white: Numeric = 0.0
    gloss: Numeric = 0.0

    def rate(self, channel: InkChannel | str) -> float:
        """Rate for a channel; unknown channels cost nothing."""
        key = channel.value if isinstance(channel, InkChannel) else str(channel)
        return float(getattr(self, key, 0.0) or 0.0)


def normalize_category(category: Any) -> str:
    """Case/whitespace-insensitive form of an equipment category."""
    return category.strip().lower() if isinstance(category, str) else ""


def normalize_categories(categories: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_category(c) for c in categories)


def is_ink_category(category: Any, ink_categories: frozenset[str]) -> bool:
    """Whether ``category`` is one of the already-normalized ``ink_categories``."""
    return normalize_category(category) in ink_categories


class Equipment(BaseModel):
    """
    A piece of shop equipment.

    ``use_soft_white`` is the default white variant for lines that do not
    choose one themselves.
    """

    id: str | None = None
    tenant_id: str | None = None
    name: str
    type: str = ""
    mode: BillingMode = BillingMode.HOURLY
    hourly_rate: Numeric = 0.0
    flat_fee: Numeric = 0.0
    ink_rates: InkRates = Field(default_factory=InkRates)
    use_soft_white: Flag = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="before")
    @classmethod
    def tolerate_loose_rows(cls, data: Any) -> Any:
        """Null names and types, missing rate tables and unknown modes get defaults."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        for key in ("name", "type"):
            if key in data and not isinstance(data[key], str):
                data[key] = ""
        if not isinstance(data.get("ink_rates"), Mapping | InkRates):
            data["ink_rates"] = {}
        if "mode" in data:
            data["mode"] = BillingMode.coerce(data["mode"])
        return data

    def uses_ink(self, ink_categories: Iterable[str]) -> bool:
        """Whether this equipment is priced by ink consumption."""
        return is_ink_category(self.type, normalize_categories(ink_categories))
