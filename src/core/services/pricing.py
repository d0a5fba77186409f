"""
Quote/job totals engine.

Turns a document's line items into a cost/charge breakdown:

- Ink equipment (UV / sublimation printers) contributes raw ink cost,
  ``usage x rate`` over C, M, Y, K and gloss plus exactly one of white or
  soft-white. The margin multiplier applies to this cost only.
- Other equipment contributes an hourly or flat equipment charge.
- Materials contribute cost at purchase price and charge at selling price,
  both read from the reference prices passed in (live, not frozen).
- Labor and add-ons contribute charge only.

Reference data is injected as plain mappings; the engine performs no I/O
and never raises on bad numbers or missing references.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from src.core.entities.equipment import (
    ALWAYS_PRICED_CHANNELS,
    Equipment,
    InkChannel,
    is_ink_category,
    normalize_categories,
)
from src.core.entities.material import Material, MaterialPrice
from src.core.entities.sales_document import (
    AddonLine,
    EquipmentLine,
    LaborLine,
    LineItems,
    MaterialLine,
)
from src.core.entities.totals import DocumentTotals
from src.core.numeric import round_money, to_number

DEFAULT_INK_CATEGORIES: frozenset[str] = frozenset({"UV Printer", "Sublimation Printer"})


LINE_TYPES = {
    "equipment": EquipmentLine,
    "materials": MaterialLine,
    "labor": LaborLine,
    "addons": AddonLine,
}


def build_reference_maps(
    equipment: Iterable[Equipment],
    materials: Iterable[Material],
) -> tuple[dict[str, Equipment], dict[str, MaterialPrice]]:
    """Index reference rows by id for ``compute_document_totals``."""
    equipment_by_id = {e.id: e for e in equipment if e.id}
    prices_by_id = {m.id: m.price for m in materials if m.id}
    return equipment_by_id, prices_by_id


def resolve_category(line: EquipmentLine, equipment: Equipment | None) -> str:
    """The line's own category, else the equipment's."""
    if line.type:
        return line.type
    return equipment.type if equipment is not None else ""


def ink_cost_for_line(line: EquipmentLine, equipment: Equipment | None) -> float:
    """Raw (unmarked-up) ink cost of a single equipment line."""
    if equipment is None:
        return 0.0
    rates = equipment.ink_rates

    cost = 0.0
    for channel in ALWAYS_PRICED_CHANNELS:
        cost += line.usage(channel) * rates.rate(channel)

    use_soft_white = (
        line.use_soft_white if line.use_soft_white is not None else equipment.use_soft_white
    )
    white = InkChannel.SOFT_WHITE if use_soft_white else InkChannel.WHITE
    cost += line.usage(white) * rates.rate(white)
    return cost


def equipment_charge_for_line(line: EquipmentLine, equipment: Equipment | None) -> float:
    """Hourly or flat charge of a non-ink equipment line."""
    if equipment is None:
        return 0.0
    mode = line.mode or equipment.mode.value
    if mode == "hourly":
        rate = line.rate if line.rate is not None else equipment.hourly_rate
        return to_number(line.hours) * to_number(rate)
    flat_fee = line.flat_fee if line.flat_fee is not None else equipment.flat_fee
    return to_number(flat_fee)


def _price_of(entry: Any) -> tuple[float, float]:
    """(purchase, selling) from a MaterialPrice, Material or plain mapping."""
    if entry is None:
        return 0.0, 0.0
    if isinstance(entry, Mapping):
        return to_number(entry.get("purchase_price")), to_number(entry.get("selling_price"))
    return (
        to_number(getattr(entry, "purchase_price", 0)),
        to_number(getattr(entry, "selling_price", 0)),
    )


def _as_equipment(entry: Any) -> Equipment | None:
    if entry is None or isinstance(entry, Equipment):
        return entry
    if not isinstance(entry, Mapping):
        return None
    try:
        return Equipment.model_validate({"name": "", **entry})
    except ValidationError:
        return None


def _as_line_items(lines: Any) -> LineItems:
    """Validate the whole list, else line by line keeping what parses."""
    if isinstance(lines, LineItems):
        return lines
    if not isinstance(lines, Mapping):
        return LineItems()
    try:
        return LineItems.model_validate(lines)
    except ValidationError:
        pass

    kept: dict[str, list] = {}
    for key, line_type in LINE_TYPES.items():
        entries = lines.get(key)
        if key == "equipment" and entries is None:
            entries = lines.get("equipments")
        kept[key] = []
        for entry in entries if isinstance(entries, list | tuple) else ():
            try:
                kept[key].append(line_type.model_validate(entry))
            except ValidationError:
                continue
    return LineItems(**kept)


def compute_document_totals(
    equipment_rates: Mapping[str, Equipment | Mapping[str, Any]],
    material_prices: Mapping[str, MaterialPrice | Material | Mapping[str, Any]],
    lines: LineItems | Mapping[str, Any] | None,
    margin_pct: Any,
    *,
    ink_categories: Iterable[str] = DEFAULT_INK_CATEGORIES,
) -> DocumentTotals:
    """
    Compute the totals of a quote or job.

    Args:
        equipment_rates: Equipment reference rows keyed by equipment id.
        material_prices: Current material prices keyed by material id.
        lines: Document line items (model or serialized mapping).
        margin_pct: Markup percentage applied to ink cost only. Not clamped.
        ink_categories: Equipment categories priced by ink usage.

    Returns:
        DocumentTotals with every monetary figure rounded to cents.
        Components are rounded first and the aggregates are built from the
        rounded components, so the reported figures always add up.
    """
    items = _as_line_items(lines)
    categories = normalize_categories(
        ink_categories if ink_categories is not None else DEFAULT_INK_CATEGORIES
    )
    if not isinstance(equipment_rates, Mapping):
        equipment_rates = {}
    if not isinstance(material_prices, Mapping):
        material_prices = {}

    ink_cost = 0.0
    eq_charge = 0.0
    for line in items.equipment:
        equipment = _as_equipment(equipment_rates.get(line.equipment_id or ""))
        if is_ink_category(resolve_category(line, equipment), categories):
            ink_cost += ink_cost_for_line(line, equipment)
        else:
            eq_charge += equipment_charge_for_line(line, equipment)

    ink_charge = ink_cost * (1 + to_number(margin_pct) / 100)

    mat_cost = 0.0
    mat_charge = 0.0
    for line in items.materials:
        purchase, selling = _price_of(material_prices.get(line.material_id or ""))
        mat_cost += to_number(line.qty) * purchase
        mat_charge += to_number(line.qty) * selling

    labor_charge = sum(to_number(line.hours) * to_number(line.rate) for line in items.labor)
    addon_charge = sum(to_number(line.qty) * to_number(line.price) for line in items.addons)

    ink_cost_raw = round_money(ink_cost)
    ink_charge = round_money(ink_charge)
    mat_cost = round_money(mat_cost)
    mat_charge = round_money(mat_charge)
    eq_charge = round_money(eq_charge)
    labor_charge = round_money(labor_charge)
    addon_charge = round_money(addon_charge)

    total_charge = round_money(
        ink_charge + mat_charge + eq_charge + labor_charge + addon_charge
    )
    total_cost = round_money(ink_cost_raw + mat_cost)
    profit = round_money(total_charge - total_cost)
    profit_pct = round_money(profit / total_cost * 100) if total_cost > 0 else 0.0

    return DocumentTotals(
        ink_cost_raw=ink_cost_raw,
        ink_charge=ink_charge,
        mat_cost=mat_cost,
        mat_charge=mat_charge,
        eq_charge=eq_charge,
        labor_charge=labor_charge,
        addon_charge=addon_charge,
        total_cost=total_cost,
        total_charge_pre_tax=total_charge,
        tax_pct=0.0,
        tax=0.0,
        total_after_tax=total_charge,
        profit=profit,
        profit_pct=profit_pct,
    )
