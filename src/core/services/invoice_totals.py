"""
Invoice totals engine.

Derives the payable figures of an invoice from the frozen pre-tax charge
of its source job plus the invoice-only adjustments (discount, tax rate,
deposit).

Flooring policy: only the discounted taxable base is floored at zero.
``total`` and ``total_due`` are reported exactly as the arithmetic gives
them, so a deposit larger than the total produces a negative amount due
and callers decide how to display it.

``apply_tax_to_discount`` selects the tax base:

- True: tax on the discounted amount, ``taxable = max(0, pre_tax - discount)``
  and ``total = taxable + tax``.
- False: tax on the full pre-tax amount, ``taxable = pre_tax`` and
  ``total = (pre_tax - discount) + tax``.
"""

from collections.abc import Mapping
from typing import Any

from src.core.entities.totals import DiscountType, DocumentTotals, InvoiceTotals
from src.core.numeric import round_money, to_number

# Keys older totals payloads used for the pre-tax charge, most specific first
_PRE_TAX_KEYS = ("total_charge_pre_tax", "totalChargePreTax", "totalCharge")


def snapshot_pre_tax(snapshot: Any) -> float:
    """Extract the pre-tax charge from a totals snapshot of any supported shape."""
    if snapshot is None:
        return 0.0
    if isinstance(snapshot, DocumentTotals):
        return to_number(snapshot.total_charge_pre_tax)
    if isinstance(snapshot, Mapping):
        for key in _PRE_TAX_KEYS:
            if snapshot.get(key) is not None:
                return to_number(snapshot[key])
        return 0.0
    return to_number(snapshot)


def _is_percent(discount_type: Any) -> bool:
    if isinstance(discount_type, DiscountType):
        return discount_type is DiscountType.PERCENT
    return str(discount_type or "").strip().lower() == DiscountType.PERCENT.value


def compute_invoice_totals(
    snapshot: Any,
    tax_rate_pct: Any = 0,
    discount_type: DiscountType | str | None = DiscountType.FLAT,
    discount_value: Any = 0,
    apply_tax_to_discount: bool = False,
    deposit: Any = 0,
) -> InvoiceTotals:
    """
    Compute invoice totals from a pre-tax snapshot and adjustments.

    Unknown discount types are treated as flat. Never raises; absent or
    malformed numbers count as zero.
    """
    pre_tax = snapshot_pre_tax(snapshot)
    rate = to_number(tax_rate_pct)

    if _is_percent(discount_type):
        discount = pre_tax * (to_number(discount_value) / 100)
    else:
        discount = to_number(discount_value)

    if apply_tax_to_discount:
        taxable = max(0.0, pre_tax - discount)
        tax = taxable * (rate / 100)
        total = taxable + tax
    else:
        taxable = pre_tax
        tax = pre_tax * (rate / 100)
        total = (pre_tax - discount) + tax

    total_due = total - to_number(deposit)

    return InvoiceTotals(
        pre_tax=round_money(pre_tax),
        discount=round_money(discount),
        taxable=round_money(taxable),
        tax=round_money(tax),
        total=round_money(total),
        total_due=round_money(total_due),
    )
