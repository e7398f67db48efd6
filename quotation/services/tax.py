from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

EPSILON = sys.float_info.epsilon


def round2(value: float) -> float:
    """
    Round to 2 decimals, half-up, nudged by machine epsilon so that
    values like 2.005 (stored as 2.00499999...) still round to 2.01.
    """
    rounded = math.floor((float(value) + EPSILON) * 100 + 0.5) / 100
    # normalise -0.0
    return rounded + 0.0


def to_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def calculate_item(item: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a copy of ``item`` with qty/unit_price/gst_rate coerced to numbers
    and taxable/cgst/sgst/total (re)computed. GST is split 50/50 into CGST and
    SGST, so both halves are always equal.
    """
    qty = to_number(item.get("qty"))
    unit_price = to_number(item.get("unit_price"))
    gst_rate = to_number(item.get("gst_rate"))

    taxable = round2(qty * unit_price)
    half_rate = gst_rate / 2
    cgst = round2(taxable * half_rate / 100)
    sgst = round2(taxable * half_rate / 100)
    total = round2(taxable + cgst + sgst)

    return {
        **item,
        "qty": qty,
        "unit_price": unit_price,
        "gst_rate": gst_rate,
        "taxable": taxable,
        "cgst": cgst,
        "sgst": sgst,
        "total": total,
    }


@dataclass(frozen=True)
class QuoteSummary:
    subtotal: float
    cgst_total: float
    sgst_total: float
    total: float


def build_quote_summary(items: Iterable[Mapping[str, Any]]) -> QuoteSummary:
    items = list(items)
    # Each component sum is rounded on its own before the grand total is
    # formed; totals on issued quotations depend on this order.
    subtotal = round2(sum(to_number(item.get("taxable")) for item in items))
    cgst_total = round2(sum(to_number(item.get("cgst")) for item in items))
    sgst_total = round2(sum(to_number(item.get("sgst")) for item in items))
    total = round2(subtotal + cgst_total + sgst_total)
    return QuoteSummary(
        subtotal=subtotal,
        cgst_total=cgst_total,
        sgst_total=sgst_total,
        total=total,
    )
