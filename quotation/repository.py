"""ORM-backed persistence for quotation headers and their line items."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from .models import Product, Quotation, QuotationItem

HEADER_FIELDS = (
    "quote_date",
    "customer_name",
    "customer_phone",
    "customer_email",
    "customer_address",
    "customer_gstin",
    "subtotal",
    "cgst_total",
    "sgst_total",
    "total",
    "notes",
    "proposal_items",
)

ITEM_FIELDS = (
    "name",
    "description",
    "hsn",
    "unit",
    "qty",
    "unit_price",
    "gst_rate",
    "taxable",
    "cgst",
    "sgst",
    "total",
)


def _header_values(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {name: fields[name] for name in HEADER_FIELDS if name in fields}


def insert_quotation_header(fields: Mapping[str, Any]) -> int:
    quotation = Quotation.objects.create(quote_no=None, **_header_values(fields))
    return quotation.pk


def update_quotation_header(quotation_id: int, fields: Mapping[str, Any]) -> None:
    Quotation.objects.filter(pk=quotation_id).update(**_header_values(fields))


def assign_quote_number(quotation_id: int, quote_no: str) -> None:
    Quotation.objects.filter(pk=quotation_id).update(quote_no=quote_no)


def get_quotation_header(quotation_id: Any, *, for_update: bool = False) -> Quotation | None:
    queryset = Quotation.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.filter(pk=int(quotation_id)).first()
    except (TypeError, ValueError):
        return None


def _product_id(value: Any) -> int | None:
    try:
        product_id = int(value)
    except (TypeError, ValueError):
        return None
    if not Product.objects.filter(pk=product_id).exists():
        return None
    return product_id


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def replace_line_items(quotation_id: int, items: Iterable[Mapping[str, Any]]) -> None:
    QuotationItem.objects.filter(quotation_id=quotation_id).delete()
    rows = []
    for item in items:
        values = {name: _blank_to_none(item.get(name)) for name in ITEM_FIELDS}
        rows.append(
            QuotationItem(
                quotation_id=quotation_id,
                product_id=_product_id(item.get("product_id")),
                **values,
            )
        )
    # bulk_create keeps insertion order, which is the line order on the PDF.
    QuotationItem.objects.bulk_create(rows)


def get_line_items(quotation_id: int) -> list[dict[str, Any]]:
    return [
        {
            "product_id": item.product_id,
            "name": item.name,
            "description": item.description,
            "hsn": item.hsn,
            "unit": item.unit,
            "qty": float(item.qty or 0),
            "unit_price": float(item.unit_price or 0),
            "gst_rate": float(item.gst_rate or 0),
        }
        for item in QuotationItem.objects.filter(quotation_id=quotation_id).order_by("id")
    ]
