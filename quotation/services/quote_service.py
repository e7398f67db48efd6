from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from .. import repository
from ..config import (
    load_company_profile,
    load_document_sections,
    load_proposal_template,
    logo_path,
)
from ..exceptions import MissingCustomerError, QuoteNotFoundError, QuoteValidationError
from ..models import Quotation
from ..pdf.document import build_quote_pdf_bytes
from .items import parse_items, parse_proposal_items
from .tax import QuoteSummary, build_quote_summary, calculate_item

logger = logging.getLogger(__name__)


@dataclass
class LoadedQuote:
    quote: Quotation
    items: list[dict[str, Any]]
    summary: QuoteSummary
    proposal_items: list[dict[str, Any]]


@dataclass
class QuotePdf:
    content: bytes
    content_type: str
    filename: str


def generate_quote_number(quote_id: int, quote_date: date) -> str:
    return f"Q-{quote_date.year}-{quote_id:04d}"


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return timezone.localdate()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise QuoteValidationError("Invalid quotation date.") from exc


def _optional_text(value: Any) -> str | None:
    text = str(value or "").strip()
    return text or None


def _coerce_quote_id(quote_id: Any) -> int:
    if quote_id in (None, ""):
        return 0
    try:
        return int(quote_id)
    except (TypeError, ValueError) as exc:
        raise QuoteNotFoundError(quote_id) from exc


def save_quote(data: Mapping[str, Any], quote_id: Any = None) -> int:
    """
    Validate, price and persist a quotation. Returns the quotation id.

    A new quotation receives its quote number right after the header insert;
    an existing one keeps the number it already has, even when its date moves
    to another year. Header and items are written in one transaction.
    """
    items = parse_items(data.get("items_json"))
    summary = build_quote_summary(items)

    quote_date = _coerce_date(data.get("quote_date"))
    customer_name = str(data.get("customer_name") or "").strip()
    if not customer_name:
        raise MissingCustomerError()

    proposal_items = parse_proposal_items(load_proposal_template(), data.get("proposal_items_json"))
    fields = {
        "quote_date": quote_date,
        "customer_name": customer_name,
        "customer_phone": _optional_text(data.get("customer_phone")),
        "customer_email": _optional_text(data.get("customer_email")),
        "customer_address": _optional_text(data.get("customer_address")),
        "customer_gstin": _optional_text(data.get("customer_gstin")),
        "subtotal": summary.subtotal,
        "cgst_total": summary.cgst_total,
        "sgst_total": summary.sgst_total,
        "total": summary.total,
        "notes": _optional_text(data.get("notes")),
        "proposal_items": proposal_items,
    }

    final_id = _coerce_quote_id(quote_id)
    try:
        with transaction.atomic():
            if not final_id:
                final_id = repository.insert_quotation_header(fields)
                repository.assign_quote_number(final_id, generate_quote_number(final_id, quote_date))
            else:
                existing = repository.get_quotation_header(final_id, for_update=True)
                if existing is None:
                    raise QuoteNotFoundError(final_id)
                repository.update_quotation_header(final_id, fields)
                if not existing.quote_no:
                    repository.assign_quote_number(final_id, generate_quote_number(final_id, quote_date))
            repository.replace_line_items(final_id, items)
    except DatabaseError:
        logger.exception("Saving quotation %s failed, transaction rolled back", final_id or "(new)")
        raise

    logger.info(
        "Saved quotation %s for %s: %d item(s), total %.2f",
        final_id,
        customer_name,
        len(items),
        summary.total,
    )
    return final_id


def load_quote(quote_id: Any) -> LoadedQuote | None:
    quote = repository.get_quotation_header(quote_id)
    if quote is None:
        return None

    # Derived amounts are recomputed from the stored qty/rate/GST fields.
    items = [calculate_item(item) for item in repository.get_line_items(quote.pk)]
    return LoadedQuote(
        quote=quote,
        items=items,
        summary=build_quote_summary(items),
        proposal_items=parse_proposal_items(load_proposal_template(), quote.proposal_items),
    )


def list_quotes(search: str | None = None) -> QuerySet[Quotation]:
    quotes = Quotation.objects.only("id", "quote_no", "quote_date", "customer_name", "total")
    search = (search or "").strip()
    if search:
        quotes = quotes.filter(customer_name__icontains=search)
    return quotes.order_by("-id")


def quote_filename(quote: Quotation) -> str:
    return f"{quote.quote_no or f'quote-{quote.pk}'}.pdf"


def build_quote_pdf(quote_id: Any) -> QuotePdf:
    loaded = load_quote(quote_id)
    if loaded is None:
        raise QuoteNotFoundError(quote_id)

    content = build_quote_pdf_bytes(
        loaded.quote,
        loaded.items,
        loaded.summary,
        proposal_items=loaded.proposal_items,
        company=load_company_profile(),
        sections=load_document_sections(),
        logo=logo_path(),
    )
    return QuotePdf(
        content=content,
        content_type="application/pdf",
        filename=quote_filename(loaded.quote),
    )
