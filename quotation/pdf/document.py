from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping, Sequence

from PIL import Image as PilImage
from reportlab.lib.utils import ImageReader

from ..config import CompanyProfile, DocumentSections, SectionRow
from ..services.tax import QuoteSummary
from ..utils import amount_in_words, format_date, format_money, format_quantity
from .surface import PageSurface, ReportLabSurface
from .tables import Column, TableSpec, draw_table

logger = logging.getLogger(__name__)

SECTION_GAP = 15
LOGO_WIDTH = 120
LETTERHEAD_TEXT_X = 180

ITEM_COLUMNS = (
    Column("no", "No", 28, "center"),
    Column("item", "Item", 157),
    Column("hsn", "HSN", 50, "center"),
    Column("qty", "Qty", 40, "right"),
    Column("rate", "Rate", 60, "right"),
    Column("taxable", "Taxable", 65, "right"),
    Column("gst", "GST%", 45, "right"),
    Column("total", "Total", 70, "right"),
)

PROPOSAL_COLUMNS = (
    Column("sr_no", "Sr. No", 40, "center"),
    Column("description", "Description", 150),
    Column("unit", "Unit", 45, "center"),
    Column("specification", "Specification", 165),
    Column("qty", "Qty", 45, "center"),
    Column("make", "Make", 70),
)


def _label_remark_columns(label: str, remark: str) -> tuple[Column, ...]:
    return (
        Column("sr_no", "Sr. No", 40, "center"),
        Column("label", label, 275),
        Column("remark", remark, 200),
    )


def _section_rows(rows: Sequence[SectionRow]) -> list[dict[str, Any]]:
    return [
        {"sr_no": index, "label": row.label, "remark": row.remark}
        for index, row in enumerate(rows, start=1)
    ]


def _load_logo(path: Path | None, width: float) -> tuple[ImageReader, float] | None:
    if path is None or not path.exists():
        return None
    try:
        with PilImage.open(path) as img:
            img = img.convert("RGBA")
            buffer = BytesIO()
            img.save(buffer, format="PNG")
            buffer.seek(0)
            height = width * img.height / img.width
        return ImageReader(buffer), height
    except (OSError, ValueError) as exc:
        logger.warning("Skipping unreadable logo %s: %s", path, exc)
        return None


def _draw_letterhead(surface: PageSurface, company: CompanyProfile, logo: Path | None) -> float:
    bottom = surface.top
    loaded = _load_logo(logo, LOGO_WIDTH)
    if loaded is not None:
        image, height = loaded
        surface.draw_image(image, surface.left, surface.top, LOGO_WIDTH, height)
        bottom = surface.top + height

    width = surface.right - LETTERHEAD_TEXT_X
    y = 45.0
    y += surface.draw_text(company.name, LETTERHEAD_TEXT_X, y, width=width, font="Helvetica-Bold", size=18)
    for line in (
        company.tagline,
        company.address,
        f"Phone: {company.phone or ''}",
        f"Email: {company.email or ''}",
        f"GSTIN: {company.gstin or ''}",
    ):
        y += surface.draw_text(line, LETTERHEAD_TEXT_X, y, width=width, size=10)
    return max(bottom, y)


def _draw_title_block(surface: PageSurface, quote: Any, y: float) -> float:
    width = surface.right - surface.left
    y += surface.draw_text("Quotation", surface.left, y, width=width, align="right", font="Helvetica-Bold", size=16)
    y += surface.draw_text(f"Quote No: {quote.quote_no or ''}", surface.left, y, width=width, align="right")
    y += surface.draw_text(f"Date: {format_date(quote.quote_date)}", surface.left, y, width=width, align="right")
    return y


def _draw_customer_block(surface: PageSurface, quote: Any, y: float) -> float:
    width = surface.right - surface.left
    for line in (
        f"Customer: {quote.customer_name}",
        f"Phone: {quote.customer_phone or '-'}",
        f"Email: {quote.customer_email or '-'}",
        f"GSTIN: {quote.customer_gstin or '-'}",
        f"Address: {quote.customer_address or '-'}",
    ):
        y = surface.flow_text(line, surface.left, y, width=width, size=11)
    return y


def _item_rows(items: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    rows = []
    for index, item in enumerate(items, start=1):
        name = str(item.get("name") or "")
        description = str(item.get("description") or "").strip()
        rows.append(
            {
                "no": index,
                "item": f"{name}\n{description}" if description else name,
                "hsn": item.get("hsn") or "-",
                "qty": format_quantity(item.get("qty")),
                "rate": format_money(item.get("unit_price")),
                "taxable": format_money(item.get("taxable")),
                "gst": format_money(item.get("gst_rate")),
                "total": format_money(item.get("total")),
            }
        )
    return rows


def _draw_totals(surface: PageSurface, summary: QuoteSummary, y: float) -> float:
    box_width = 200
    x = surface.right - box_width
    lines = (
        (f"Subtotal: {format_money(summary.subtotal)}", "Helvetica", 10),
        (f"CGST: {format_money(summary.cgst_total)}", "Helvetica", 10),
        (f"SGST: {format_money(summary.sgst_total)}", "Helvetica", 10),
        (f"Grand Total: {format_money(summary.total)}", "Helvetica-Bold", 12),
    )
    words = amount_in_words(summary.total)
    full_width = surface.right - surface.left
    needed = 10 + sum(size * 1.2 + 3 for _, _, size in lines)
    needed += surface.text_height(words, full_width, "Helvetica-Oblique", 9) + 4
    if y + needed >= surface.bottom:
        surface.new_page()
        y = surface.top

    y += 10
    for text, font, size in lines:
        y += surface.draw_text(text, x, y, width=box_width, align="right", font=font, size=size) + 3
    y += 4
    y += surface.draw_text(words, surface.left, y, width=full_width, align="right", font="Helvetica-Oblique", size=9)
    return y


def _draw_notes(surface: PageSurface, company: CompanyProfile, quote: Any, y: float) -> float:
    entries = list(company.terms)
    if quote.notes:
        entries.append(str(quote.notes))
    if not entries:
        return y

    width = surface.right - surface.left
    numbered = [f"{index}. {entry}" for index, entry in enumerate(entries, start=1)]
    heading_height = surface.text_height("Terms & Notes:", width, "Helvetica-Bold", 9)
    block_height = heading_height + sum(surface.text_height(text, width, size=9) for text in numbered)
    if y + block_height >= surface.bottom and y > surface.top:
        surface.new_page()
        y = surface.top

    y = surface.flow_text("Terms & Notes:", surface.left, y, width=width, font="Helvetica-Bold", size=9)
    for text in numbered:
        # Long entries continue on the next page line by line.
        y = surface.flow_text(text, surface.left, y, width=width, size=9)
    return y


def compose_quote_document(
    surface: PageSurface,
    quote: Any,
    items: Sequence[Mapping[str, Any]],
    summary: QuoteSummary,
    *,
    proposal_items: Sequence[Mapping[str, Any]],
    company: CompanyProfile,
    sections: DocumentSections,
    logo: Path | None = None,
) -> float:
    """Lay the whole proposal out on ``surface``. Returns the final cursor."""
    y = _draw_letterhead(surface, company, logo) + 20
    y = _draw_title_block(surface, quote, y) + 12
    y = _draw_customer_block(surface, quote, y) + SECTION_GAP

    y = draw_table(surface, TableSpec(columns=ITEM_COLUMNS, rows=_item_rows(items)), y)
    y = _draw_totals(surface, summary, y) + SECTION_GAP

    tables: list[TableSpec] = []
    if proposal_items:
        tables.append(
            TableSpec(
                title="Items Considered for Proposal",
                columns=PROPOSAL_COLUMNS,
                rows=list(proposal_items),
            )
        )
    if sections.other_charges or sections.other_charges_footer:
        rows = _section_rows(sections.other_charges)
        if sections.other_charges_footer:
            rows.append({"sr_no": "", "label": sections.other_charges_footer, "remark": ""})
        tables.append(
            TableSpec(
                title="Estimated Other Charges",
                columns=_label_remark_columns("Particulars", "Remarks"),
                rows=rows,
            )
        )
    if sections.scope_of_work:
        tables.append(
            TableSpec(
                title="Scope of Work",
                columns=_label_remark_columns("Description", "Responsibility"),
                rows=_section_rows(sections.scope_of_work),
            )
        )
    if sections.terms_conditions:
        tables.append(
            TableSpec(
                title="Terms & Conditions",
                columns=_label_remark_columns("Term", "Details"),
                rows=_section_rows(sections.terms_conditions),
            )
        )
    if sections.warranty:
        tables.append(
            TableSpec(
                title="Warrantee",
                columns=_label_remark_columns("Item", "Warranty"),
                rows=_section_rows(sections.warranty),
            )
        )

    for table in tables:
        y = draw_table(surface, table, y, repeat_title_on_break=True) + SECTION_GAP

    return _draw_notes(surface, company, quote, y)


def build_quote_pdf_bytes(
    quote: Any,
    items: Sequence[Mapping[str, Any]],
    summary: QuoteSummary,
    *,
    proposal_items: Sequence[Mapping[str, Any]],
    company: CompanyProfile,
    sections: DocumentSections,
    logo: Path | None = None,
) -> bytes:
    surface = ReportLabSurface(
        title=f"Quotation {quote.quote_no or ''}".strip(),
        author=company.name or None,
    )
    compose_quote_document(
        surface,
        quote,
        items,
        summary,
        proposal_items=proposal_items,
        company=company,
        sections=sections,
        logo=logo,
    )
    return surface.finish()
