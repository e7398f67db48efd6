import tempfile
from datetime import date
from pathlib import Path

from django.test import SimpleTestCase
from PIL import Image as PilImage

from quotation.config import CompanyProfile, DocumentSections, SectionRow
from quotation.models import Quotation
from quotation.pdf.document import _draw_notes, build_quote_pdf_bytes, compose_quote_document
from quotation.pdf.surface import RecordingSurface, leading_for
from quotation.services.tax import build_quote_summary, calculate_item

COMPANY = CompanyProfile(
    name="Suryodaya Solar Systems",
    tagline="Rooftop solar",
    address="14, Avinashi Road, Coimbatore",
    phone="+91 98430 12345",
    email="sales@example.in",
    gstin="33ABCDE1234F1Z5",
    terms=["Prices valid for 15 days."],
)

SECTIONS = DocumentSections(
    other_charges=[SectionRow("Net meter charges", "Payable by customer")],
    other_charges_footer="Statutory fees at actuals.",
    scope_of_work=[SectionRow("Installation", "Vendor")],
    terms_conditions=[SectionRow("Payment", "70% advance")],
    warranty=[SectionRow("Inverter", "8 years")],
)

PROPOSAL = [
    {"sr_no": 1, "description": "Solar PV Modules", "unit": "Nos", "specification": "540 Wp", "qty": "10", "make": "Waaree"},
]


def _quote(**overrides):
    values = {
        "pk": 1,
        "quote_no": "Q-2024-0001",
        "quote_date": date(2024, 3, 15),
        "customer_name": "Kovai Textiles",
        "customer_phone": "0422 123456",
        "customer_address": "Tiruppur",
        "notes": "Site visit on Monday.",
    }
    values.update(overrides)
    return Quotation(**values)


def _items(count=2):
    raw = [
        {"name": "Inverter", "description": "5 kW grid tie", "hsn": "8504", "qty": 2, "unit_price": 100, "gst_rate": 9},
        {"name": "Installation", "qty": 1, "unit_price": 50, "gst_rate": 0},
    ]
    return [calculate_item(raw[n % 2]) for n in range(count)]


class ComposeQuoteDocumentTests(SimpleTestCase):
    def _compose(self, surface=None, items=None, sections=SECTIONS, proposal=PROPOSAL, quote=None, logo=None, company=COMPANY):
        surface = surface or RecordingSurface()
        items = _items() if items is None else items
        y = compose_quote_document(
            surface,
            quote or _quote(),
            items,
            build_quote_summary(items),
            proposal_items=proposal,
            company=company,
            sections=sections,
            logo=logo,
        )
        return surface, y

    def test_sections_are_drawn_in_order(self):
        surface, y = self._compose()
        texts = surface.texts()
        order = [
            "Suryodaya Solar Systems",
            "Quotation",
            "Quote No: Q-2024-0001",
            "Date: 2024-03-15",
            "Customer: Kovai Textiles",
            "Inverter",
            "Subtotal: 250.00",
            "CGST: 9.00",
            "SGST: 9.00",
            "Grand Total: 268.00",
            "Rupees Two Hundred Sixty Eight Only",
            "Items Considered for Proposal",
            "Estimated Other Charges",
            "Scope of Work",
            "Terms & Conditions",
            "Warrantee",
            "Terms & Notes:",
        ]
        positions = [texts.index(text) for text in order]
        self.assertEqual(positions, sorted(positions))
        self.assertIn("Statutory fees at actuals.", texts)
        self.assertIn("2. Site visit on Monday.", texts)
        self.assertLess(y, surface.bottom)

    def test_line_items_are_recomputed_values(self):
        surface, _ = self._compose()
        texts = surface.texts()
        self.assertIn("218.00", texts)
        self.assertIn("50.00", texts)
        self.assertIn("8504", texts)
        self.assertIn("5 kW grid tie", texts)

    def test_empty_sections_are_skipped(self):
        surface, _ = self._compose(sections=DocumentSections(), proposal=[])
        texts = surface.texts()
        for title in ("Items Considered for Proposal", "Estimated Other Charges", "Scope of Work", "Warrantee"):
            self.assertNotIn(title, texts)
        self.assertIn("Grand Total: 268.00", texts)

    def test_missing_logo_is_skipped(self):
        surface, _ = self._compose(logo=Path("/nonexistent/logo.png"))
        self.assertEqual(surface.ops("image"), [])

    def test_logo_is_drawn_when_present(self):
        with tempfile.TemporaryDirectory() as tmp:
            logo = Path(tmp) / "logo.png"
            PilImage.new("RGB", (240, 80), "orange").save(logo)
            surface, _ = self._compose(logo=logo)
        images = surface.ops("image")
        self.assertEqual(len(images), 1)
        self.assertEqual(images[0][1]["width"], 120)
        self.assertAlmostEqual(images[0][1]["height"], 40)

    def test_unreadable_logo_is_skipped(self):
        with tempfile.TemporaryDirectory() as tmp:
            logo = Path(tmp) / "logo.png"
            logo.write_bytes(b"not an image")
            with self.assertLogs("quotation.pdf.document", level="WARNING"):
                surface, _ = self._compose(logo=logo)
        self.assertEqual(surface.ops("image"), [])

    def test_long_quotes_flow_over_pages_with_repeated_item_header(self):
        surface, y = self._compose(items=_items(80))
        self.assertGreater(surface.page_number, 2)
        self.assertIn("HSN", surface.texts(page=2))
        self.assertLess(y, surface.bottom)

    def test_notes_block_is_omitted_without_terms_or_notes(self):
        company = CompanyProfile(name="Solar Co")
        surface, _ = self._compose(quote=_quote(notes=None), company=company)
        self.assertNotIn("Terms & Notes:", surface.texts())


class BuildQuotePdfBytesTests(SimpleTestCase):
    def test_produces_pdf(self):
        items = _items()
        content = build_quote_pdf_bytes(
            _quote(),
            items,
            build_quote_summary(items),
            proposal_items=PROPOSAL,
            company=COMPANY,
            sections=SECTIONS,
        )
        self.assertTrue(content.startswith(b"%PDF-"))


def _text_ops_below_bottom(surface):
    return [
        details
        for _, details in surface.ops("text")
        if details["y"] + leading_for(details["size"]) > surface.bottom + 0.001
    ]


class NotesBlockTests(SimpleTestCase):
    def test_block_that_does_not_fit_moves_to_next_page(self):
        surface = RecordingSurface()

        y = _draw_notes(surface, COMPANY, _quote(), surface.bottom - 15)

        self.assertEqual(surface.page_number, 2)
        self.assertEqual(surface.texts(page=1), [])
        self.assertEqual(
            surface.texts(page=2),
            ["Terms & Notes:", "1. Prices valid for 15 days.", "2. Site visit on Monday."],
        )
        self.assertAlmostEqual(y, surface.top + 3 * leading_for(9))

    def test_block_that_fits_stays_on_page(self):
        surface = RecordingSurface()

        _draw_notes(surface, COMPANY, _quote(), 300)

        self.assertEqual(surface.page_number, 1)
        self.assertIn("2. Site visit on Monday.", surface.texts(page=1))

    def test_long_note_continues_on_following_pages(self):
        surface = RecordingSurface()
        notes = "\n".join(f"line {n}" for n in range(1, 121))

        y = _draw_notes(surface, CompanyProfile(name="Solar Co"), _quote(notes=notes), 100)

        self.assertGreaterEqual(surface.page_number, 2)
        self.assertEqual(_text_ops_below_bottom(surface), [])
        texts = surface.texts()
        self.assertEqual(texts[1], "1. line 1")
        self.assertEqual(texts[-1], "line 120")
        self.assertLess(y, surface.bottom)


class CustomerBlockTests(SimpleTestCase):
    def test_long_address_flows_onto_next_page(self):
        surface = RecordingSurface()
        address = "\n".join(f"Plot {n}" for n in range(1, 121))

        compose_quote_document(
            surface,
            _quote(customer_address=address),
            _items(),
            build_quote_summary(_items()),
            proposal_items=[],
            company=COMPANY,
            sections=DocumentSections(),
        )

        plot_ops = [(page, details) for page, details in surface.ops("text") if "Plot " in details["text"]]
        self.assertEqual(len(plot_ops), 120)
        self.assertGreater(plot_ops[-1][0], 1)
        self.assertEqual(
            [details for _, details in plot_ops if details["y"] + leading_for(11) > surface.bottom + 0.001],
            [],
        )
