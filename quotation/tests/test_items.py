import json

from django.test import SimpleTestCase

from quotation.exceptions import (
    MalformedItemsError,
    MissingItemNameError,
    MissingItemsError,
    QuoteValidationError,
)
from quotation.services.items import parse_items, parse_proposal_items

TEMPLATE = [
    {"sr_no": 1, "description": "Panel", "unit": "pcs", "specification": "450W", "qty": "1", "make": "Brand"},
    {"sr_no": 2, "description": "Inverter", "unit": "Nos", "specification": "5 kW", "qty": "1", "make": "Growatt"},
    {"sr_no": 3, "description": "DC Cable", "unit": "Mtr", "specification": "4 sq.mm", "qty": "60", "make": "Polycab"},
]


class ParseItemsTests(SimpleTestCase):
    def test_empty_array_is_missing_items(self):
        with self.assertRaises(MissingItemsError):
            parse_items("[]")

    def test_invalid_json_is_malformed(self):
        with self.assertRaises(MalformedItemsError):
            parse_items("not json")

    def test_blank_names_only_is_missing_name(self):
        with self.assertRaises(MissingItemNameError) as ctx:
            parse_items('[{"name":"  "}]')
        self.assertEqual(str(ctx.exception), "Please provide item name.")

    def test_non_array_payload_is_missing_items(self):
        with self.assertRaises(MissingItemsError):
            parse_items('{"name": "Panel"}')

    def test_missing_payload_is_missing_items(self):
        with self.assertRaises(MissingItemsError):
            parse_items(None)

    def test_errors_are_value_errors(self):
        for payload in ("[]", "nope", '[{"name": ""}]'):
            with self.assertRaises(QuoteValidationError):
                parse_items(payload)
            with self.assertRaises(ValueError):
                parse_items(payload)

    def test_blank_named_rows_are_dropped(self):
        payload = json.dumps(
            [
                {"name": " Panel ", "qty": 2, "unit_price": 100, "gst_rate": 18},
                {"name": "", "qty": 5, "unit_price": 10, "gst_rate": 18},
                {"name": "Inverter", "qty": 1, "unit_price": 50, "gst_rate": 0, "hsn": "8504"},
            ]
        )
        items = parse_items(payload)
        self.assertEqual([item["name"] for item in items], ["Panel", "Inverter"])
        self.assertEqual(items[0]["total"], 236.0)
        self.assertEqual(items[1]["hsn"], "8504")

    def test_non_object_entries_count_as_nameless(self):
        with self.assertRaises(MissingItemNameError):
            parse_items("[1, 2]")


class ParseProposalItemsTests(SimpleTestCase):
    def test_empty_template_suppresses_section(self):
        self.assertEqual(parse_proposal_items([], '[{"qty": "5"}]'), [])
        self.assertEqual(parse_proposal_items([], "garbage"), [])

    def test_positional_override(self):
        rows = parse_proposal_items(TEMPLATE[:1], '[{"qty":"5","make":"X"}]')
        self.assertEqual(
            rows,
            [{"sr_no": 1, "description": "Panel", "unit": "pcs", "specification": "450W", "qty": "5", "make": "X"}],
        )

    def test_rows_beyond_submission_keep_defaults(self):
        rows = parse_proposal_items(TEMPLATE, '[{"qty": "12"}]')
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0]["qty"], "12")
        self.assertEqual(rows[0]["make"], "Brand")
        self.assertEqual(rows[1]["qty"], "1")
        self.assertEqual(rows[2]["make"], "Polycab")

    def test_extra_submitted_rows_are_discarded(self):
        submitted = json.dumps([{"qty": str(n)} for n in range(10)])
        rows = parse_proposal_items(TEMPLATE, submitted)
        self.assertEqual([row["qty"] for row in rows], ["0", "1", "2"])

    def test_malformed_submission_falls_back_to_template(self):
        for submitted in ("{", '{"qty": "9"}', "", None, "42"):
            rows = parse_proposal_items(TEMPLATE, submitted)
            self.assertEqual([row["qty"] for row in rows], ["1", "1", "60"])

    def test_present_key_overrides_even_when_empty(self):
        rows = parse_proposal_items(TEMPLATE, '[{"make": ""}]')
        self.assertEqual(rows[0]["make"], "")
        self.assertEqual(rows[0]["qty"], "1")

    def test_structural_fields_cannot_be_overridden(self):
        rows = parse_proposal_items(TEMPLATE, '[{"description": "Hacked", "unit": "kg", "qty": "2"}]')
        self.assertEqual(rows[0]["description"], "Panel")
        self.assertEqual(rows[0]["unit"], "pcs")
        self.assertEqual(rows[0]["qty"], "2")

    def test_rows_with_sr_no_bind_by_key(self):
        submitted = json.dumps([{"sr_no": "3", "qty": "80"}, {"sr_no": 1, "make": "Adani"}])
        rows = parse_proposal_items(TEMPLATE, submitted)
        self.assertEqual(rows[0]["make"], "Adani")
        self.assertEqual(rows[0]["qty"], "1")
        self.assertEqual(rows[1]["qty"], "1")
        self.assertEqual(rows[2]["qty"], "80")

    def test_keyed_rows_survive_template_reordering(self):
        saved = parse_proposal_items(TEMPLATE, '[{"qty": "10"}, {"qty": "2"}, {"qty": "75"}]')
        reordered = list(reversed(TEMPLATE))
        rows = parse_proposal_items(reordered, saved)
        self.assertEqual([(row["sr_no"], row["qty"]) for row in rows], [(3, "75"), (2, "2"), (1, "10")])

    def test_output_length_matches_template(self):
        for submitted in ("[]", '[{"qty": "1"}]', json.dumps([{}] * 8)):
            self.assertEqual(len(parse_proposal_items(TEMPLATE, submitted)), len(TEMPLATE))
