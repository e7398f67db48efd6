import json
import tempfile
from pathlib import Path

from django.test import SimpleTestCase, override_settings

from quotation.config import (
    SectionRow,
    clear_config_cache,
    load_company_profile,
    load_document_sections,
    load_proposal_template,
)


class ConfigLoadingTests(SimpleTestCase):
    def setUp(self):
        clear_config_cache()
        self.addCleanup(clear_config_cache)

    def test_bundled_config(self):
        company = load_company_profile()

        self.assertEqual(company.name, "Suryodaya Solar Systems")
        self.assertEqual(len(load_proposal_template()), 7)
        self.assertTrue(load_document_sections().scope_of_work)

    def test_missing_files_fall_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp, override_settings(QUOTATION_CONFIG_DIR=tmp):
            with self.assertLogs("quotation.config", level="WARNING"):
                company = load_company_profile()
            self.assertEqual(company.name, "")
            self.assertEqual(company.terms, [])
            with self.assertLogs("quotation.config", level="WARNING"):
                self.assertEqual(load_proposal_template(), [])

    def test_section_rows_accept_strings_and_skip_blanks(self):
        with tempfile.TemporaryDirectory() as tmp, override_settings(QUOTATION_CONFIG_DIR=tmp):
            sections = {
                "scope_of_work": ["Civil work", {"label": "Installation", "remark": "Vendor"}, {"label": " "}],
                "other_charges_footer": "  ",
            }
            (Path(tmp) / "sections.json").write_text(json.dumps(sections), encoding="utf-8")

            loaded = load_document_sections()

        self.assertEqual(
            loaded.scope_of_work,
            [SectionRow("Civil work"), SectionRow("Installation", "Vendor")],
        )
        self.assertIsNone(loaded.other_charges_footer)
        self.assertEqual(loaded.warranty, [])

    def test_malformed_or_mistyped_files_fall_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp, override_settings(QUOTATION_CONFIG_DIR=tmp):
            (Path(tmp) / "company.json").write_text("{not json", encoding="utf-8")
            (Path(tmp) / "sections.json").write_text(json.dumps(["Installation"]), encoding="utf-8")
            (Path(tmp) / "proposal_template.json").write_text(json.dumps({"sr_no": 1}), encoding="utf-8")

            with self.assertLogs("quotation.config", level="WARNING") as logs:
                company = load_company_profile()
                sections = load_document_sections()
                template = load_proposal_template()

        self.assertEqual(company.name, "")
        self.assertEqual(sections.scope_of_work, [])
        self.assertEqual(template, [])
        self.assertEqual(len(logs.records), 3)

    def test_string_section_value_is_ignored(self):
        with tempfile.TemporaryDirectory() as tmp, override_settings(QUOTATION_CONFIG_DIR=tmp):
            (Path(tmp) / "sections.json").write_text(json.dumps({"warranty": "5 years"}), encoding="utf-8")

            with self.assertLogs("quotation.config", level="WARNING"):
                loaded = load_document_sections()

        self.assertEqual(loaded.warranty, [])
