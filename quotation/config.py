from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass
class CompanyProfile:
    name: str
    tagline: str = ""
    address: str = ""
    phone: str | None = None
    email: str | None = None
    gstin: str | None = None
    terms: list[str] = field(default_factory=list)


@dataclass
class SectionRow:
    label: str
    remark: str = ""


@dataclass
class DocumentSections:
    other_charges: list[SectionRow] = field(default_factory=list)
    other_charges_footer: str | None = None
    scope_of_work: list[SectionRow] = field(default_factory=list)
    terms_conditions: list[SectionRow] = field(default_factory=list)
    warranty: list[SectionRow] = field(default_factory=list)


def _config_dir() -> Path:
    return Path(settings.QUOTATION_CONFIG_DIR)


def _read_json(filename: str, default: Any) -> Any:
    path = _config_dir() / filename
    if not path.exists():
        logger.warning("Config file %s not found, using defaults", path)
        return default
    try:
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning("Config file %s could not be read, using defaults: %s", path, exc)
        return default
    if not isinstance(data, type(default)):
        logger.warning("Config file %s does not hold a %s, using defaults", path, type(default).__name__)
        return default
    return data


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _section_rows(raw: Any) -> list[SectionRow]:
    if not isinstance(raw, list):
        if raw:
            logger.warning("Ignoring section entries that are not a list: %r", raw)
        return []
    rows: list[SectionRow] = []
    for entry in raw:
        if isinstance(entry, str):
            rows.append(SectionRow(label=entry.strip()))
        elif isinstance(entry, dict):
            rows.append(SectionRow(label=_text(entry.get("label")), remark=_text(entry.get("remark"))))
    return [row for row in rows if row.label or row.remark]


@lru_cache(maxsize=1)
def load_company_profile() -> CompanyProfile:
    data = _read_json("company.json", {})
    terms = data.get("terms")
    return CompanyProfile(
        name=_text(data.get("name")),
        tagline=_text(data.get("tagline")),
        address=_text(data.get("address")),
        phone=_text(data.get("phone")) or None,
        email=_text(data.get("email")) or None,
        gstin=_text(data.get("gstin")) or None,
        terms=[_text(term) for term in terms if _text(term)] if isinstance(terms, list) else [],
    )


@lru_cache(maxsize=1)
def load_proposal_template() -> list[dict[str, Any]]:
    data = _read_json("proposal_template.json", [])
    return [row for row in data if isinstance(row, dict)]


@lru_cache(maxsize=1)
def load_document_sections() -> DocumentSections:
    data = _read_json("sections.json", {})
    return DocumentSections(
        other_charges=_section_rows(data.get("other_charges")),
        other_charges_footer=_text(data.get("other_charges_footer")) or None,
        scope_of_work=_section_rows(data.get("scope_of_work")),
        terms_conditions=_section_rows(data.get("terms_conditions")),
        warranty=_section_rows(data.get("warranty")),
    )


def logo_path() -> Path:
    return Path(settings.QUOTATION_LOGO_PATH)


def clear_config_cache() -> None:
    load_company_profile.cache_clear()
    load_proposal_template.cache_clear()
    load_document_sections.cache_clear()
