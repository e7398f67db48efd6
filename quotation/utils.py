from __future__ import annotations

import re
from datetime import date, datetime
from io import BytesIO

import pandas as pd

REQUIRED_COLUMNS = {"name"}

COLUMN_ALIASES = {
    "name": {"name", "product", "product name", "item", "item name", "particulars"},
    "description": {"description", "desc", "details", "specification"},
    "hsn": {"hsn", "hsn code", "hsn/sac", "hsn sac", "sac"},
    "unit": {"unit", "uom", "units"},
    "price": {"price", "rate", "unit price", "unit_price", "mrp", "price (inr)"},
    "gst_rate": {"gst_rate", "gst", "gst %", "gst rate", "gst (%)", "tax rate"},
}


def _normalize_name(name: str) -> str:
    cleaned = name.strip().lower().replace("/", " ").replace("%", " ")
    cleaned = re.sub(r"[\(\)]", " ", cleaned)
    cleaned = re.sub(r"[^a-z0-9]+", "_", cleaned)
    return cleaned.strip("_")


def _build_alias_map() -> dict[str, str]:
    alias_map: dict[str, str] = {}
    for canonical, aliases in COLUMN_ALIASES.items():
        alias_map[_normalize_name(canonical)] = canonical
        for alias in aliases:
            alias_map[_normalize_name(alias)] = canonical
    return alias_map


ALIAS_MAP = _build_alias_map()


def normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    frame = frame.copy()
    frame.columns = [ALIAS_MAP.get(_normalize_name(str(col)), _normalize_name(str(col))) for col in frame.columns]
    return frame


def validate_columns(frame: pd.DataFrame) -> list[str]:
    return [col for col in REQUIRED_COLUMNS if col not in frame.columns]


def parse_product_file(file_bytes: bytes) -> pd.DataFrame:
    data = pd.read_excel(BytesIO(file_bytes), engine="openpyxl")
    return normalize_columns(data)


def safe_number(value: object) -> float:
    try:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return 0.0
        if isinstance(value, str) and value.strip() in {"", "-"}:
            return 0.0
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def clean_text(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def format_money(value: object) -> str:
    return f"{safe_number(value):.2f}"


def format_quantity(value: object) -> str:
    number = safe_number(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def format_date(value: object) -> str:
    if not value:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        return ""


_ONES = (
    "Zero", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten",
    "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen", "Seventeen",
    "Eighteen", "Nineteen",
)
_TENS = ("", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety")


def _two_digits(number: int) -> str:
    if number < 20:
        return _ONES[number]
    tens, ones = divmod(number, 10)
    return _TENS[tens] if ones == 0 else f"{_TENS[tens]} {_ONES[ones]}"


def _convert_hundreds(number: int) -> str:
    words: list[str] = []
    hundreds, remainder = divmod(number, 100)
    if hundreds:
        words.append(f"{_ONES[hundreds]} Hundred")
    if remainder:
        words.append(_two_digits(remainder))
    return " ".join(words)


def number_to_words(value: object) -> str:
    """Whole number in Indian grouping: 1,25,000 -> One Lakh Twenty Five Thousand."""
    amount = int(safe_number(value))
    if amount == 0:
        return "Zero"

    parts: list[str] = []
    crores, amount = divmod(amount, 10_000_000)
    lakhs, amount = divmod(amount, 100_000)
    thousands, amount = divmod(amount, 1_000)

    if crores:
        parts.append(f"{number_to_words(crores)} Crore")
    if lakhs:
        parts.append(f"{_two_digits(lakhs)} Lakh")
    if thousands:
        parts.append(f"{_two_digits(thousands)} Thousand")
    if amount:
        parts.append(_convert_hundreds(amount))
    return " ".join(parts)


def amount_in_words(value: object) -> str:
    paise_total = int(round(safe_number(value) * 100))
    rupees, paise = divmod(abs(paise_total), 100)
    words = f"Rupees {number_to_words(rupees)}"
    if paise:
        words += f" and {_two_digits(paise)} Paise"
    return f"{words} Only"
