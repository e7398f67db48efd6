from __future__ import annotations

import logging
from dataclasses import dataclass
from zipfile import BadZipFile

import pandas as pd
from django.db import transaction
from openpyxl.utils.exceptions import InvalidFileException

from ..models import Product
from ..utils import clean_text, parse_product_file, safe_number, validate_columns

logger = logging.getLogger(__name__)


@dataclass
class ProductImportResult:
    created: int
    skipped: int


def import_products(file_bytes: bytes) -> ProductImportResult:
    try:
        data = parse_product_file(file_bytes)
    except (ValueError, BadZipFile, InvalidFileException) as exc:
        raise ValueError("Could not read the Excel file.") from exc
    missing = validate_columns(data)
    if missing:
        missing_cols = ", ".join(sorted(missing))
        raise ValueError(f"Missing required columns in Excel: {missing_cols}")

    products, skipped = _build_products(data)
    with transaction.atomic():
        Product.objects.bulk_create(products)
    logger.info("Imported %d product(s), skipped %d row(s)", len(products), skipped)
    return ProductImportResult(created=len(products), skipped=skipped)


def _build_products(data: pd.DataFrame) -> tuple[list[Product], int]:
    products: list[Product] = []
    skipped = 0
    for _, row in data.iterrows():
        name = clean_text(row.get("name"))
        if not name:
            skipped += 1
            continue
        products.append(
            Product(
                name=name,
                description=clean_text(row.get("description")) or None,
                hsn=clean_text(row.get("hsn")) or None,
                unit=clean_text(row.get("unit")) or None,
                price=round(max(safe_number(row.get("price")), 0.0), 2),
                gst_rate=round(max(safe_number(row.get("gst_rate")), 0.0), 2),
            )
        )
    return products, skipped
