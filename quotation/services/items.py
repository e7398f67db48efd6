from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping

from ..exceptions import MalformedItemsError, MissingItemNameError, MissingItemsError
from .tax import calculate_item

logger = logging.getLogger(__name__)

PROPOSAL_STRUCTURE_FIELDS = ("sr_no", "description", "unit", "specification")
PROPOSAL_EDITABLE_FIELDS = ("qty", "make")


def _has_name(item: Mapping[str, Any]) -> bool:
    return bool(str(item.get("name") or "").strip())


def parse_items(items_json: str | None) -> list[dict[str, Any]]:
    try:
        parsed = json.loads(items_json or "[]")
    except (TypeError, ValueError) as exc:
        raise MalformedItemsError() from exc

    items = [calculate_item(_as_mapping(item)) for item in parsed] if isinstance(parsed, list) else []
    if not items:
        raise MissingItemsError()

    # Both checks run on the unfiltered list so that a submission made only of
    # blank-named rows is rejected rather than saved empty.
    if not any(_has_name(item) for item in items):
        raise MissingItemNameError()

    kept = [item for item in items if _has_name(item)]
    for item in kept:
        item["name"] = str(item["name"]).strip()
    if len(kept) != len(items):
        logger.info("Dropped %d item(s) without a name", len(items) - len(kept))
    return kept


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _load_submitted_rows(submitted: Any) -> list[Any]:
    if isinstance(submitted, (list, tuple)):
        return list(submitted)
    if not isinstance(submitted, (str, bytes, bytearray)):
        return []
    try:
        parsed = json.loads(submitted or "[]")
    except ValueError:
        logger.info("Ignoring malformed proposal item overrides")
        return []
    return parsed if isinstance(parsed, list) else []


def _sr_key(value: Any) -> str | None:
    if value is None:
        return None
    key = str(value).strip()
    return key or None


def parse_proposal_items(
    template_rows: Iterable[Mapping[str, Any]], submitted: Any
) -> list[dict[str, Any]]:
    """
    Merge the proposal template with user overrides of ``qty`` and ``make``.

    Structural fields always come from the template. A submitted row that
    carries ``sr_no`` overrides the template row with the same ``sr_no``;
    rows without one fall back to binding by position. Malformed input is
    treated as no overrides at all.
    """
    template = [_as_mapping(row) for row in template_rows]
    if not template:
        return []

    rows = [_as_mapping(row) for row in _load_submitted_rows(submitted)]
    keyed: dict[str, Mapping[str, Any]] = {}
    for row in rows:
        key = _sr_key(row.get("sr_no"))
        if key is not None and key not in keyed:
            keyed[key] = row

    merged: list[dict[str, Any]] = []
    for index, template_row in enumerate(template):
        override = keyed.get(_sr_key(template_row.get("sr_no")) or "")
        if override is None and index < len(rows) and _sr_key(rows[index].get("sr_no")) is None:
            override = rows[index]
        override = override or {}

        merged_row = {field: template_row.get(field) for field in PROPOSAL_STRUCTURE_FIELDS}
        for field in PROPOSAL_EDITABLE_FIELDS:
            merged_row[field] = override[field] if field in override else template_row.get(field)
        merged.append(merged_row)
    return merged
