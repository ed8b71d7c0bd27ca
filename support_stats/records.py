"""Record model and normalization for reviewed support tickets.

Rows come from a loosely-typed store, so nothing here rejects a record.
Missing grouping keys fall back to sentinel groups, unparseable JSON payloads
are treated as absent, and non-record items become empty records.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from support_stats.taxonomy import QualityClassification, parse_action_type, parse_quality_classification

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "Unknown"
NO_SUB_CATEGORY = "N/A"


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Verification:
    """A human reviewer's verdict on one record.

    ``correction`` is ``None`` when the AI's label set was accepted as-is.
    Any other value, including an empty set, is a correction that replaces the
    AI set for accuracy purposes.
    """

    primary_judgment_correct: bool
    correction: frozenset[str] | None = None


@dataclass(frozen=True)
class ClassificationRecord:
    category: str | None = None
    sub_category: str | None = None
    ai_predicted_types: frozenset[str] = field(default_factory=frozenset)
    verification: Verification | None = None
    classification: QualityClassification | str | None = None
    requires_action: bool | None = None
    is_outstanding: bool | None = None
    record_id: str | None = None


class RecordKeys(NamedTuple):
    category_key: str
    sub_category_key: str


def normalize_record(record: ClassificationRecord) -> RecordKeys:
    """Grouping keys for a record. Only ``None`` falls back; ``""`` is its own key."""
    category = record.category if record.category is not None else UNKNOWN_CATEGORY
    sub_category = record.sub_category if record.sub_category is not None else NO_SUB_CATEGORY
    return RecordKeys(category, sub_category)


# ---------------------------------------------------------------------------
# Loose row coercion
# ---------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _first_present(row: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in row and not _is_missing(row[key]):
            return row[key]
    return None


def _as_optional_str(value: Any) -> str | None:
    if _is_missing(value):
        return None
    return str(value)


def _as_optional_bool(value: Any) -> bool | None:
    if _is_missing(value):
        return None
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes"}:
            return True
        if lowered in {"false", "0", "no"}:
            return False
        return None
    return bool(value)


def _maybe_json(value: Any, what: str) -> Any:
    """Decode JSON text payloads; dicts/lists pass through. Bad JSON → None."""
    if not isinstance(value, (str, bytes)):
        return value
    text = value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        logger.warning("Ignoring unparseable %s payload: %.80r", what, text)
        return None


def _as_label_set(value: Any) -> frozenset[str] | None:
    if _is_missing(value):
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        text = value.strip()
        if not text.startswith("["):
            return frozenset({parse_action_type(text)}) if text else frozenset()
        decoded = _maybe_json(text, "label list")
        if not isinstance(decoded, list):
            return None
        value = decoded
    if isinstance(value, Iterable) and not isinstance(value, Mapping):
        return frozenset(parse_action_type(v) for v in value if not _is_missing(v) and str(v).strip())
    return frozenset()


def _parse_verification(raw: Any) -> Verification | None:
    raw = _maybe_json(raw, "verification")
    if isinstance(raw, Verification):
        return raw
    if not isinstance(raw, Mapping):
        return None

    primary = _first_present(raw, ("primary_judgment_correct", "requires_system_action_correct"))
    correction_key = next(
        (k for k in ("correction", "corrected_action_types") if k in raw),
        None,
    )
    correction = _as_label_set(raw[correction_key]) if correction_key else None
    return Verification(
        primary_judgment_correct=bool(_as_optional_bool(primary)),
        correction=correction,
    )


def record_from_row(row: Mapping[str, Any]) -> ClassificationRecord:
    """Build a record from a dashboard row (either snake_case model names or store column names)."""
    analysis = _maybe_json(_first_present(row, ("action_analysis",)), "action_analysis")
    if not isinstance(analysis, Mapping):
        analysis = {}

    predicted = _first_present(row, ("ai_predicted_types",))
    if predicted is None:
        predicted = analysis.get("action_type")
    requires_action = _first_present(row, ("requires_action",))
    if requires_action is None:
        requires_action = analysis.get("requires_system_action")

    classification_raw = _first_present(row, ("classification", "change_classification"))
    classification = parse_quality_classification(classification_raw)

    return ClassificationRecord(
        category=_as_optional_str(_first_present(row, ("category", "request_subtype"))),
        sub_category=_as_optional_str(_first_present(row, ("sub_category", "request_sub_subtype"))),
        ai_predicted_types=_as_label_set(predicted) or frozenset(),
        verification=_parse_verification(_first_present(row, ("verification", "action_analysis_verification"))),
        classification=classification if classification is not None else _as_optional_str(classification_raw),
        requires_action=_as_optional_bool(requires_action),
        is_outstanding=_as_optional_bool(_first_present(row, ("is_outstanding",))),
        record_id=_as_optional_str(_first_present(row, ("record_id", "id", "thread_id"))),
    )


def coerce_record(item: Any) -> ClassificationRecord:
    if isinstance(item, ClassificationRecord):
        return item
    if isinstance(item, Mapping):
        return record_from_row(item)
    return ClassificationRecord()
