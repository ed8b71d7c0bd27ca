"""Classification taxonomy for AI-vs-human response comparison.

Two label families live here:

* **Quality classifications** describe how much a human reviewer had to change
  an AI draft. Each one carries a penalty; ``score = 100 + penalty``.
  A ``None`` penalty means the record is out of scope (excluded from scoring).
  Legacy snake_case labels (v3.x) are scored through their v4 equivalent.
* **Action types** are the system actions the AI predicted a ticket needs.
  ``none`` is a no-op sentinel that is counted but never reported.

The taxonomy is static and read-only. Labels that are not part of it are
bucketed as ``ScoreGroup.UNMAPPED`` instead of being dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ScoreGroup(str, Enum):
    GOOD = "good"
    NEEDS_WORK = "needs_work"
    CRITICAL = "critical"
    EXCLUDED = "excluded"
    UNMAPPED = "unmapped"


class QualityClassification(str, Enum):
    # v4.0
    CRITICAL_FACT_ERROR = "CRITICAL_FACT_ERROR"
    MAJOR_FUNCTIONAL_OMISSION = "MAJOR_FUNCTIONAL_OMISSION"
    MINOR_INFO_GAP = "MINOR_INFO_GAP"
    CONFUSING_VERBOSITY = "CONFUSING_VERBOSITY"
    TONAL_MISALIGNMENT = "TONAL_MISALIGNMENT"
    STRUCTURAL_FIX = "STRUCTURAL_FIX"
    STYLISTIC_EDIT = "STYLISTIC_EDIT"
    PERFECT_MATCH = "PERFECT_MATCH"
    EXCL_WORKFLOW_SHIFT = "EXCL_WORKFLOW_SHIFT"
    EXCL_DATA_DISCREPANCY = "EXCL_DATA_DISCREPANCY"
    # legacy (v3.x)
    CRITICAL_ERROR = "critical_error"
    MEANINGFUL_IMPROVEMENT = "meaningful_improvement"
    STYLISTIC_PREFERENCE = "stylistic_preference"
    NO_SIGNIFICANT_CHANGE = "no_significant_change"
    CONTEXT_SHIFT = "context_shift"


class ActionType(str, Enum):
    NONE = "none"
    UPDATE_SUBSCRIPTION_PREFERENCE = "update_subscription_preference"
    UPDATE_SHIPPING_ADDRESS = "update_shipping_address"
    UPDATE_PAYMENT_METHOD = "update_payment_method"
    SKIP_OR_PAUSE_SUBSCRIPTION = "skip_or_pause_subscription"
    CHANGE_FREQUENCY = "change_frequency"
    PROCESS_REFUND = "process_refund"
    UPDATE_RECIPIENT = "update_recipient"
    OTHER_SYSTEM_ACTION = "other_system_action"


NONE_ACTION_TYPE = ActionType.NONE.value


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

PENALTIES: Mapping[QualityClassification, int | None] = MappingProxyType({
    QualityClassification.CRITICAL_FACT_ERROR: -100,
    QualityClassification.MAJOR_FUNCTIONAL_OMISSION: -50,
    QualityClassification.MINOR_INFO_GAP: -20,
    QualityClassification.CONFUSING_VERBOSITY: -15,
    QualityClassification.TONAL_MISALIGNMENT: -10,
    QualityClassification.STRUCTURAL_FIX: -5,
    QualityClassification.STYLISTIC_EDIT: -2,
    QualityClassification.PERFECT_MATCH: 0,
    QualityClassification.EXCL_WORKFLOW_SHIFT: None,
    QualityClassification.EXCL_DATA_DISCREPANCY: None,
})

LEGACY_TO_NEW: Mapping[QualityClassification, QualityClassification] = MappingProxyType({
    QualityClassification.CRITICAL_ERROR: QualityClassification.CRITICAL_FACT_ERROR,
    QualityClassification.MEANINGFUL_IMPROVEMENT: QualityClassification.MINOR_INFO_GAP,
    QualityClassification.STYLISTIC_PREFERENCE: QualityClassification.STYLISTIC_EDIT,
    QualityClassification.NO_SIGNIFICANT_CHANGE: QualityClassification.PERFECT_MATCH,
    QualityClassification.CONTEXT_SHIFT: QualityClassification.EXCL_WORKFLOW_SHIFT,
})


# Group membership is explicit, not derived from score: TONAL_MISALIGNMENT (90)
# and STRUCTURAL_FIX (95) are needs-work even though they score in the 90s.
GROUPS: Mapping[QualityClassification, ScoreGroup] = MappingProxyType({
    QualityClassification.CRITICAL_FACT_ERROR: ScoreGroup.CRITICAL,
    QualityClassification.MAJOR_FUNCTIONAL_OMISSION: ScoreGroup.CRITICAL,
    QualityClassification.MINOR_INFO_GAP: ScoreGroup.NEEDS_WORK,
    QualityClassification.CONFUSING_VERBOSITY: ScoreGroup.NEEDS_WORK,
    QualityClassification.TONAL_MISALIGNMENT: ScoreGroup.NEEDS_WORK,
    QualityClassification.STRUCTURAL_FIX: ScoreGroup.NEEDS_WORK,
    QualityClassification.STYLISTIC_EDIT: ScoreGroup.GOOD,
    QualityClassification.PERFECT_MATCH: ScoreGroup.GOOD,
    QualityClassification.EXCL_WORKFLOW_SHIFT: ScoreGroup.EXCLUDED,
    QualityClassification.EXCL_DATA_DISCREPANCY: ScoreGroup.EXCLUDED,
})


@dataclass(frozen=True)
class TaxonomyEntry:
    score: int | None
    score_group: ScoreGroup


def _build_taxonomy() -> Mapping[QualityClassification, TaxonomyEntry]:
    entries: dict[QualityClassification, TaxonomyEntry] = {}
    for label in QualityClassification:
        scored_as = LEGACY_TO_NEW.get(label, label)
        if scored_as not in PENALTIES or scored_as not in GROUPS:
            continue
        penalty = PENALTIES[scored_as]
        score = None if penalty is None else 100 + penalty
        entries[label] = TaxonomyEntry(score=score, score_group=GROUPS[scored_as])

    missing = set(QualityClassification) - set(entries)
    if missing:
        raise RuntimeError(f"Unmapped quality classifications: {sorted(m.value for m in missing)}")
    return MappingProxyType(entries)


TAXONOMY: Mapping[QualityClassification, TaxonomyEntry] = _build_taxonomy()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def parse_quality_classification(value: Any) -> QualityClassification | None:
    """Return the enum member for a label, or None when it is not in the taxonomy."""
    if isinstance(value, QualityClassification):
        return value
    if not isinstance(value, str):
        return None
    try:
        return QualityClassification(value.strip())
    except ValueError:
        return None


def parse_action_type(value: Any) -> str:
    """Canonical string key for an action label; unknown labels pass through stripped."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip()


def lookup(classification: Any) -> TaxonomyEntry | None:
    member = parse_quality_classification(classification)
    if member is None:
        return None
    return TAXONOMY[member]


def quality_score(classification: Any) -> int | None:
    """Quality score (0-100) for a label, or None if excluded or unknown."""
    entry = lookup(classification)
    return entry.score if entry else None


def score_group_for(classification: Any) -> ScoreGroup:
    entry = lookup(classification)
    if entry is None:
        logger.debug("Unmapped classification label: %r", classification)
        return ScoreGroup.UNMAPPED
    return entry.score_group


def is_excluded_classification(classification: Any) -> bool:
    entry = lookup(classification)
    return entry is None or entry.score_group is ScoreGroup.EXCLUDED


def classifications_in_group(group: ScoreGroup) -> list[QualityClassification]:
    """All labels (v4 and legacy) that fall into ``group``, in declaration order."""
    return [label for label, entry in TAXONOMY.items() if entry.score_group is group]


def quality_level(percentage: float, *, good_threshold: float = 61, medium_threshold: float = 31) -> str:
    """Traffic-light band for a quality percentage."""
    if percentage >= good_threshold:
        return "Good"
    if percentage >= medium_threshold:
        return "Medium"
    return "Poor"
