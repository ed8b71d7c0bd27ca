"""Single-pass fold of classification records into category/sub-category accumulators."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from support_stats.exceptions import InvalidInputError
from support_stats.policies import DEFAULT_POLICY, AggregationPolicy
from support_stats.records import coerce_record, normalize_record
from support_stats.taxonomy import ScoreGroup, parse_action_type, score_group_for

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Accumulators
# ---------------------------------------------------------------------------

@dataclass
class AggregationNode:
    """Counters for one grouping level (global, category or sub-category).

    ``total_verified <= total_records`` always holds. ``children`` is only
    populated on category nodes.
    """

    total_records: int = 0
    total_verified: int = 0
    score_group_counts: dict[ScoreGroup, int] = field(default_factory=dict)
    primary_judgment_correct_count: int = 0
    primary_judgment_incorrect_count: int = 0
    classification_accuracy_correct_count: int = 0
    classification_accuracy_incorrect_count: int = 0
    auto_reply_count: int = 0
    draft_count: int = 0
    children: dict[str, AggregationNode] = field(default_factory=dict)

    def child(self, key: str) -> AggregationNode:
        node = self.children.get(key)
        if node is None:
            node = AggregationNode()
            self.children[key] = node
        return node

    def score_group_count(self, group: ScoreGroup) -> int:
        return self.score_group_counts.get(group, 0)


@dataclass
class TypeDistributionEntry:
    type: str
    ai_predicted_count: int = 0
    verified_accepted_count: int = 0
    verified_rejected_count: int = 0


@dataclass
class AggregationState:
    totals: AggregationNode = field(default_factory=AggregationNode)
    categories: dict[str, AggregationNode] = field(default_factory=dict)
    type_distribution: dict[str, TypeDistributionEntry] = field(default_factory=dict)
    skipped_records: int = 0

    def category(self, key: str) -> AggregationNode:
        node = self.categories.get(key)
        if node is None:
            node = AggregationNode()
            self.categories[key] = node
        return node

    def type_entry(self, type_key: str) -> TypeDistributionEntry:
        entry = self.type_distribution.get(type_key)
        if entry is None:
            entry = TypeDistributionEntry(type=type_key)
            self.type_distribution[type_key] = entry
        return entry


# ---------------------------------------------------------------------------
# Fold
# ---------------------------------------------------------------------------

def _ensure_iterable(records: Any) -> Iterable[Any]:
    if records is None or isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise InvalidInputError(
            f"Expected an iterable of classification records, got {type(records).__name__}"
        )
    return records


def aggregate(records: Iterable[Any], policy: AggregationPolicy = DEFAULT_POLICY) -> AggregationState:
    """Fold ``records`` into global, per-category and per-sub-category counters.

    Every count is a sum of per-record increments, so the result does not
    depend on record order. Items that are not ``ClassificationRecord``
    instances are coerced (mappings parsed as rows, anything else treated as
    an empty record).

    Raises
    ------
    InvalidInputError
        If ``records`` is not an iterable collection.
    """
    state = AggregationState()
    totals = state.totals

    for item in _ensure_iterable(records):
        record = coerce_record(item)
        if not policy.include(record):
            state.skipped_records += 1
            continue

        keys = normalize_record(record)
        category = state.category(keys.category_key)
        sub_category = category.child(keys.sub_category_key)
        levels = (totals, category, sub_category)

        for node in levels:
            node.total_records += 1

        predicted = {parse_action_type(t) for t in record.ai_predicted_types}
        for type_key in predicted:
            state.type_entry(type_key).ai_predicted_count += 1

        reviewed = policy.is_verified(record)
        if reviewed:
            for node in levels:
                node.total_verified += 1

            verification = record.verification
            if verification is not None:
                primary_ok = bool(verification.primary_judgment_correct)
                correction = (
                    None
                    if verification.correction is None
                    else {parse_action_type(t) for t in verification.correction}
                )
                types_ok = correction is None

                for node in levels:
                    if primary_ok:
                        node.primary_judgment_correct_count += 1
                    else:
                        node.primary_judgment_incorrect_count += 1
                    if types_ok:
                        node.classification_accuracy_correct_count += 1
                    else:
                        node.classification_accuracy_incorrect_count += 1

                for type_key in predicted:
                    entry = state.type_entry(type_key)
                    if correction is None or type_key in correction:
                        entry.verified_accepted_count += 1
                    else:
                        entry.verified_rejected_count += 1

                # labels the reviewer added that the AI never predicted
                for type_key in (correction or set()) - predicted:
                    state.type_entry(type_key).verified_accepted_count += 1

        # score groups cover the same records as total_verified, so the
        # quality numerator never exceeds its denominator
        if policy.score_classifications and reviewed and record.classification is not None:
            group = score_group_for(record.classification)
            for node in levels:
                node.score_group_counts[group] = node.score_group_counts.get(group, 0) + 1

        status = policy.automation_status(record)
        if status is not None:
            for node in levels:
                if status == "draft":
                    node.draft_count += 1
                else:
                    node.auto_reply_count += 1

    logger.debug(
        "Aggregated %d records (%d verified, %d skipped) into %d categories with policy %s",
        totals.total_records,
        totals.total_verified,
        state.skipped_records,
        len(state.categories),
        policy.name,
    )
    return state
