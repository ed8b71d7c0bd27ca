"""Shape folded accumulators into the sorted statistics tree consumed by the dashboard."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Any

from support_stats.aggregation import AggregationNode, AggregationState, aggregate
from support_stats.metrics import (
    auto_reply_rate,
    automation_score,
    classification_accuracy,
    max_volume,
    primary_judgment_accuracy,
    quality_band,
    quality_percent,
)
from support_stats.policies import DEFAULT_POLICY, AggregationPolicy
from support_stats.settings import DEFAULT_SETTINGS, MetricsSettings
from support_stats.taxonomy import ScoreGroup


# ---------------------------------------------------------------------------
# Output tree
# ---------------------------------------------------------------------------

@dataclass
class AccuracyMetrics:
    classification_accuracy: float = 0.0
    primary_judgment_accuracy: float = 0.0
    quality_percent: float = 0.0
    quality_level: str = "Poor"
    primary_judgment_correct_count: int = 0
    primary_judgment_incorrect_count: int = 0
    classification_accuracy_correct_count: int = 0
    classification_accuracy_incorrect_count: int = 0
    score_group_counts: dict[str, int] = field(default_factory=dict)
    auto_reply_count: int = 0
    draft_count: int = 0
    auto_reply_rate: float = 0.0


@dataclass
class SubCategoryStats:
    sub_category: str
    total_records: int
    total_verified: int
    accuracy_metrics: AccuracyMetrics
    automation_score: float


@dataclass
class CategoryStats:
    category: str
    total_records: int
    total_verified: int
    accuracy_metrics: AccuracyMetrics
    automation_score: float
    sub_category_breakdown: list[SubCategoryStats] = field(default_factory=list)
    rule_source: str | None = None


@dataclass
class TypeDistributionStats:
    type: str
    ai_predicted_count: int
    verified_accepted_count: int
    verified_rejected_count: int


@dataclass
class TotalsStats:
    total_records: int = 0
    total_verified: int = 0
    accuracy_metrics: AccuracyMetrics = field(default_factory=AccuracyMetrics)


@dataclass
class StatsResult:
    policy: str
    totals: TotalsStats
    category_breakdown: list[CategoryStats] = field(default_factory=list)
    type_distribution: list[TypeDistributionStats] = field(default_factory=list)
    skipped_records: int = 0

    def category(self, name: str) -> CategoryStats | None:
        return next((c for c in self.category_breakdown if c.category == name), None)

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-serializable copy of the tree."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def _accuracy_metrics(node: AggregationNode, settings: MetricsSettings) -> AccuracyMetrics:
    return AccuracyMetrics(
        classification_accuracy=classification_accuracy(node),
        primary_judgment_accuracy=primary_judgment_accuracy(node),
        quality_percent=quality_percent(node, settings),
        quality_level=quality_band(node, settings),
        primary_judgment_correct_count=node.primary_judgment_correct_count,
        primary_judgment_incorrect_count=node.primary_judgment_incorrect_count,
        classification_accuracy_correct_count=node.classification_accuracy_correct_count,
        classification_accuracy_incorrect_count=node.classification_accuracy_incorrect_count,
        score_group_counts={group.value: node.score_group_count(group) for group in ScoreGroup},
        auto_reply_count=node.auto_reply_count,
        draft_count=node.draft_count,
        auto_reply_rate=auto_reply_rate(node),
    )


def _by_volume(items: dict[str, AggregationNode]) -> list[tuple[str, AggregationNode]]:
    return sorted(items.items(), key=lambda kv: (-kv[1].total_records, kv[0]))


def assemble(
    state: AggregationState,
    settings: MetricsSettings = DEFAULT_SETTINGS,
    policy: AggregationPolicy = DEFAULT_POLICY,
) -> StatsResult:
    """Build a ``StatsResult`` from a completed fold.

    Categories and sub-categories are ordered by ``total_records`` descending,
    then key ascending. Category automation scores are normalized against the
    largest category; sub-category scores against the largest sibling.
    The type distribution drops the policy's sentinel types.
    """
    category_max = max_volume(state.categories.values())

    breakdown: list[CategoryStats] = []
    for category_key, node in _by_volume(state.categories):
        sibling_max = max_volume(node.children.values())
        subs = [
            SubCategoryStats(
                sub_category=sub_key,
                total_records=sub.total_records,
                total_verified=sub.total_verified,
                accuracy_metrics=_accuracy_metrics(sub, settings),
                automation_score=automation_score(sub, sibling_max, settings),
            )
            for sub_key, sub in _by_volume(node.children)
        ]
        breakdown.append(
            CategoryStats(
                category=category_key,
                total_records=node.total_records,
                total_verified=node.total_verified,
                accuracy_metrics=_accuracy_metrics(node, settings),
                automation_score=automation_score(node, category_max, settings),
                sub_category_breakdown=subs,
                rule_source=policy.rule_source(category_key),
            )
        )

    distribution = [
        TypeDistributionStats(
            type=entry.type,
            ai_predicted_count=entry.ai_predicted_count,
            verified_accepted_count=entry.verified_accepted_count,
            verified_rejected_count=entry.verified_rejected_count,
        )
        for entry in state.type_distribution.values()
        if entry.type not in policy.excluded_types
    ]
    distribution.sort(key=lambda d: (-d.ai_predicted_count, d.type))

    totals = state.totals
    return StatsResult(
        policy=policy.name,
        totals=TotalsStats(
            total_records=totals.total_records,
            total_verified=totals.total_verified,
            accuracy_metrics=_accuracy_metrics(totals, settings),
        ),
        category_breakdown=breakdown,
        type_distribution=distribution,
        skipped_records=state.skipped_records,
    )


def compute_stats(
    records: Iterable[Any],
    policy: AggregationPolicy = DEFAULT_POLICY,
    settings: MetricsSettings | None = None,
) -> StatsResult:
    """Fold ``records`` with ``policy`` and assemble the statistics tree."""
    state = aggregate(records, policy)
    return assemble(state, settings or DEFAULT_SETTINGS, policy)
