"""Derived metrics over populated aggregation nodes.

All percentages are on a 0-100 scale and go through ``rate``, which returns
``0.0`` for an empty denominator.
"""

from __future__ import annotations

from collections.abc import Iterable

from support_stats.aggregation import AggregationNode
from support_stats.settings import DEFAULT_SETTINGS, MetricsSettings
from support_stats.taxonomy import ScoreGroup, quality_level


def rate(numerator: float, denominator: float) -> float:
    if denominator > 0:
        return (numerator / denominator) * 100
    return 0.0


def primary_judgment_reviewed(node: AggregationNode) -> int:
    """Records carrying a verification payload; label-only reviews are not counted."""
    return node.primary_judgment_correct_count + node.primary_judgment_incorrect_count


def classification_accuracy(node: AggregationNode) -> float:
    reviewed = node.classification_accuracy_correct_count + node.classification_accuracy_incorrect_count
    return rate(node.classification_accuracy_correct_count, reviewed)


def primary_judgment_accuracy(node: AggregationNode) -> float:
    return rate(node.primary_judgment_correct_count, primary_judgment_reviewed(node))


def average_accuracy(node: AggregationNode) -> float:
    return (classification_accuracy(node) + primary_judgment_accuracy(node)) / 2


def evaluable_total(node: AggregationNode) -> int:
    """Verified records minus excluded-group records (never below zero)."""
    return max(0, node.total_verified - node.score_group_count(ScoreGroup.EXCLUDED))


def quality_percent(node: AggregationNode, settings: MetricsSettings = DEFAULT_SETTINGS) -> float:
    acceptable = sum(
        node.score_group_count(group)
        for group in settings.acceptable_score_groups
        if group is not ScoreGroup.EXCLUDED
    )
    return rate(acceptable, evaluable_total(node))


def quality_band(node: AggregationNode, settings: MetricsSettings = DEFAULT_SETTINGS) -> str:
    return quality_level(
        quality_percent(node, settings),
        good_threshold=settings.quality_good_threshold,
        medium_threshold=settings.quality_medium_threshold,
    )


def auto_reply_rate(node: AggregationNode) -> float:
    return rate(node.auto_reply_count, node.total_records)


def max_volume(nodes: Iterable[AggregationNode]) -> int:
    """Largest ``total_records`` among ``nodes``, floored at 1."""
    return max([1, *(n.total_records for n in nodes)])


def automation_score(
    node: AggregationNode,
    max_volume_across: int,
    settings: MetricsSettings = DEFAULT_SETTINGS,
) -> float:
    """Blend of mean accuracy and normalized volume.

    Nodes with no verification-backed records are ranked on volume alone so
    that large unreviewed categories are not pushed to the bottom.
    """
    volume_pct = (node.total_records / max(1, max_volume_across)) * 100
    if primary_judgment_reviewed(node) == 0:
        return volume_pct
    return average_accuracy(node) * settings.accuracy_weight + volume_pct * settings.volume_weight
