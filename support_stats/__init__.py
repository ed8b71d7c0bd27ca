"""Support response classification statistics.

Fold reviewed records with ``compute_stats``; ``describe_metric`` and
``metrics_for_view`` document every number the result carries.
"""

from support_stats.exceptions import StatsError, InvalidInputError
from support_stats.taxonomy import (
    ScoreGroup,
    QualityClassification,
    ActionType,
    TAXONOMY,
    quality_score,
    score_group_for,
    quality_level,
)
from support_stats.records import (
    ClassificationRecord,
    Verification,
    normalize_record,
    record_from_row,
    coerce_record,
)
from support_stats.policies import (
    AggregationPolicy,
    DEFAULT_POLICY,
    QUALITY_POLICY,
    ACTION_ANALYSIS_POLICY,
    AUTOMATION_POLICY,
    get_policy,
    resolve_automation_status,
)
from support_stats.aggregation import aggregate
from support_stats.metrics import rate, automation_score
from support_stats.assembler import StatsResult, assemble, compute_stats
from support_stats.settings import MetricsSettings, resolve_metrics_settings, maybe_load_dotenv
from support_stats.metrics_registry import METRICS, describe_metric, metrics_for_view

__all__ = [
    # Errors
    "StatsError",
    "InvalidInputError",
    # Taxonomy
    "ScoreGroup",
    "QualityClassification",
    "ActionType",
    "TAXONOMY",
    "quality_score",
    "score_group_for",
    "quality_level",
    # Records
    "ClassificationRecord",
    "Verification",
    "normalize_record",
    "record_from_row",
    "coerce_record",
    # Policies
    "AggregationPolicy",
    "DEFAULT_POLICY",
    "QUALITY_POLICY",
    "ACTION_ANALYSIS_POLICY",
    "AUTOMATION_POLICY",
    "get_policy",
    "resolve_automation_status",
    # Fold + assembly
    "aggregate",
    "rate",
    "automation_score",
    "StatsResult",
    "assemble",
    "compute_stats",
    # Settings
    "MetricsSettings",
    "resolve_metrics_settings",
    "maybe_load_dotenv",
    # Metric documentation
    "METRICS",
    "describe_metric",
    "metrics_for_view",
]
