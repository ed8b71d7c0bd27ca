"""pandas adapters for the record source and the table layer."""

from __future__ import annotations

from typing import Any

import pandas as pd

from support_stats.assembler import AccuracyMetrics, StatsResult
from support_stats.records import ClassificationRecord, record_from_row
from support_stats.taxonomy import ScoreGroup

METRIC_COLS = [
    "total_records",
    "total_verified",
    "classification_accuracy",
    "primary_judgment_accuracy",
    "quality_percent",
    "quality_level",
    "automation_score",
    "auto_reply_count",
    "draft_count",
    "auto_reply_rate",
]
SCORE_GROUP_COLS = [f"{g.value}_count" for g in ScoreGroup]

CATEGORY_COLS = ["category", *METRIC_COLS, *SCORE_GROUP_COLS, "rule_source"]
SUB_CATEGORY_COLS = ["category", "sub_category", *METRIC_COLS, *SCORE_GROUP_COLS]
TYPE_DISTRIBUTION_COLS = ["type", "ai_predicted_count", "verified_accepted_count", "verified_rejected_count"]


def records_from_frame(df: pd.DataFrame) -> list[ClassificationRecord]:
    """Convert dashboard rows to records. NaN/NA cells are treated as missing."""
    if df is None or df.empty:
        return []
    clean = df.astype(object).where(df.notna(), None)
    return [record_from_row(row) for row in clean.to_dict("records")]


def _metric_fields(total_records: int, total_verified: int, m: AccuracyMetrics, score: float) -> dict[str, Any]:
    out: dict[str, Any] = {
        "total_records": total_records,
        "total_verified": total_verified,
        "classification_accuracy": m.classification_accuracy,
        "primary_judgment_accuracy": m.primary_judgment_accuracy,
        "quality_percent": m.quality_percent,
        "quality_level": m.quality_level,
        "automation_score": score,
        "auto_reply_count": m.auto_reply_count,
        "draft_count": m.draft_count,
        "auto_reply_rate": m.auto_reply_rate,
    }
    for group in ScoreGroup:
        out[f"{group.value}_count"] = int(m.score_group_counts.get(group.value, 0))
    return out


def category_breakdown_frame(result: StatsResult) -> pd.DataFrame:
    rows = [
        {
            "category": c.category,
            **_metric_fields(c.total_records, c.total_verified, c.accuracy_metrics, c.automation_score),
            "rule_source": c.rule_source,
        }
        for c in result.category_breakdown
    ]
    return pd.DataFrame(rows, columns=CATEGORY_COLS)


def sub_category_breakdown_frame(result: StatsResult) -> pd.DataFrame:
    """One row per (category, sub-category), in breakdown order."""
    rows = [
        {
            "category": c.category,
            "sub_category": s.sub_category,
            **_metric_fields(s.total_records, s.total_verified, s.accuracy_metrics, s.automation_score),
        }
        for c in result.category_breakdown
        for s in c.sub_category_breakdown
    ]
    return pd.DataFrame(rows, columns=SUB_CATEGORY_COLS)


def type_distribution_frame(result: StatsResult) -> pd.DataFrame:
    rows = [
        {
            "type": d.type,
            "ai_predicted_count": d.ai_predicted_count,
            "verified_accepted_count": d.verified_accepted_count,
            "verified_rejected_count": d.verified_rejected_count,
        }
        for d in result.type_distribution
    ]
    return pd.DataFrame(rows, columns=TYPE_DISTRIBUTION_COLS)
