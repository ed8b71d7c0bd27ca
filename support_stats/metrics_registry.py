"""Metric + view documentation registry.

Static definitions for every number ``support_stats`` produces, so tooltips
and glossary pages in the dashboard can be edited without touching the fold.

Notes on provenance language
----------------------------
* "Counted" = a per-record increment made during the fold.
* "Derived" = computed from counters after the fold (``support_stats.metrics``).
* "Configured" = depends on a value from ``MetricsSettings``.
"""

from __future__ import annotations

from typing import Any


# ---------------------------------------------------------------------------
# Metric documentation
# ---------------------------------------------------------------------------

METRICS: dict[str, dict[str, Any]] = {
    # -------------------------
    # Volume
    # -------------------------
    "total_records": {
        "name": "Total records",
        "category": "Volume",
        "definition": "Records folded into this node (global, category or sub-category).",
        "formula": "`total_records = count(records in group)`",
        "provenance": "Counted. Missing category → 'Unknown', missing sub-category → 'N/A'.",
        "caveats": [
            "An empty-string category is its own group, separate from 'Unknown'.",
            "Under the action-analysis view unverified records are skipped entirely.",
        ],
        "used_in": ["quality", "action_analysis", "automation"],
    },
    "total_verified": {
        "name": "Verified records",
        "category": "Volume",
        "definition": "Records a human reviewer has verified.",
        "formula": "`total_verified = count(records where policy.is_verified(record))`",
        "provenance": "Counted. By default a record is verified when it carries a verification payload.",
        "caveats": [
            "The quality view also treats a known quality classification as reviewed.",
        ],
        "used_in": ["quality", "action_analysis"],
    },
    # -------------------------
    # Accuracy
    # -------------------------
    "primary_judgment_accuracy": {
        "name": "Requires-action accuracy",
        "category": "Accuracy",
        "definition": "Share of verified records where the AI's top-level judgment was confirmed.",
        "formula": "`rate(primary_judgment_correct_count, primary_judgment_correct_count + primary_judgment_incorrect_count)`",
        "provenance": "Derived from `Verification.primary_judgment_correct`.",
        "caveats": [
            "Denominator is records with a verification payload; label-only reviews do not count. 0 when there are none (not N/A).",
        ],
        "used_in": ["action_analysis"],
    },
    "classification_accuracy": {
        "name": "Action-type accuracy",
        "category": "Accuracy",
        "definition": "Share of verified records whose predicted label set was accepted without correction.",
        "formula": "`rate(classification_accuracy_correct_count, classification_accuracy_correct_count + classification_accuracy_incorrect_count)`",
        "provenance": "Derived. A null correction is correct; any correction, even an empty one, is incorrect.",
        "caveats": [
            "A correction identical to the AI set still counts as incorrect.",
        ],
        "used_in": ["action_analysis"],
    },
    "automation_score": {
        "name": "Automation score",
        "category": "Accuracy",
        "definition": "Ranking that blends mean accuracy with the group's share of the largest group's volume.",
        "formula": "`avg_accuracy * accuracy_weight + total_records / max_volume * 100 * volume_weight`",
        "provenance": "Derived + Configured (weights default to 0.7 / 0.3).",
        "caveats": [
            "Groups with no verification-backed records fall back to the volume term alone (unweighted).",
            "Sub-categories are normalized against their largest sibling, not the largest category.",
        ],
        "used_in": ["action_analysis"],
    },
    # -------------------------
    # Quality
    # -------------------------
    "quality_percent": {
        "name": "Quality %",
        "category": "Quality",
        "definition": "Share of evaluable reviewed records whose classification falls in an acceptable score group.",
        "formula": "`rate(sum(acceptable groups), total_verified - excluded_count)`",
        "provenance": "Derived + Configured (acceptable groups default to good + needs_work).",
        "caveats": [
            "Excluded-group records leave both numerator and denominator.",
            "Unmapped labels stay in the denominator, so bad source data lowers the score visibly.",
        ],
        "used_in": ["quality"],
    },
    "quality_level": {
        "name": "Quality level",
        "category": "Quality",
        "definition": "Traffic-light band for Quality %.",
        "formula": "`Good if q >= 61 else Medium if q >= 31 else Poor`",
        "provenance": "Derived + Configured (thresholds).",
        "caveats": [],
        "used_in": ["quality"],
    },
    "score_group_counts": {
        "name": "Score group counts",
        "category": "Quality",
        "definition": "Records per score group: good, needs_work, critical, excluded, unmapped.",
        "formula": "`count(records where score_group_for(classification) == group)`",
        "provenance": "Counted via the classification taxonomy.",
        "caveats": [
            "'unmapped' collects labels that are not in the taxonomy.",
        ],
        "used_in": ["quality"],
    },
    # -------------------------
    # Automation
    # -------------------------
    "auto_reply_rate": {
        "name": "Auto-reply rate",
        "category": "Automation",
        "definition": "Share of records sent as an automatic reply rather than a draft.",
        "formula": "`rate(auto_reply_count, total_records)`",
        "provenance": "Counted via automation rules; default rule is the AI's requires-action flag.",
        "caveats": [
            "Retention sub-categories use `is_outstanding` instead of requires-action.",
        ],
        "used_in": ["automation"],
    },
    # -------------------------
    # Type distribution
    # -------------------------
    "ai_predicted_count": {
        "name": "AI predicted",
        "category": "Type distribution",
        "definition": "Records where the AI assigned this action type.",
        "formula": "`count(records where type in ai_predicted_types)`",
        "provenance": "Counted.",
        "caveats": [
            "The 'none' sentinel is counted but never shown.",
        ],
        "used_in": ["action_analysis"],
    },
    "verified_accepted_count": {
        "name": "Verified accepted",
        "category": "Type distribution",
        "definition": "Verified records where this type was confirmed, or added by the reviewer.",
        "formula": "`correction is None or type in correction` (+ reviewer-added types)",
        "provenance": "Counted.",
        "caveats": [
            "Reviewer-added types count here with ai_predicted_count left unchanged.",
        ],
        "used_in": ["action_analysis"],
    },
    "verified_rejected_count": {
        "name": "Verified rejected",
        "category": "Type distribution",
        "definition": "Verified records where the reviewer removed this AI-predicted type.",
        "formula": "`correction is not None and type not in correction`",
        "provenance": "Counted.",
        "caveats": [],
        "used_in": ["action_analysis"],
    },
}


# ---------------------------------------------------------------------------
# View documentation
# ---------------------------------------------------------------------------

VIEWS: dict[str, dict[str, Any]] = {
    "quality": {
        "title": "Response quality",
        "what": [
            "How much reviewers had to change AI drafts, bucketed by score group per category.",
        ],
        "key_metrics": ["total_records", "total_verified", "quality_percent", "quality_level", "score_group_counts"],
    },
    "action_analysis": {
        "title": "Action analysis",
        "what": [
            "Accuracy of the AI's requires-action judgment and predicted action types on verified tickets.",
        ],
        "key_metrics": [
            "total_verified",
            "primary_judgment_accuracy",
            "classification_accuracy",
            "automation_score",
            "ai_predicted_count",
            "verified_accepted_count",
            "verified_rejected_count",
        ],
    },
    "automation": {
        "title": "Automation overview",
        "what": [
            "Auto-reply vs draft split per category under the automation rules.",
        ],
        "key_metrics": ["total_records", "auto_reply_rate"],
    },
}


def describe_metric(key: str) -> dict[str, Any]:
    if key not in METRICS:
        raise ValueError(f"Unknown metric: {key}")
    return METRICS[key]


def metrics_for_view(view: str) -> list[dict[str, Any]]:
    if view not in VIEWS:
        raise ValueError(f"Unknown view: {view}")
    return [describe_metric(k) for k in VIEWS[view]["key_metrics"]]
