"""Registry consistency: every view documents metrics that exist, and every entry is complete."""

from __future__ import annotations

import pytest

from support_stats.metrics_registry import METRICS, VIEWS, describe_metric, metrics_for_view
from support_stats.policies import POLICIES

REQUIRED_FIELDS = {"name", "category", "definition", "formula", "provenance", "caveats", "used_in"}


class TestMetricsRegistry:
    def test_entries_complete(self):
        for key, entry in METRICS.items():
            assert REQUIRED_FIELDS.issubset(entry), key
            assert isinstance(entry["caveats"], list)

    def test_views_reference_known_metrics(self):
        for view in VIEWS.values():
            for key in view["key_metrics"]:
                assert key in METRICS

    def test_views_match_policies(self):
        assert set(VIEWS).issubset(POLICIES)

    def test_used_in_names_known_views(self):
        for entry in METRICS.values():
            assert set(entry["used_in"]).issubset(VIEWS)

    def test_describe_metric(self):
        assert describe_metric("automation_score")["name"] == "Automation score"
        with pytest.raises(ValueError):
            describe_metric("nope")

    def test_metrics_for_view(self):
        names = [m["name"] for m in metrics_for_view("automation")]
        assert names == ["Total records", "Auto-reply rate"]
        with pytest.raises(ValueError):
            metrics_for_view("nope")

    def test_exported_from_package(self):
        import support_stats

        assert support_stats.describe_metric is describe_metric
        assert support_stats.metrics_for_view is metrics_for_view
        assert support_stats.METRICS is METRICS
