import unittest
from unittest.mock import patch

from support_stats.settings import (
    DEFAULT_ACCEPTABLE_SCORE_GROUPS,
    MetricsSettings,
    maybe_load_dotenv,
    resolve_metrics_settings,
)
from support_stats.taxonomy import ScoreGroup


class TestResolveMetricsSettings(unittest.TestCase):
    def test_defaults_when_nothing_set(self):
        resolved = resolve_metrics_settings(overrides={}, env={})

        self.assertEqual(resolved, MetricsSettings())
        self.assertEqual(resolved.accuracy_weight, 0.7)
        self.assertEqual(resolved.volume_weight, 0.3)
        self.assertEqual(resolved.quality_good_threshold, 61)
        self.assertEqual(resolved.quality_medium_threshold, 31)
        self.assertEqual(resolved.acceptable_score_groups, DEFAULT_ACCEPTABLE_SCORE_GROUPS)
        self.assertTrue(all(source == "default" for source in resolved.sources.values()))

    def test_overrides_win_over_env(self):
        resolved = resolve_metrics_settings(
            overrides={"accuracy_weight": 0.6},
            env={"SUPPORT_STATS_ACCURACY_WEIGHT": "0.5"},
        )

        self.assertEqual(resolved.accuracy_weight, 0.6)
        self.assertEqual(resolved.sources["accuracy_weight"], "overrides")

    def test_env_works_when_overrides_missing(self):
        resolved = resolve_metrics_settings(
            overrides={},
            env={"SUPPORT_STATS_VOLUME_WEIGHT": " 0.4 ", "SUPPORT_STATS_QUALITY_GOOD_THRESHOLD": "70"},
        )

        self.assertEqual(resolved.volume_weight, 0.4)
        self.assertEqual(resolved.quality_good_threshold, 70.0)
        self.assertEqual(resolved.sources["volume_weight"], "env")

    def test_unparseable_values_fall_through(self):
        resolved = resolve_metrics_settings(
            overrides={"accuracy_weight": "lots"},
            env={"SUPPORT_STATS_ACCURACY_WEIGHT": "nan", "SUPPORT_STATS_VOLUME_WEIGHT": "0.25"},
        )

        self.assertEqual(resolved.accuracy_weight, 0.7)
        self.assertEqual(resolved.sources["accuracy_weight"], "default")
        self.assertEqual(resolved.volume_weight, 0.25)

    def test_acceptable_groups_from_env_list(self):
        resolved = resolve_metrics_settings(
            overrides={},
            env={"SUPPORT_STATS_ACCEPTABLE_SCORE_GROUPS": "good"},
        )

        self.assertEqual(resolved.acceptable_score_groups, frozenset({ScoreGroup.GOOD}))
        self.assertEqual(resolved.sources["acceptable_score_groups"], "env")

    def test_acceptable_groups_override_with_enums(self):
        resolved = resolve_metrics_settings(
            overrides={"acceptable_score_groups": [ScoreGroup.GOOD, "needs_work"]},
            env={},
        )

        self.assertEqual(
            resolved.acceptable_score_groups,
            frozenset({ScoreGroup.GOOD, ScoreGroup.NEEDS_WORK}),
        )

    def test_unknown_group_falls_back_to_default(self):
        resolved = resolve_metrics_settings(
            overrides={"acceptable_score_groups": "good,stellar"},
            env={},
        )

        self.assertEqual(resolved.acceptable_score_groups, DEFAULT_ACCEPTABLE_SCORE_GROUPS)
        self.assertEqual(resolved.sources["acceptable_score_groups"], "default")

    def test_process_env_used_when_env_omitted(self):
        with patch("support_stats.settings.maybe_load_dotenv") as load, patch.dict(
            "os.environ", {"SUPPORT_STATS_QUALITY_MEDIUM_THRESHOLD": "25"}
        ):
            resolved = resolve_metrics_settings()

        load.assert_called_once()
        self.assertEqual(resolved.quality_medium_threshold, 25.0)


class TestMaybeLoadDotenv(unittest.TestCase):
    def test_missing_dotenv_package_is_skipped(self):
        with patch.dict("sys.modules", {"dotenv": None}):
            maybe_load_dotenv()

    def test_load_errors_propagate(self):
        with patch("dotenv.load_dotenv", side_effect=OSError("unreadable .env")):
            with self.assertRaises(OSError):
                maybe_load_dotenv()


if __name__ == "__main__":
    unittest.main()
