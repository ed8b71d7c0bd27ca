"""Tests for support_stats.taxonomy.

Verifies:
- The taxonomy is total over QualityClassification
- Scores follow 100 + penalty, legacy labels score as their v4 equivalent
- Score group membership follows the explicit dashboard buckets
- Unknown labels land in the 'unmapped' bucket instead of raising
"""

from __future__ import annotations

import pytest

from support_stats.taxonomy import (
    LEGACY_TO_NEW,
    TAXONOMY,
    ActionType,
    QualityClassification,
    ScoreGroup,
    classifications_in_group,
    is_excluded_classification,
    parse_action_type,
    quality_level,
    quality_score,
    score_group_for,
)


class TestTaxonomyTotality:
    def test_every_classification_is_mapped(self):
        assert set(TAXONOMY) == set(QualityClassification)

    def test_every_entry_has_a_scored_group(self):
        for entry in TAXONOMY.values():
            assert entry.score_group is not ScoreGroup.UNMAPPED

    def test_taxonomy_is_read_only(self):
        with pytest.raises(TypeError):
            TAXONOMY[QualityClassification.PERFECT_MATCH] = None  # type: ignore[index]


class TestScores:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("CRITICAL_FACT_ERROR", 0),
            ("MAJOR_FUNCTIONAL_OMISSION", 50),
            ("MINOR_INFO_GAP", 80),
            ("STYLISTIC_EDIT", 98),
            ("PERFECT_MATCH", 100),
            ("EXCL_WORKFLOW_SHIFT", None),
        ],
    )
    def test_new_labels(self, label, expected):
        assert quality_score(label) == expected

    def test_legacy_labels_score_like_their_replacement(self):
        for legacy, new in LEGACY_TO_NEW.items():
            assert quality_score(legacy) == quality_score(new)
            assert score_group_for(legacy) is score_group_for(new)

    def test_unknown_label_has_no_score(self):
        assert quality_score("TOTALLY_NEW_LABEL") is None
        assert quality_score(None) is None


class TestScoreGroups:
    def test_high_scoring_fixes_are_still_needs_work(self):
        assert quality_score("STRUCTURAL_FIX") == 95
        assert score_group_for("STRUCTURAL_FIX") is ScoreGroup.NEEDS_WORK
        assert quality_score("TONAL_MISALIGNMENT") == 90
        assert score_group_for("TONAL_MISALIGNMENT") is ScoreGroup.NEEDS_WORK

    def test_groups_match_dashboard_buckets(self):
        assert set(classifications_in_group(ScoreGroup.CRITICAL)) == {
            QualityClassification.CRITICAL_FACT_ERROR,
            QualityClassification.MAJOR_FUNCTIONAL_OMISSION,
            QualityClassification.CRITICAL_ERROR,
        }
        assert set(classifications_in_group(ScoreGroup.EXCLUDED)) == {
            QualityClassification.EXCL_WORKFLOW_SHIFT,
            QualityClassification.EXCL_DATA_DISCREPANCY,
            QualityClassification.CONTEXT_SHIFT,
        }
        assert QualityClassification.STRUCTURAL_FIX in classifications_in_group(ScoreGroup.NEEDS_WORK)
        assert QualityClassification.NO_SIGNIFICANT_CHANGE in classifications_in_group(ScoreGroup.GOOD)

    def test_unknown_is_unmapped(self):
        assert score_group_for("made_up") is ScoreGroup.UNMAPPED
        assert score_group_for(42) is ScoreGroup.UNMAPPED

    def test_is_excluded(self):
        assert is_excluded_classification("context_shift")
        assert is_excluded_classification(None)
        assert not is_excluded_classification("PERFECT_MATCH")


class TestHelpers:
    def test_parse_action_type(self):
        assert parse_action_type(ActionType.PROCESS_REFUND) == "process_refund"
        assert parse_action_type("  change_frequency ") == "change_frequency"
        assert parse_action_type("brand_new_action") == "brand_new_action"

    def test_quality_level_bands(self):
        assert quality_level(61) == "Good"
        assert quality_level(60.9) == "Medium"
        assert quality_level(31) == "Medium"
        assert quality_level(30) == "Poor"
        assert quality_level(50, good_threshold=50) == "Good"
