"""Aggregation policies and automation rules.

The dashboard has three views over the same records: quality scoring over
every record, action-analysis accuracy over verified records only, and the
auto-reply vs draft automation overview. Each is one ``AggregationPolicy``
passed into the single fold in ``support_stats.aggregation``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from support_stats.records import ClassificationRecord
from support_stats.taxonomy import NONE_ACTION_TYPE, parse_quality_classification

AutomationStatus = Literal["auto_reply", "draft"]

DEFAULT_RULE_SOURCE = "requires_system_action"


# ---------------------------------------------------------------------------
# Automation rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AutomationRule:
    """Decides auto-reply vs draft for the sub-categories it covers.

    Rules are checked top-down and the first match wins.
    """

    categories: frozenset[str]
    is_draft: Callable[[ClassificationRecord], bool]
    rule_source: str


AUTOMATION_RULES: tuple[AutomationRule, ...] = (
    AutomationRule(
        categories=frozenset({"retention_primary_request", "retention_repeated_request"}),
        is_draft=lambda r: r.is_outstanding is True,
        rule_source="is_outstanding",
    ),
)


def resolve_automation_status(
    record: ClassificationRecord,
    rules: tuple[AutomationRule, ...] = AUTOMATION_RULES,
) -> tuple[AutomationStatus, str]:
    """Return ``(status, rule_source)``; falls back to the AI's requires-action flag."""
    if record.category:
        for rule in rules:
            if record.category in rule.categories:
                return ("draft" if rule.is_draft(record) else "auto_reply"), rule.rule_source

    status: AutomationStatus = "draft" if record.requires_action is True else "auto_reply"
    return status, DEFAULT_RULE_SOURCE


def rule_source_for_category(
    category: str | None,
    rules: tuple[AutomationRule, ...] = AUTOMATION_RULES,
) -> str:
    if not category:
        return DEFAULT_RULE_SOURCE
    for rule in rules:
        if category in rule.categories:
            return rule.rule_source
    return DEFAULT_RULE_SOURCE


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

def _always(record: ClassificationRecord) -> bool:
    return True


def _has_verification(record: ClassificationRecord) -> bool:
    return record.verification is not None


def _is_reviewed(record: ClassificationRecord) -> bool:
    # a known quality label means a human compared the draft, even without a verification payload
    return record.verification is not None or parse_quality_classification(record.classification) is not None


@dataclass(frozen=True)
class AggregationPolicy:
    """Strategy for one fold variant.

    include:
        Records failing this are skipped (counted in ``skipped_records``).
    is_verified:
        Which records count toward ``total_verified`` and the accuracy counters.
        A record without a ``Verification`` never contributes accuracy counts.
    excluded_types:
        Sentinel labels dropped from the type distribution output.
    score_classifications:
        Whether quality classifications are bucketed into score groups.
    automation_rules:
        When set, every included record is resolved to auto-reply or draft.
    """

    name: str
    include: Callable[[ClassificationRecord], bool] = _always
    is_verified: Callable[[ClassificationRecord], bool] = _has_verification
    excluded_types: frozenset[str] = field(default_factory=lambda: frozenset({NONE_ACTION_TYPE}))
    score_classifications: bool = True
    automation_rules: tuple[AutomationRule, ...] | None = None

    def automation_status(self, record: ClassificationRecord) -> AutomationStatus | None:
        if self.automation_rules is None:
            return None
        status, _ = resolve_automation_status(record, self.automation_rules)
        return status

    def rule_source(self, category: str) -> str | None:
        if self.automation_rules is None:
            return None
        return rule_source_for_category(category, self.automation_rules)


DEFAULT_POLICY = AggregationPolicy(name="default")

QUALITY_POLICY = AggregationPolicy(name="quality", is_verified=_is_reviewed)

ACTION_ANALYSIS_POLICY = AggregationPolicy(
    name="action_analysis",
    include=_has_verification,
    score_classifications=False,
)

AUTOMATION_POLICY = AggregationPolicy(
    name="automation",
    score_classifications=False,
    automation_rules=AUTOMATION_RULES,
)

POLICIES: dict[str, AggregationPolicy] = {
    p.name: p for p in (DEFAULT_POLICY, QUALITY_POLICY, ACTION_ANALYSIS_POLICY, AUTOMATION_POLICY)
}


def get_policy(name: str) -> AggregationPolicy:
    if name not in POLICIES:
        raise ValueError(f"Unknown aggregation policy: {name}")
    return POLICIES[name]
