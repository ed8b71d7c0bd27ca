import unittest

from support_stats.policies import (
    ACTION_ANALYSIS_POLICY,
    AUTOMATION_POLICY,
    DEFAULT_POLICY,
    AggregationPolicy,
    AutomationRule,
    get_policy,
    resolve_automation_status,
    rule_source_for_category,
)
from support_stats.records import ClassificationRecord, Verification


class TestAutomationRules(unittest.TestCase):
    def test_retention_uses_is_outstanding(self):
        record = ClassificationRecord(category="retention_primary_request", is_outstanding=True, requires_action=False)
        self.assertEqual(resolve_automation_status(record), ("draft", "is_outstanding"))

        record = ClassificationRecord(category="retention_repeated_request", is_outstanding=None, requires_action=True)
        self.assertEqual(resolve_automation_status(record), ("auto_reply", "is_outstanding"))

    def test_default_rule_uses_requires_action(self):
        self.assertEqual(
            resolve_automation_status(ClassificationRecord(category="Billing", requires_action=True)),
            ("draft", "requires_system_action"),
        )
        self.assertEqual(
            resolve_automation_status(ClassificationRecord(category=None, requires_action=None)),
            ("auto_reply", "requires_system_action"),
        )

    def test_first_matching_rule_wins(self):
        rules = (
            AutomationRule(frozenset({"X"}), lambda r: True, "first"),
            AutomationRule(frozenset({"X"}), lambda r: False, "second"),
        )
        self.assertEqual(resolve_automation_status(ClassificationRecord(category="X"), rules), ("draft", "first"))

    def test_rule_source_for_category(self):
        self.assertEqual(rule_source_for_category("retention_primary_request"), "is_outstanding")
        self.assertEqual(rule_source_for_category("Billing"), "requires_system_action")
        self.assertEqual(rule_source_for_category(None), "requires_system_action")


class TestPolicies(unittest.TestCase):
    def test_registry_lookup(self):
        self.assertIs(get_policy("automation"), AUTOMATION_POLICY)
        with self.assertRaises(ValueError):
            get_policy("nope")

    def test_verified_only_include(self):
        self.assertFalse(ACTION_ANALYSIS_POLICY.include(ClassificationRecord()))
        self.assertTrue(
            ACTION_ANALYSIS_POLICY.include(ClassificationRecord(verification=Verification(True)))
        )

    def test_automation_hooks_only_on_automation_policy(self):
        record = ClassificationRecord(requires_action=True)
        self.assertIsNone(DEFAULT_POLICY.automation_status(record))
        self.assertIsNone(DEFAULT_POLICY.rule_source("Billing"))
        self.assertEqual(AUTOMATION_POLICY.automation_status(record), "draft")

    def test_default_sentinel(self):
        self.assertEqual(DEFAULT_POLICY.excluded_types, frozenset({"none"}))

    def test_custom_policy(self):
        policy = AggregationPolicy(name="custom", excluded_types=frozenset())
        self.assertEqual(policy.excluded_types, frozenset())
        self.assertTrue(policy.include(ClassificationRecord()))


if __name__ == "__main__":
    unittest.main()
