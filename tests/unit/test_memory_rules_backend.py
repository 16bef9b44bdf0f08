"""Tests for MemoryRulesBackend."""

from __future__ import annotations

import pytest

from medinsight.validation.backends.memory_backend import MemoryRulesBackend
from medinsight.validation.backends.protocol import IRulesBackend
from medinsight.validation.models import IssueSeverity, Rule, RuleCategory, RuleTarget


def _rule(rule_id: str, *, enabled: bool = True) -> Rule:
    return Rule(
        rule_id=rule_id,
        name=f"Rule {rule_id}",
        description="test",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.RECORD,
        severity=IssueSeverity.WARNING,
        enabled=enabled,
    )


class TestMemoryRulesBackend:
    def test_defaults_to_record_integrity_rules(self) -> None:
        backend = MemoryRulesBackend()
        ids = [r.rule_id for r in backend.list_rules()]
        assert ids == [f"AR-00{i}" for i in range(1, 8)]

    def test_explicit_empty(self) -> None:
        assert MemoryRulesBackend([]).list_rules() == []

    def test_filter_by_category(self) -> None:
        backend = MemoryRulesBackend([_rule("A"), _rule("B")])
        result = backend.list_rules(category=RuleCategory.RECORD_INTEGRITY)
        assert [r.rule_id for r in result] == ["A", "B"]

    def test_filter_enabled_only(self) -> None:
        backend = MemoryRulesBackend([_rule("A"), _rule("B", enabled=False)])
        assert [r.rule_id for r in backend.list_rules()] == ["A"]
        assert len(backend.list_rules(enabled_only=False)) == 2

    def test_get_rule(self) -> None:
        backend = MemoryRulesBackend([_rule("A")])
        assert backend.get_rule("A").name == "Rule A"

    def test_get_rule_not_found(self) -> None:
        with pytest.raises(KeyError):
            MemoryRulesBackend([]).get_rule("missing")

    def test_version(self) -> None:
        assert MemoryRulesBackend().get_version() == 1
        assert MemoryRulesBackend(version=3).get_version() == 3

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MemoryRulesBackend(), IRulesBackend)
