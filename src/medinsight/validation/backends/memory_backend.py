"""In-memory rules backend, seeded with the default record-integrity rules."""

from __future__ import annotations

from medinsight.validation.models import Rule, RuleCategory
from medinsight.validation.rules import DEFAULT_RECORD_RULES


class MemoryRulesBackend:
    """Dict-backed rules backend; defaults to ``DEFAULT_RECORD_RULES``."""

    def __init__(self, rules: list[Rule] | None = None, *, version: int = 1) -> None:
        seed = DEFAULT_RECORD_RULES if rules is None else rules
        self._rules = {r.rule_id: r for r in seed}
        self._version = version

    def list_rules(
        self,
        *,
        category: RuleCategory | None = None,
        enabled_only: bool = True,
    ) -> list[Rule]:
        result: list[Rule] = []
        for rule in self._rules.values():
            if enabled_only and not rule.enabled:
                continue
            if category is not None and rule.category != category:
                continue
            result.append(rule)
        return result

    def get_rule(self, rule_id: str) -> Rule:
        if rule_id not in self._rules:
            raise KeyError(f"Rule {rule_id!r} not found")
        return self._rules[rule_id]

    def get_version(self) -> int:
        return self._version
