"""Post-extraction validation of analysis records."""

from __future__ import annotations

from medinsight.validation.backends.memory_backend import MemoryRulesBackend
from medinsight.validation.engine import RulesEngine
from medinsight.validation.models import (
    IssueSeverity,
    Rule,
    RuleCategory,
    RuleTarget,
    ValidationIssue,
    ValidationReport,
)
from medinsight.validation.rules import DEFAULT_RECORD_RULES

__all__ = [
    "DEFAULT_RECORD_RULES",
    "IssueSeverity",
    "MemoryRulesBackend",
    "Rule",
    "RuleCategory",
    "RuleTarget",
    "RulesEngine",
    "ValidationIssue",
    "ValidationReport",
]
