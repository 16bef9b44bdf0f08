"""Validation data models: rules, issues, and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class IssueSeverity(str, Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class RuleCategory(str, Enum):
    RECORD_INTEGRITY = "record_integrity"


class RuleTarget(str, Enum):
    """What part of an analysis record a rule validates."""

    RECORD = "record"
    DIAGNOSIS = "diagnosis"
    SUMMARY = "summary"


@dataclass(frozen=True)
class Rule:
    """A single validation rule loaded from a backend."""

    rule_id: str
    name: str
    description: str
    category: RuleCategory
    target: RuleTarget
    severity: IssueSeverity = IssueSeverity.ERROR
    enabled: bool = True
    params: dict[str, Any] = field(default_factory=dict)
    version: int = 1


@dataclass
class ValidationIssue:
    """A single issue found during validation."""

    rule_id: str
    rule_name: str
    severity: IssueSeverity
    category: RuleCategory
    message: str
    field_path: str = ""
    actual_value: str = ""
    expected_hint: str = ""


@dataclass
class ValidationReport:
    """Aggregated result of running all rules against one record."""

    record_id: str
    total_rules_evaluated: int = 0
    issues: list[ValidationIssue] = field(default_factory=list)
    validated_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    rules_version: int = 1

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == IssueSeverity.WARNING)

    @property
    def passed(self) -> bool:
        return self.error_count == 0

    def has_errors(self) -> bool:
        """Return True if any ERROR-level issues exist."""
        return self.error_count > 0

    def violations(self) -> list[str]:
        """ERROR-level messages, in rule order."""
        return [i.message for i in self.issues if i.severity == IssueSeverity.ERROR]
