"""Default record-integrity ruleset for analysis records."""

from __future__ import annotations

from medinsight.validation.models import Rule, RuleCategory, RuleTarget

DEFAULT_RECORD_RULES: list[Rule] = [
    Rule(
        rule_id="AR-001",
        name="Required fields",
        description="id, report_id and method must be non-empty",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.RECORD,
        params={"fields": ["id", "report_id", "method"]},
    ),
    Rule(
        rule_id="AR-002",
        name="Confidence bounds",
        description="confidence_score must lie within [0, 1]",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.RECORD,
        params={"min": 0.0, "max": 1.0},
    ),
    Rule(
        rule_id="AR-003",
        name="Summary length",
        description="summary_text must be 10-5000 characters",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.SUMMARY,
        params={"min_chars": 10, "max_chars": 5000},
    ),
    Rule(
        rule_id="AR-004",
        name="Timestamp not in future",
        description="analysis_timestamp must not be later than now",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.RECORD,
    ),
    Rule(
        rule_id="AR-005",
        name="Error details length",
        description="error_details must not exceed 2000 characters",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.RECORD,
        params={"max_chars": 2000},
    ),
    Rule(
        rule_id="AR-006",
        name="Diagnosis confidence bounds",
        description="every diagnosis confidence must lie within [0, 1]",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.DIAGNOSIS,
        params={"min": 0.0, "max": 1.0},
    ),
    Rule(
        rule_id="AR-007",
        name="Method length",
        description="method must not exceed 50 characters",
        category=RuleCategory.RECORD_INTEGRITY,
        target=RuleTarget.RECORD,
        params={"max_chars": 50},
    ),
]
