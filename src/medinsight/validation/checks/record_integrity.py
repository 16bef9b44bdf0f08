"""Record integrity checks: required fields, numeric bounds, text lengths, timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from medinsight.models import AnalysisRecord, as_utc
from medinsight.validation.models import Rule, RuleCategory, ValidationIssue

_Check = Callable[[AnalysisRecord, Rule, datetime], list[ValidationIssue]]


def check_record_integrity(
    record: AnalysisRecord,
    rules: list[Rule],
    *,
    now: datetime | None = None,
) -> list[ValidationIssue]:
    """Run every enabled record-integrity rule against *record*."""
    current = now or datetime.now(timezone.utc)
    issues: list[ValidationIssue] = []
    for rule in rules:
        if rule.category != RuleCategory.RECORD_INTEGRITY:
            continue
        check = _CHECKS.get(rule.rule_id)
        if check is not None:
            issues.extend(check(record, rule, current))
    return issues


def _issue(rule: Rule, message: str, *, field_path: str, actual: str = "", hint: str = "") -> ValidationIssue:
    return ValidationIssue(
        rule_id=rule.rule_id,
        rule_name=rule.name,
        severity=rule.severity,
        category=rule.category,
        message=message,
        field_path=field_path,
        actual_value=actual,
        expected_hint=hint,
    )


def _check_required_fields(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for name in rule.params.get("fields", []):
        value = getattr(record, name, "")
        if not value or not str(value).strip():
            issues.append(_issue(rule, f"{name} is required", field_path=name))
    return issues


def _check_confidence(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    lo, hi = rule.params.get("min", 0.0), rule.params.get("max", 1.0)
    score = record.confidence_score
    if lo <= score <= hi:
        return []
    return [
        _issue(
            rule,
            f"Confidence score must be between {lo} and {hi}",
            field_path="confidence_score",
            actual=str(score),
            hint=f"[{lo}, {hi}]",
        )
    ]


def _check_summary_length(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    lo, hi = rule.params.get("min_chars", 10), rule.params.get("max_chars", 5000)
    length = len(record.summary_text or "")
    if lo <= length <= hi:
        return []
    return [
        _issue(
            rule,
            f"Summary text must be {lo}-{hi} characters",
            field_path="summary_text",
            actual=str(length),
        )
    ]


def _check_timestamp(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    stamp = as_utc(record.analysis_timestamp)
    if stamp <= as_utc(now):
        return []
    return [
        _issue(
            rule,
            "Analysis timestamp cannot be in the future",
            field_path="analysis_timestamp",
            actual=stamp.isoformat(),
        )
    ]


def _check_error_details(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    limit = rule.params.get("max_chars", 2000)
    if record.error_details is None or len(record.error_details) <= limit:
        return []
    return [
        _issue(
            rule,
            f"Error details must not exceed {limit} characters",
            field_path="error_details",
            actual=str(len(record.error_details)),
        )
    ]


def _check_diagnosis_confidence(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    lo, hi = rule.params.get("min", 0.0), rule.params.get("max", 1.0)
    return [
        _issue(
            rule,
            f"Diagnosis confidence must be between {lo} and {hi}: {dx.description[:80]}",
            field_path="extracted_data.diagnoses[].confidence",
            actual=str(dx.confidence),
        )
        for dx in record.extracted_data.diagnoses
        if not lo <= dx.confidence <= hi
    ]


def _check_method_length(record: AnalysisRecord, rule: Rule, now: datetime) -> list[ValidationIssue]:
    limit = rule.params.get("max_chars", 50)
    if len(record.method) <= limit:
        return []
    return [
        _issue(
            rule,
            f"Method must not exceed {limit} characters",
            field_path="method",
            actual=record.method[:80],
        )
    ]


_CHECKS: dict[str, _Check] = {
    "AR-001": _check_required_fields,
    "AR-002": _check_confidence,
    "AR-003": _check_summary_length,
    "AR-004": _check_timestamp,
    "AR-005": _check_error_details,
    "AR-006": _check_diagnosis_confidence,
    "AR-007": _check_method_length,
}
