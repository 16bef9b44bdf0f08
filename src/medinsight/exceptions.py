"""Exception hierarchy for medinsight."""

from __future__ import annotations


class MedInsightError(Exception):
    """Base exception for all medinsight errors."""


class NotFoundError(MedInsightError):
    """Raised when a patient or report does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind.capitalize()} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class ConflictError(MedInsightError):
    """Raised when a report has already been analyzed."""

    def __init__(self, report_id: str) -> None:
        super().__init__(f"Report has already been analyzed: {report_id}")
        self.report_id = report_id


class RecordValidationError(MedInsightError):
    """Raised when an analysis record violates ERROR-level integrity rules."""

    def __init__(self, violations: list[str]) -> None:
        super().__init__(f"Analysis validation failed: {', '.join(violations)}")
        self.violations = violations


class EngineFaultError(MedInsightError):
    """Raised by an extraction engine that cannot produce any result."""


class PersistenceError(MedInsightError):
    """Raised when a store backend operation fails."""
