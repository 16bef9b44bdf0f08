"""Rules engine: loads rules from a backend and dispatches to check modules."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from medinsight.validation.checks.record_integrity import check_record_integrity
from medinsight.validation.models import ValidationReport

if TYPE_CHECKING:
    from medinsight.models import AnalysisRecord
    from medinsight.validation.backends.protocol import IRulesBackend

log = logging.getLogger(__name__)


class RulesEngine:
    """Validates an AnalysisRecord against rules loaded from a backend.

    Validation is pure computation; it never mutates or persists the record.
    """

    def __init__(self, backend: IRulesBackend) -> None:
        self._backend = backend

    def validate(
        self,
        record: AnalysisRecord,
        *,
        now: datetime | None = None,
    ) -> ValidationReport:
        """Run all enabled rules against the record and return a report."""
        rules = self._backend.list_rules(enabled_only=True)
        report = ValidationReport(
            record_id=record.id,
            total_rules_evaluated=len(rules),
            rules_version=self._backend.get_version(),
        )
        report.issues.extend(check_record_integrity(record, rules, now=now))

        if report.issues:
            log.debug(
                "Record %s: %d issue(s), %d error(s)",
                record.id,
                len(report.issues),
                report.error_count,
            )
        return report
