"""Patient timeline aggregation and critical-finding highlighting."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from medinsight.exceptions import NotFoundError
from medinsight.models import (
    CriticalFinding,
    CriticalSeverity,
    PatientSummary,
    Report,
    TimelineEvent,
    as_utc,
)
from medinsight.persistence.protocols import (
    IAnalysisStore,
    IClinicalNoteStore,
    IPatientLookup,
    IReportLookup,
)

log = logging.getLogger(__name__)


class TimelineAggregator:
    """Builds a newest-first timeline of a patient's reports.

    Critical findings reuse the analysis *confidence* score as a severity
    proxy: >= critical_threshold is critical, >= high_threshold is high,
    >= moderate_threshold is moderate, anything lower is left out.
    """

    def __init__(
        self,
        patients: IPatientLookup,
        reports: IReportLookup,
        analyses: IAnalysisStore,
        notes: IClinicalNoteStore,
        *,
        critical_threshold: float = 0.9,
        high_threshold: float = 0.8,
        moderate_threshold: float = 0.7,
        fan_out: bool = True,
    ) -> None:
        self._patients = patients
        self._reports = reports
        self._analyses = analyses
        self._notes = notes
        self._thresholds = (
            (critical_threshold, CriticalSeverity.CRITICAL),
            (high_threshold, CriticalSeverity.HIGH),
            (moderate_threshold, CriticalSeverity.MODERATE),
        )
        self._fan_out = fan_out

    async def generate_summary(
        self,
        patient_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> PatientSummary:
        """Compose the patient's timeline and critical findings.

        Args:
            patient_id: Patient to summarize.
            start_date: Inclusive lower bound on report date (None = unbounded).
            end_date: Inclusive upper bound on report date (None = unbounded).

        Raises:
            NotFoundError: The patient does not exist.
        """
        patient = await self._patients.find_by_id(patient_id)
        if patient is None:
            raise NotFoundError("patient", patient_id)

        reports = [r for r in await self._reports.find_by_patient(patient_id) if not r.is_deleted()]

        if self._fan_out:
            timeline = list(await asyncio.gather(*(self._build_event(r) for r in reports)))
        else:
            timeline = [await self._build_event(r) for r in reports]

        timeline.sort(key=lambda e: (as_utc(e.date), e.payload.report.id), reverse=True)
        timeline = self._apply_filters(timeline, start_date, end_date)

        summary = PatientSummary(
            patient=patient,
            timeline=timeline,
            critical_findings=self.highlight_critical_findings(timeline),
        )
        log.debug(
            "Summary for patient %s: %d events, %d critical findings",
            patient_id,
            summary.event_count,
            summary.critical_findings_count,
        )
        return summary

    async def _build_event(self, report: Report) -> TimelineEvent:
        analysis = await self._analyses.find_by_report(report.id)
        notes = [n for n in await self._notes.find_by_report(report.id) if not n.is_deleted()]
        return TimelineEvent.from_report(report, analysis, notes)

    @staticmethod
    def _apply_filters(
        timeline: list[TimelineEvent],
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> list[TimelineEvent]:
        # Naive bounds and report dates are read as UTC.
        if start_date is not None:
            start = as_utc(start_date)
            timeline = [e for e in timeline if as_utc(e.date) >= start]
        if end_date is not None:
            end = as_utc(end_date)
            timeline = [e for e in timeline if as_utc(e.date) <= end]
        return timeline

    def severity_for(self, confidence_score: float) -> Optional[CriticalSeverity]:
        for threshold, severity in self._thresholds:
            if confidence_score >= threshold:
                return severity
        return None

    def highlight_critical_findings(self, timeline: list[TimelineEvent]) -> list[CriticalFinding]:
        findings: list[CriticalFinding] = []
        for event in timeline:
            analysis = event.payload.analysis
            if analysis is None:
                continue
            severity = self.severity_for(analysis.confidence_score)
            if severity is None:
                continue
            findings.append(
                CriticalFinding(
                    report_id=event.payload.report.id,
                    finding=analysis.summary_text,
                    severity=severity,
                )
            )
        return findings
