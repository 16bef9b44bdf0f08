"""Trend detection across a patient's analysis history."""

from __future__ import annotations

import logging
from typing import Optional

from medinsight.models import (
    AnalysisRecord,
    CompletionStatus,
    ExtractedData,
    LabFlag,
    TrendIndicators,
)
from medinsight.persistence.protocols import IAnalysisStore, IReportLookup

log = logging.getLogger(__name__)


def classify_lab_trend(current: LabFlag, previous: list[LabFlag]) -> str:
    """Classify one lab against its prior flags.

    Abnormal before and normal now is ``improving``; normal every time
    before and abnormal now is ``declining``; anything else is ``stable``.
    """
    if current == LabFlag.NORMAL and any(f != LabFlag.NORMAL for f in previous):
        return "improving"
    if current != LabFlag.NORMAL and all(f == LabFlag.NORMAL for f in previous):
        return "declining"
    return "stable"


class TrendCalculator:
    """Compares current findings with a patient's prior, non-failed analyses."""

    def __init__(self, reports: IReportLookup, analyses: IAnalysisStore) -> None:
        self._reports = reports
        self._analyses = analyses

    async def compute(
        self,
        patient_id: str,
        current: ExtractedData,
        *,
        exclude_report_id: Optional[str] = None,
    ) -> TrendIndicators:
        """Return trend indicators for *current* against the patient's history.

        Args:
            patient_id: Patient whose reports form the history.
            current: Findings of the report being analyzed.
            exclude_report_id: The current report, never used as a prior.

        Returns:
            Indicators with one entry per classified lab and per recurring
            diagnosis. Lists are not deduplicated.
        """
        reports = await self._reports.find_by_patient(patient_id)
        if len(reports) < 2:
            return TrendIndicators()

        priors: list[AnalysisRecord] = []
        for report in reports:
            if report.id == exclude_report_id:
                continue
            analysis = await self._analyses.find_by_report(report.id)
            if analysis is not None and analysis.completion_status != CompletionStatus.FAILED:
                priors.append(analysis)

        if not priors:
            return TrendIndicators()

        trends = TrendIndicators()
        buckets = {
            "improving": trends.improving,
            "declining": trends.declining,
            "stable": trends.stable,
        }

        for lab in current.lab_values:
            previous = [
                prior_lab.flag
                for prior in priors
                for prior_lab in prior.extracted_data.lab_values
                if prior_lab.name == lab.name
            ]
            # A lab never seen before has no history to trend against.
            if not previous:
                continue
            buckets[classify_lab_trend(lab.flag, previous)].append(lab.name)

        prior_descriptions = {
            dx.description for prior in priors for dx in prior.extracted_data.diagnoses
        }
        for diagnosis in current.diagnoses:
            if diagnosis.description in prior_descriptions:
                trends.recurring.append(diagnosis.description)

        log.debug(
            "Trends for patient %s against %d prior analyses: %s",
            patient_id,
            len(priors),
            trends.model_dump(),
        )
        return trends

    async def compare_patient_trends(self, patient_id: str) -> TrendIndicators:
        """Aggregate stored trend indicators across a patient's usable analyses.

        Needs at least two usable analyses; the result is deduplicated.
        """
        reports = sorted(
            await self._reports.find_by_patient(patient_id),
            key=lambda r: (r.report_date, r.id),
        )
        usable: list[AnalysisRecord] = []
        for report in reports:
            analysis = await self._analyses.find_by_report(report.id)
            if analysis is not None and analysis.has_usable_results():
                usable.append(analysis)

        if len(usable) < 2:
            return TrendIndicators()

        aggregated = TrendIndicators()
        for analysis in usable:
            aggregated = aggregated.concat(analysis.trend_indicators)
        return aggregated.deduplicated()
