"""Analysis orchestration: one analysis per report, failures persisted as data."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from medinsight.engines.protocols import IExtractionEngine
from medinsight.exceptions import ConflictError, NotFoundError, RecordValidationError
from medinsight.models import (
    AnalysisRecord,
    CompletionStatus,
    ExtractedData,
    PartialExtraction,
    TrendIndicators,
)
from medinsight.persistence.protocols import IAnalysisStore, IReportLookup
from medinsight.services.trend_calculator import TrendCalculator
from medinsight.validation.engine import RulesEngine

log = logging.getLogger(__name__)

_MAX_ERROR_DETAILS = 2000


class AnalysisOrchestrator:
    """Runs the extraction engine for a report and persists the outcome.

    The existence check before ``create`` is not atomic; two concurrent
    calls for the same report both reach the store, and the store's
    uniqueness check decides which one wins.
    """

    def __init__(
        self,
        reports: IReportLookup,
        analyses: IAnalysisStore,
        engine: IExtractionEngine,
        trends: TrendCalculator,
        rules: RulesEngine,
    ) -> None:
        self._reports = reports
        self._analyses = analyses
        self._engine = engine
        self._trends = trends
        self._rules = rules

    async def analyze_report(
        self,
        report_id: str,
        raw_bytes: bytes,
        file_name: str,
    ) -> AnalysisRecord:
        """Analyze a report and persist exactly one record for it.

        Raises:
            NotFoundError: The report does not exist.
            ConflictError: The report already has an analysis.
            RecordValidationError: The assembled record violates integrity
                rules; nothing is persisted.
        """
        report = await self._reports.find_by_id(report_id)
        if report is None:
            raise NotFoundError("report", report_id)

        if await self._analyses.find_by_report(report_id) is not None:
            raise ConflictError(report_id)

        try:
            result = await self._engine.analyze(raw_bytes, file_name, report.file_format)
        except Exception as exc:
            log.exception("Extraction engine %s failed on report %s", self._engine.engine_type, report_id)
            return await self._analyses.create(self._failed_record(report_id, exc))

        computed = await self._trends.compute(
            report.patient_id,
            result.extracted_data,
            exclude_report_id=report_id,
        )

        record = AnalysisRecord(
            report_id=report_id,
            extracted_data=result.extracted_data,
            trend_indicators=result.trend_indicators.concat(computed),
            confidence_score=result.confidence_score,
            summary_text=result.summary_text,
            method=self._engine.engine_type,
            completion_status=CompletionStatus(result.completion_status),
            analysis_timestamp=datetime.now(timezone.utc),
            error_details=result.error_details if isinstance(result, PartialExtraction) else None,
        )

        validation = self._rules.validate(record)
        if validation.has_errors():
            violations = validation.violations()
            log.warning("Analysis for report %s failed validation: %s", report_id, violations)
            raise RecordValidationError(violations)

        saved = await self._analyses.create(record)
        log.info(
            "Stored %s analysis %s for report %s (confidence %.2f)",
            saved.completion_status.value,
            saved.id,
            report_id,
            saved.confidence_score,
        )
        return saved

    async def find_by_id(self, analysis_id: str) -> Optional[AnalysisRecord]:
        return await self._analyses.find_by_id(analysis_id)

    async def find_by_report_id(self, report_id: str) -> Optional[AnalysisRecord]:
        return await self._analyses.find_by_report(report_id)

    def _failed_record(self, report_id: str, exc: BaseException) -> AnalysisRecord:
        message = (str(exc) or exc.__class__.__name__)[:_MAX_ERROR_DETAILS]
        return AnalysisRecord(
            report_id=report_id,
            extracted_data=ExtractedData(),
            trend_indicators=TrendIndicators(),
            confidence_score=0.0,
            summary_text=f"Analysis failed: {message}"[:5000],
            method=self._engine.engine_type,
            completion_status=CompletionStatus.FAILED,
            analysis_timestamp=datetime.now(timezone.utc),
            error_details=message,
        )
