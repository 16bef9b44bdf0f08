"""medinsight: rule-based analysis of patient medical reports.

Usage::

    from medinsight import AppSettings, create_services

    services = create_services(AppSettings())
    record = await services.orchestrator.analyze_report(report_id, raw_bytes, file_name)
    summary = await services.aggregator.generate_summary(patient_id)
"""

from __future__ import annotations

from medinsight.core.config import AppSettings
from medinsight.engines.rule_engine import RuleBasedExtractionEngine
from medinsight.exceptions import (
    ConflictError,
    EngineFaultError,
    MedInsightError,
    NotFoundError,
    PersistenceError,
    RecordValidationError,
)
from medinsight.models import (
    AnalysisRecord,
    ClinicalNote,
    CompleteExtraction,
    CompletionStatus,
    CriticalFinding,
    ExtractedData,
    ExtractionResult,
    PartialExtraction,
    Patient,
    PatientSummary,
    Report,
    TimelineEvent,
    TrendIndicators,
)
from medinsight.services.analysis_orchestrator import AnalysisOrchestrator
from medinsight.services.factory import Services, create_services
from medinsight.services.timeline_aggregator import TimelineAggregator
from medinsight.services.trend_calculator import TrendCalculator

__version__ = "0.1.0"

__all__ = [
    "AnalysisOrchestrator",
    "AnalysisRecord",
    "AppSettings",
    "ClinicalNote",
    "CompleteExtraction",
    "CompletionStatus",
    "ConflictError",
    "CriticalFinding",
    "EngineFaultError",
    "ExtractedData",
    "ExtractionResult",
    "MedInsightError",
    "NotFoundError",
    "PartialExtraction",
    "Patient",
    "PatientSummary",
    "PersistenceError",
    "RecordValidationError",
    "Report",
    "RuleBasedExtractionEngine",
    "Services",
    "TimelineAggregator",
    "TimelineEvent",
    "TrendCalculator",
    "TrendIndicators",
    "create_services",
]
