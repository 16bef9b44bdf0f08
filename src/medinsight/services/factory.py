"""Service wiring: builds every collaborator once from application settings.

Usage::

    settings = AppSettings()
    services = create_services(settings)
    record = await services.orchestrator.analyze_report(report_id, data, name)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from medinsight.engines.factory import create_extraction_engine
from medinsight.persistence.file_backend import FileAnalysisStore
from medinsight.persistence.memory_backend import (
    MemoryAnalysisStore,
    MemoryClinicalNoteStore,
    MemoryPatientStore,
    MemoryReportStore,
)
from medinsight.services.analysis_orchestrator import AnalysisOrchestrator
from medinsight.services.timeline_aggregator import TimelineAggregator
from medinsight.services.trend_calculator import TrendCalculator
from medinsight.validation.backends.memory_backend import MemoryRulesBackend
from medinsight.validation.engine import RulesEngine

if TYPE_CHECKING:
    from medinsight.core.config import AppSettings
    from medinsight.engines.protocols import IExtractionEngine
    from medinsight.persistence.protocols import (
        IAnalysisStore,
        IClinicalNoteStore,
        IPatientLookup,
        IReportLookup,
    )

log = logging.getLogger(__name__)


@dataclass
class Services:
    """Explicitly constructed collaborators and the two core services."""

    patients: IPatientLookup
    reports: IReportLookup
    analyses: IAnalysisStore
    notes: IClinicalNoteStore
    engine: IExtractionEngine
    orchestrator: AnalysisOrchestrator
    aggregator: TimelineAggregator


def create_analysis_store(settings: AppSettings) -> IAnalysisStore:
    if settings.persistence.backend == "file":
        log.info("Using file analysis store at %s", settings.persistence.store_path)
        return FileAnalysisStore(settings.persistence.store_path)
    return MemoryAnalysisStore()


def create_services(
    settings: AppSettings,
    *,
    patients: IPatientLookup | None = None,
    reports: IReportLookup | None = None,
    analyses: IAnalysisStore | None = None,
    notes: IClinicalNoteStore | None = None,
    engine: IExtractionEngine | None = None,
) -> Services:
    """Wire the orchestrator and aggregator.

    Collaborators not passed in fall back to the in-memory stores (or the
    configured analysis store) and the configured extraction engine.
    """
    patients = patients or MemoryPatientStore()
    reports = reports or MemoryReportStore()
    analyses = analyses or create_analysis_store(settings)
    notes = notes or MemoryClinicalNoteStore()
    engine = engine or create_extraction_engine(settings)

    trends = TrendCalculator(reports, analyses)
    orchestrator = AnalysisOrchestrator(
        reports,
        analyses,
        engine,
        trends,
        RulesEngine(MemoryRulesBackend()),
    )
    aggregator = TimelineAggregator(
        patients,
        reports,
        analyses,
        notes,
        critical_threshold=settings.summary.critical_threshold,
        high_threshold=settings.summary.high_threshold,
        moderate_threshold=settings.summary.moderate_threshold,
        fan_out=settings.summary.fan_out,
    )
    return Services(
        patients=patients,
        reports=reports,
        analyses=analyses,
        notes=notes,
        engine=engine,
        orchestrator=orchestrator,
        aggregator=aggregator,
    )
