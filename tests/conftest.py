"""Shared fixtures for medinsight tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from medinsight.core.config import AppSettings
from medinsight.models import Patient, Report
from medinsight.persistence.memory_backend import (
    MemoryAnalysisStore,
    MemoryClinicalNoteStore,
    MemoryPatientStore,
    MemoryReportStore,
)
from medinsight.services.factory import Services, create_services

UTC = timezone.utc


@pytest.fixture
def patient() -> Patient:
    return Patient(
        id="p-1",
        medical_record_number="MRN-0001",
        name="Jane Roe",
        date_of_birth=datetime(1970, 5, 1, tzinfo=UTC),
    )


@pytest.fixture
def reports(patient: Patient) -> list[Report]:
    """Three reports for one patient, Jan / Mar / Jun 2024."""
    return [
        Report(
            id="r-1",
            patient_id=patient.id,
            report_date=datetime(2024, 1, 10, tzinfo=UTC),
            file_name="labs-jan.txt",
        ),
        Report(
            id="r-2",
            patient_id=patient.id,
            report_date=datetime(2024, 3, 15, tzinfo=UTC),
            file_name="labs-mar.txt",
        ),
        Report(
            id="r-3",
            patient_id=patient.id,
            report_date=datetime(2024, 6, 20, tzinfo=UTC),
            file_name="biopsy-jun.txt",
        ),
    ]


@pytest.fixture
def patient_store(patient: Patient) -> MemoryPatientStore:
    return MemoryPatientStore([patient])


@pytest.fixture
def report_store(reports: list[Report]) -> MemoryReportStore:
    return MemoryReportStore(reports)


@pytest.fixture
def analysis_store() -> MemoryAnalysisStore:
    return MemoryAnalysisStore()


@pytest.fixture
def note_store() -> MemoryClinicalNoteStore:
    return MemoryClinicalNoteStore()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings()


@pytest.fixture
def services(
    settings: AppSettings,
    patient_store: MemoryPatientStore,
    report_store: MemoryReportStore,
    analysis_store: MemoryAnalysisStore,
    note_store: MemoryClinicalNoteStore,
) -> Services:
    """Services wired over the in-memory stores and the rule engine."""
    return create_services(
        settings,
        patients=patient_store,
        reports=report_store,
        analyses=analysis_store,
        notes=note_store,
    )
