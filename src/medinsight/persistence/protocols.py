"""Collaborator protocols: the narrow store interfaces the core consumes."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from medinsight.models import AnalysisRecord, ClinicalNote, Patient, Report


@runtime_checkable
class IReportLookup(Protocol):
    """Read access to uploaded reports."""

    async def find_by_id(self, report_id: str) -> Optional[Report]:
        """Return the report or None."""
        ...

    async def find_by_patient(self, patient_id: str) -> list[Report]:
        """Return the patient's reports in any order."""
        ...


@runtime_checkable
class IPatientLookup(Protocol):
    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        """Return the patient or None."""
        ...


@runtime_checkable
class IAnalysisStore(Protocol):
    """Storage for analysis records.

    ``create`` owns the one-record-per-report guarantee: it must raise
    ``ConflictError`` when a record already exists for the report.
    """

    async def create(self, record: AnalysisRecord) -> AnalysisRecord:
        ...

    async def find_by_report(self, report_id: str) -> Optional[AnalysisRecord]:
        ...

    async def find_by_id(self, analysis_id: str) -> Optional[AnalysisRecord]:
        ...


@runtime_checkable
class IClinicalNoteStore(Protocol):
    async def find_by_report(self, report_id: str) -> list[ClinicalNote]:
        """Return the report's notes in any order."""
        ...
