"""In-memory collaborator stores, dict-backed."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from medinsight.exceptions import ConflictError
from medinsight.models import AnalysisRecord, ClinicalNote, Patient, Report

log = logging.getLogger(__name__)


class MemoryPatientStore:
    def __init__(self, patients: list[Patient] | None = None) -> None:
        self._patients: dict[str, Patient] = {p.id: p for p in (patients or [])}

    def add(self, patient: Patient) -> Patient:
        self._patients[patient.id] = patient
        return patient

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        patient = self._patients.get(patient_id)
        if patient is None or patient.is_deleted():
            return None
        return patient


class MemoryReportStore:
    """Reports keyed by id; soft-deleted reports stay in the dict."""

    def __init__(self, reports: list[Report] | None = None) -> None:
        self._reports: dict[str, Report] = {r.id: r for r in (reports or [])}

    def add(self, report: Report) -> Report:
        self._reports[report.id] = report
        return report

    def soft_delete(self, report_id: str) -> None:
        report = self._reports[report_id]
        self._reports[report_id] = report.model_copy(
            update={"deleted_at": datetime.now(timezone.utc)}
        )

    async def find_by_id(self, report_id: str) -> Optional[Report]:
        report = self._reports.get(report_id)
        if report is None or report.is_deleted():
            return None
        return report

    async def find_by_patient(self, patient_id: str) -> list[Report]:
        return [
            r for r in self._reports.values()
            if r.patient_id == patient_id and not r.is_deleted()
        ]


class MemoryAnalysisStore:
    """Analysis records keyed by id with a report-id uniqueness index."""

    def __init__(self) -> None:
        self._records: dict[str, AnalysisRecord] = {}
        self._by_report: dict[str, str] = {}

    async def create(self, record: AnalysisRecord) -> AnalysisRecord:
        if record.report_id in self._by_report:
            raise ConflictError(record.report_id)
        self._records[record.id] = record
        self._by_report[record.report_id] = record.id
        log.debug(f"Saved analysis {record.id} for report {record.report_id} to memory store")
        return record

    async def find_by_report(self, report_id: str) -> Optional[AnalysisRecord]:
        analysis_id = self._by_report.get(report_id)
        if analysis_id is None:
            return None
        return self._records[analysis_id]

    async def find_by_id(self, analysis_id: str) -> Optional[AnalysisRecord]:
        return self._records.get(analysis_id)

    def count(self) -> int:
        return len(self._records)


class MemoryClinicalNoteStore:
    def __init__(self, notes: list[ClinicalNote] | None = None) -> None:
        self._notes: dict[str, ClinicalNote] = {n.id: n for n in (notes or [])}

    def add(self, note: ClinicalNote) -> ClinicalNote:
        self._notes[note.id] = note
        return note

    def soft_delete(self, note_id: str) -> None:
        note = self._notes[note_id]
        self._notes[note_id] = note.model_copy(update={"deleted_at": datetime.now(timezone.utc)})

    async def find_by_report(self, report_id: str) -> list[ClinicalNote]:
        return [
            n for n in self._notes.values()
            if n.report_id == report_id and not n.is_deleted()
        ]
