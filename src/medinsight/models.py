"""Pydantic data models for medinsight.

Extraction output (``ExtractedData``, ``TrendIndicators``), the persisted
``AnalysisRecord``, the collaborator entities (``Patient``, ``Report``,
``ClinicalNote``) and the computed timeline views (``TimelineEvent``,
``PatientSummary``).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ────────────────────────────────────────────────────────────


class LabFlag(str, Enum):
    """Lab value position relative to its reference range."""

    HIGH = "high"
    LOW = "low"
    NORMAL = "normal"


class FindingSeverity(str, Enum):
    """Severity label attached to an extracted finding."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CompletionStatus(str, Enum):
    """Outcome of an analysis run."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


class TimelineEventType(str, Enum):
    REPORT = "report"
    NOTE = "note"


class CriticalSeverity(str, Enum):
    """Severity of a highlighted timeline entry."""

    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC so it compares with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ── Extraction models ────────────────────────────────────────────────


class LabValue(BaseModel):
    """A single captured lab analyte."""

    name: str
    value: str
    unit: str = ""
    reference_range: str = ""
    flag: LabFlag = LabFlag.NORMAL


class Diagnosis(BaseModel):
    code: Optional[str] = None
    description: str
    confidence: float = 0.0


class Medication(BaseModel):
    name: str
    dosage: str = "unknown"
    frequency: str = "unknown"


class Finding(BaseModel):
    category: str
    description: str
    severity: FindingSeverity = FindingSeverity.LOW


class ExtractedData(BaseModel):
    """Structured findings extracted from one document."""

    lab_values: list[LabValue] = Field(default_factory=list)
    diagnoses: list[Diagnosis] = Field(default_factory=list)
    medications: list[Medication] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.lab_values or self.diagnoses or self.medications or self.findings)


class TrendIndicators(BaseModel):
    """Change classifications relative to a patient's analysis history."""

    improving: list[str] = Field(default_factory=list)
    declining: list[str] = Field(default_factory=list)
    stable: list[str] = Field(default_factory=list)
    recurring: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.improving or self.declining or self.stable or self.recurring)

    def concat(self, other: TrendIndicators) -> TrendIndicators:
        """Concatenate each list with *other*'s; duplicates are kept."""
        return TrendIndicators(
            improving=[*self.improving, *other.improving],
            declining=[*self.declining, *other.declining],
            stable=[*self.stable, *other.stable],
            recurring=[*self.recurring, *other.recurring],
        )

    def deduplicated(self) -> TrendIndicators:
        """Drop repeated entries, keeping the first occurrence."""
        return TrendIndicators(
            improving=list(dict.fromkeys(self.improving)),
            declining=list(dict.fromkeys(self.declining)),
            stable=list(dict.fromkeys(self.stable)),
            recurring=list(dict.fromkeys(self.recurring)),
        )


class CompleteExtraction(BaseModel):
    """Engine output for a document processed without internal errors."""

    completion_status: Literal["complete"] = "complete"
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)
    trend_indicators: TrendIndicators = Field(default_factory=TrendIndicators)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    summary_text: str


class PartialExtraction(BaseModel):
    """Engine output when extraction stopped on an internal error."""

    completion_status: Literal["partial"] = "partial"
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)
    trend_indicators: TrendIndicators = Field(default_factory=TrendIndicators)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    summary_text: str
    error_details: str


ExtractionResult = Annotated[
    Union[CompleteExtraction, PartialExtraction],
    Field(discriminator="completion_status"),
]


# ── Persisted analysis ───────────────────────────────────────────────


class AnalysisRecord(BaseModel):
    """The single, immutable analysis outcome for one report.

    Field bounds are not enforced here; ``validation.RulesEngine`` checks
    them so that every violated rule can be reported at once.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    report_id: str
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)
    trend_indicators: TrendIndicators = Field(default_factory=TrendIndicators)
    confidence_score: float = 0.0
    summary_text: str
    method: str
    completion_status: CompletionStatus
    analysis_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error_details: Optional[str] = None

    def has_critical_findings(self) -> bool:
        return any(f.severity == FindingSeverity.CRITICAL for f in self.extracted_data.findings)

    def has_high_severity_findings(self) -> bool:
        return any(
            f.severity in (FindingSeverity.HIGH, FindingSeverity.CRITICAL)
            for f in self.extracted_data.findings
        )

    def abnormal_lab_count(self) -> int:
        return sum(1 for lab in self.extracted_data.lab_values if lab.flag != LabFlag.NORMAL)

    def diagnosis_count(self) -> int:
        return len(self.extracted_data.diagnoses)

    def shows_improvement(self) -> bool:
        return bool(self.trend_indicators.improving)

    def shows_decline(self) -> bool:
        return bool(self.trend_indicators.declining)

    def is_reliable(self, min_confidence: float = 0.7) -> bool:
        """True when the run completed and its confidence clears *min_confidence*."""
        return (
            self.completion_status == CompletionStatus.COMPLETE
            and self.confidence_score >= min_confidence
        )

    def has_usable_results(self) -> bool:
        return self.completion_status != CompletionStatus.FAILED


# ── Collaborator entities ────────────────────────────────────────────


class Patient(BaseModel):
    id: str
    medical_record_number: str
    name: str
    date_of_birth: datetime
    deleted_at: Optional[datetime] = None

    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Report(BaseModel):
    """An uploaded medical document; ``report_date`` is the clinical date."""

    id: str
    patient_id: str
    report_date: datetime
    file_name: str
    file_format: str = "text/plain"
    description: Optional[str] = None
    upload_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deleted_at: Optional[datetime] = None

    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class ClinicalNote(BaseModel):
    id: str
    report_id: str
    content: str
    author_identifier: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deleted_at: Optional[datetime] = None

    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# ── Timeline views ───────────────────────────────────────────────────


class TimelineEventData(BaseModel):
    report: Report
    analysis: Optional[AnalysisRecord] = None
    notes: list[ClinicalNote] = Field(default_factory=list)


class TimelineEvent(BaseModel):
    """One report-centric entry in a patient timeline."""

    date: datetime
    type: TimelineEventType = TimelineEventType.REPORT
    payload: TimelineEventData

    @classmethod
    def from_report(
        cls,
        report: Report,
        analysis: Optional[AnalysisRecord],
        notes: list[ClinicalNote],
    ) -> TimelineEvent:
        return cls(
            date=report.report_date,
            type=TimelineEventType.REPORT,
            payload=TimelineEventData(report=report, analysis=analysis, notes=notes),
        )

    def has_critical_findings(self) -> bool:
        if self.payload.analysis is None:
            return False
        return self.payload.analysis.confidence_score >= 0.8


class CriticalFinding(BaseModel):
    report_id: str
    finding: str
    severity: CriticalSeverity


class PatientSummary(BaseModel):
    """Patient record view computed per request; never persisted."""

    patient: Patient
    timeline: list[TimelineEvent] = Field(default_factory=list)
    critical_findings: list[CriticalFinding] = Field(default_factory=list)

    @property
    def event_count(self) -> int:
        return len(self.timeline)

    @property
    def critical_findings_count(self) -> int:
        return len(self.critical_findings)

    def filter_by_date_range(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[TimelineEvent]:
        """Return timeline events whose date lies in the inclusive range."""
        events = self.timeline
        if start_date is not None:
            events = [e for e in events if as_utc(e.date) >= as_utc(start_date)]
        if end_date is not None:
            events = [e for e in events if as_utc(e.date) <= as_utc(end_date)]
        return events
