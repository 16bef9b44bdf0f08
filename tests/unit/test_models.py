"""Tests for medinsight data models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from medinsight.models import (
    AnalysisRecord,
    CompleteExtraction,
    CompletionStatus,
    CriticalFinding,
    CriticalSeverity,
    Diagnosis,
    ExtractedData,
    ExtractionResult,
    Finding,
    FindingSeverity,
    LabFlag,
    LabValue,
    PartialExtraction,
    Patient,
    PatientSummary,
    Report,
    TimelineEvent,
    TrendIndicators,
)

UTC = timezone.utc


def _record(**overrides) -> AnalysisRecord:
    fields = {
        "report_id": "r-1",
        "confidence_score": 0.8,
        "summary_text": "Analysis of a.txt:",
        "method": "rules",
        "completion_status": CompletionStatus.COMPLETE,
    }
    fields.update(overrides)
    return AnalysisRecord(**fields)


def _report(report_id: str, day: int) -> Report:
    return Report(
        id=report_id,
        patient_id="p-1",
        report_date=datetime(2024, 1, day, tzinfo=UTC),
        file_name=f"{report_id}.txt",
    )


class TestExtractionResult:
    def test_discriminated_partial(self):
        adapter = TypeAdapter(ExtractionResult)
        result = adapter.validate_python(
            {"completion_status": "partial", "summary_text": "Analysis failed: boom", "error_details": "boom"}
        )
        assert isinstance(result, PartialExtraction)

    def test_discriminated_complete(self):
        adapter = TypeAdapter(ExtractionResult)
        result = adapter.validate_python({"completion_status": "complete", "summary_text": "ok"})
        assert isinstance(result, CompleteExtraction)
        assert result.extracted_data.is_empty()

    def test_partial_requires_error_details(self):
        with pytest.raises(ValidationError):
            PartialExtraction(summary_text="Analysis failed")

    def test_confidence_bounded(self):
        with pytest.raises(ValidationError):
            CompleteExtraction(summary_text="ok", confidence_score=1.2)


class TestTrendIndicators:
    def test_concat_keeps_duplicates(self):
        a = TrendIndicators(improving=["Glucose"], recurring=["Anemia"])
        b = TrendIndicators(improving=["Glucose"], declining=["WBC"])
        merged = a.concat(b)
        assert merged.improving == ["Glucose", "Glucose"]
        assert merged.declining == ["WBC"]
        assert merged.recurring == ["Anemia"]

    def test_deduplicated_keeps_first_order(self):
        trends = TrendIndicators(stable=["WBC", "Glucose", "WBC"])
        assert trends.deduplicated().stable == ["WBC", "Glucose"]

    def test_is_empty(self):
        assert TrendIndicators().is_empty()
        assert not TrendIndicators(stable=["WBC"]).is_empty()


class TestAnalysisRecord:
    def test_frozen(self):
        record = _record()
        with pytest.raises(ValidationError):
            record.confidence_score = 0.1

    def test_generated_id_and_timestamp(self):
        a, b = _record(), _record()
        assert a.id != b.id
        assert a.analysis_timestamp.tzinfo is not None

    def test_finding_helpers(self):
        data = ExtractedData(
            findings=[
                Finding(category="Pathology", description="x", severity=FindingSeverity.CRITICAL),
            ],
            lab_values=[
                LabValue(name="Glucose", value="150", flag=LabFlag.HIGH),
                LabValue(name="WBC", value="7", flag=LabFlag.NORMAL),
            ],
            diagnoses=[Diagnosis(description="Malignant findings", confidence=0.9)],
        )
        record = _record(extracted_data=data)
        assert record.has_critical_findings()
        assert record.has_high_severity_findings()
        assert record.abnormal_lab_count() == 1
        assert record.diagnosis_count() == 1

    def test_high_without_critical(self):
        data = ExtractedData(
            findings=[Finding(category="Structural", description="x", severity=FindingSeverity.HIGH)]
        )
        record = _record(extracted_data=data)
        assert not record.has_critical_findings()
        assert record.has_high_severity_findings()

    def test_trend_helpers(self):
        record = _record(trend_indicators=TrendIndicators(improving=["Glucose"]))
        assert record.shows_improvement()
        assert not record.shows_decline()

    @pytest.mark.parametrize(
        "status,score,expected",
        [
            (CompletionStatus.COMPLETE, 0.7, True),
            (CompletionStatus.COMPLETE, 0.69, False),
            (CompletionStatus.PARTIAL, 0.9, False),
        ],
    )
    def test_is_reliable(self, status, score, expected):
        assert _record(completion_status=status, confidence_score=score).is_reliable() is expected

    def test_usable_results(self):
        assert _record(completion_status=CompletionStatus.PARTIAL).has_usable_results()
        assert not _record(completion_status=CompletionStatus.FAILED).has_usable_results()


class TestTimelineViews:
    def test_event_from_report(self):
        report = _report("r-1", 5)
        event = TimelineEvent.from_report(report, None, [])
        assert event.date == report.report_date
        assert event.type.value == "report"
        assert not event.has_critical_findings()

    @pytest.mark.parametrize("score,expected", [(0.8, True), (0.79, False)])
    def test_event_critical_flag(self, score, expected):
        event = TimelineEvent.from_report(_report("r-1", 5), _record(confidence_score=score), [])
        assert event.has_critical_findings() is expected

    def test_summary_helpers(self):
        patient = Patient(
            id="p-1",
            medical_record_number="MRN-1",
            name="Jane Roe",
            date_of_birth=datetime(1970, 1, 1, tzinfo=UTC),
        )
        timeline = [TimelineEvent.from_report(_report(f"r-{d}", d), None, []) for d in (20, 10, 1)]
        summary = PatientSummary(
            patient=patient,
            timeline=timeline,
            critical_findings=[
                CriticalFinding(report_id="r-20", finding="x", severity=CriticalSeverity.HIGH)
            ],
        )

        assert summary.event_count == 3
        assert summary.critical_findings_count == 1
        in_range = summary.filter_by_date_range(
            datetime(2024, 1, 10, tzinfo=UTC), datetime(2024, 1, 20, tzinfo=UTC)
        )
        assert [e.payload.report.id for e in in_range] == ["r-20", "r-10"]
        assert summary.filter_by_date_range() == timeline
        naive = summary.filter_by_date_range(end_date=datetime(2024, 1, 10))
        assert [e.payload.report.id for e in naive] == ["r-10", "r-1"]

    def test_soft_delete_flag(self):
        report = _report("r-1", 1)
        assert not report.is_deleted()
        assert report.model_copy(update={"deleted_at": datetime.now(UTC)}).is_deleted()
