"""Tests for TimelineAggregator: ordering, date filters, critical findings."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from medinsight.exceptions import NotFoundError
from medinsight.models import (
    AnalysisRecord,
    ClinicalNote,
    CompletionStatus,
    CriticalSeverity,
    Patient,
    Report,
)
from medinsight.services.timeline_aggregator import TimelineAggregator

UTC = timezone.utc


def _analysis(report_id: str, confidence: float) -> AnalysisRecord:
    return AnalysisRecord(
        report_id=report_id,
        confidence_score=confidence,
        summary_text=f"Analysis of {report_id}: details",
        method="rules",
        completion_status=CompletionStatus.COMPLETE,
    )


@pytest.fixture
def aggregator(patient_store, report_store, analysis_store, note_store) -> TimelineAggregator:
    return TimelineAggregator(patient_store, report_store, analysis_store, note_store)


def _ids(summary) -> list[str]:
    return [event.payload.report.id for event in summary.timeline]


class TestTimeline:
    @pytest.mark.asyncio
    async def test_newest_first(self, aggregator, patient):
        summary = await aggregator.generate_summary(patient.id)

        assert _ids(summary) == ["r-3", "r-2", "r-1"]
        dates = [e.date for e in summary.timeline]
        assert dates == sorted(dates, reverse=True)
        assert summary.event_count == 3

    @pytest.mark.asyncio
    async def test_same_date_ties_broken_by_report_id(self, aggregator, report_store, patient):
        same_day = datetime(2024, 1, 10, tzinfo=UTC)
        report_store.add(Report(id="r-0", patient_id=patient.id, report_date=same_day, file_name="x.txt"))

        summary = await aggregator.generate_summary(patient.id)

        assert _ids(summary) == ["r-3", "r-2", "r-1", "r-0"]

    @pytest.mark.asyncio
    async def test_unknown_patient(self, aggregator):
        with pytest.raises(NotFoundError, match="Patient not found: ghost"):
            await aggregator.generate_summary("ghost")

    @pytest.mark.asyncio
    async def test_patient_without_reports(self, aggregator, patient_store):
        patient_store.add(
            Patient(
                id="p-2",
                medical_record_number="MRN-0002",
                name="John Roe",
                date_of_birth=datetime(1980, 1, 1, tzinfo=UTC),
            )
        )
        summary = await aggregator.generate_summary("p-2")

        assert summary.timeline == []
        assert summary.critical_findings == []

    @pytest.mark.asyncio
    async def test_report_without_analysis(self, aggregator, patient):
        summary = await aggregator.generate_summary(patient.id)

        assert all(e.payload.analysis is None for e in summary.timeline)
        assert summary.critical_findings == []

    @pytest.mark.asyncio
    async def test_deleted_reports_excluded(self, aggregator, report_store, patient):
        report_store.soft_delete("r-2")

        summary = await aggregator.generate_summary(patient.id)

        assert _ids(summary) == ["r-3", "r-1"]

    @pytest.mark.asyncio
    async def test_deleted_notes_excluded(self, aggregator, note_store, patient):
        for note_id in ("n-1", "n-2"):
            note_store.add(
                ClinicalNote(id=note_id, report_id="r-1", content="Reviewed", author_identifier="dr-a")
            )
        note_store.soft_delete("n-2")

        summary = await aggregator.generate_summary(patient.id)

        event = next(e for e in summary.timeline if e.payload.report.id == "r-1")
        assert [n.id for n in event.payload.notes] == ["n-1"]

    @pytest.mark.asyncio
    async def test_idempotent(self, aggregator, analysis_store, patient):
        await analysis_store.create(_analysis("r-1", 0.95))

        first = await aggregator.generate_summary(patient.id)
        second = await aggregator.generate_summary(patient.id)

        assert first.model_dump() == second.model_dump()

    @pytest.mark.asyncio
    async def test_sequential_matches_fan_out(
        self, patient_store, report_store, analysis_store, note_store, patient
    ):
        await analysis_store.create(_analysis("r-2", 0.85))
        fanned = TimelineAggregator(patient_store, report_store, analysis_store, note_store)
        sequential = TimelineAggregator(
            patient_store, report_store, analysis_store, note_store, fan_out=False
        )

        a = await fanned.generate_summary(patient.id)
        b = await sequential.generate_summary(patient.id)

        assert a.model_dump() == b.model_dump()


class TestDateFilters:
    @pytest.mark.asyncio
    async def test_start_inclusive(self, aggregator, patient):
        summary = await aggregator.generate_summary(
            patient.id, start_date=datetime(2024, 3, 15, tzinfo=UTC)
        )
        assert _ids(summary) == ["r-3", "r-2"]

    @pytest.mark.asyncio
    async def test_end_inclusive(self, aggregator, patient):
        summary = await aggregator.generate_summary(
            patient.id, end_date=datetime(2024, 3, 15, tzinfo=UTC)
        )
        assert _ids(summary) == ["r-2", "r-1"]

    @pytest.mark.asyncio
    async def test_both_bounds(self, aggregator, patient):
        day = datetime(2024, 3, 15, tzinfo=UTC)
        summary = await aggregator.generate_summary(patient.id, start_date=day, end_date=day)
        assert _ids(summary) == ["r-2"]

    @pytest.mark.asyncio
    async def test_naive_bounds_read_as_utc(self, aggregator, patient):
        summary = await aggregator.generate_summary(
            patient.id, start_date=datetime(2024, 3, 1), end_date=datetime(2024, 3, 15)
        )
        assert _ids(summary) == ["r-2"]

    @pytest.mark.asyncio
    async def test_naive_report_dates_mix_with_aware(self, aggregator, report_store, patient):
        report_store.add(
            Report(id="r-4", patient_id=patient.id, report_date=datetime(2024, 4, 1), file_name="naive.txt")
        )

        summary = await aggregator.generate_summary(
            patient.id, start_date=datetime(2024, 3, 15, tzinfo=UTC)
        )

        assert _ids(summary) == ["r-3", "r-4", "r-2"]

    @pytest.mark.asyncio
    async def test_filter_applies_to_critical_findings(self, aggregator, analysis_store, patient):
        await analysis_store.create(_analysis("r-1", 0.95))

        summary = await aggregator.generate_summary(
            patient.id, start_date=datetime(2024, 2, 1, tzinfo=UTC)
        )

        assert summary.critical_findings == []


class TestCriticalFindings:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (0.95, CriticalSeverity.CRITICAL),
            (0.9, CriticalSeverity.CRITICAL),
            (0.82, CriticalSeverity.HIGH),
            (0.8, CriticalSeverity.HIGH),
            (0.75, CriticalSeverity.MODERATE),
            (0.7, CriticalSeverity.MODERATE),
            (0.5, None),
        ],
    )
    def test_severity_for(self, aggregator, score, expected):
        assert aggregator.severity_for(score) == expected

    def test_custom_thresholds(self, patient_store, report_store, analysis_store, note_store):
        aggregator = TimelineAggregator(
            patient_store,
            report_store,
            analysis_store,
            note_store,
            critical_threshold=0.99,
            high_threshold=0.95,
            moderate_threshold=0.5,
        )
        assert aggregator.severity_for(0.95) == CriticalSeverity.HIGH
        assert aggregator.severity_for(0.6) == CriticalSeverity.MODERATE

    @pytest.mark.asyncio
    async def test_follow_timeline_order(self, aggregator, analysis_store, patient):
        await analysis_store.create(_analysis("r-1", 0.95))
        await analysis_store.create(_analysis("r-2", 0.82))
        await analysis_store.create(_analysis("r-3", 0.5))

        summary = await aggregator.generate_summary(patient.id)

        assert [(f.report_id, f.severity) for f in summary.critical_findings] == [
            ("r-2", CriticalSeverity.HIGH),
            ("r-1", CriticalSeverity.CRITICAL),
        ]
        assert summary.critical_findings[1].finding == "Analysis of r-1: details"
        assert summary.critical_findings_count == 2
