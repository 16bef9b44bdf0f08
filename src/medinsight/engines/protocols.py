"""Extraction engine protocol: defines the contract all engines implement."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from medinsight.models import ExtractionResult


@runtime_checkable
class IExtractionEngine(Protocol):
    """Protocol for pluggable extraction engines.

    The built-in rule engine never raises; alternate engines may, and the
    orchestrator turns any exception into a failed analysis record.
    """

    @property
    def engine_type(self) -> str:
        """Short identifier stored as ``AnalysisRecord.method``."""
        ...

    async def analyze(
        self,
        content: bytes,
        file_name: str,
        declared_format: str,
    ) -> ExtractionResult:
        """Extract structured findings from a document.

        Args:
            content: Raw document bytes (treated as decoded text).
            file_name: Original file name, used in the summary text.
            declared_format: MIME type declared at upload.

        Returns:
            ``CompleteExtraction`` or ``PartialExtraction``.
        """
        ...
