"""Collaborator store protocols and reference backends."""

from __future__ import annotations

from medinsight.persistence.file_backend import FileAnalysisStore
from medinsight.persistence.memory_backend import (
    MemoryAnalysisStore,
    MemoryClinicalNoteStore,
    MemoryPatientStore,
    MemoryReportStore,
)
from medinsight.persistence.protocols import (
    IAnalysisStore,
    IClinicalNoteStore,
    IPatientLookup,
    IReportLookup,
)

__all__ = [
    "IAnalysisStore",
    "IClinicalNoteStore",
    "IPatientLookup",
    "IReportLookup",
    "FileAnalysisStore",
    "MemoryAnalysisStore",
    "MemoryClinicalNoteStore",
    "MemoryPatientStore",
    "MemoryReportStore",
]
