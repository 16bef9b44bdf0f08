"""Pluggable extraction engines."""

from __future__ import annotations

from medinsight.engines.classifier import DocumentStyle, DocumentStyleClassifier
from medinsight.engines.factory import create_extraction_engine
from medinsight.engines.protocols import IExtractionEngine
from medinsight.engines.rule_engine import RuleBasedExtractionEngine

__all__ = [
    "DocumentStyle",
    "DocumentStyleClassifier",
    "IExtractionEngine",
    "RuleBasedExtractionEngine",
    "create_extraction_engine",
]
