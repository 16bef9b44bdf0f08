"""JSON output formatter for patient summaries and analysis records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from medinsight.models import AnalysisRecord, PatientSummary

Renderable = Union[PatientSummary, AnalysisRecord]


class JSONFormatter:
    """Renders a PatientSummary or AnalysisRecord as indented JSON bytes."""

    def format(self, obj: Renderable, **kwargs: Any) -> bytes:
        """Serialize *obj* to pretty-printed JSON bytes.

        PatientSummary output also carries the derived counts.
        """
        payload = obj.model_dump(mode="json")
        if isinstance(obj, PatientSummary):
            payload["event_count"] = obj.event_count
            payload["critical_findings_count"] = obj.critical_findings_count

        return json.dumps(payload, indent=kwargs.get("indent", 2)).encode()

    def format_to_file(self, obj: Renderable, path: Path, **kwargs: Any) -> Path:
        """Write JSON to *path* and return it."""
        path.write_bytes(self.format(obj, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "application/json"
