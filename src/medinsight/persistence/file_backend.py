"""File-based analysis store: one JSON file per record on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from medinsight.exceptions import ConflictError, PersistenceError
from medinsight.models import AnalysisRecord

log = logging.getLogger(__name__)


class FileAnalysisStore:
    """Stores analysis records as ``<quoted report_id>.json`` in a local directory.

    Keying files by report id makes the uniqueness check a file-exists test;
    the record is written with exclusive-create so a second writer for the
    same report fails instead of overwriting.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._base.mkdir(parents=True, exist_ok=True)

    def _record_path(self, report_id: str) -> Path:
        # Reversible: distinct report ids map to distinct files.
        safe_key = quote(report_id, safe="")
        return self._base / f"{safe_key}.json"

    async def create(self, record: AnalysisRecord) -> AnalysisRecord:
        path = self._record_path(record.report_id)
        try:
            with path.open("x", encoding="utf-8") as fh:
                fh.write(record.model_dump_json(indent=2))
        except FileExistsError as exc:
            raise ConflictError(record.report_id) from exc
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {path}: {exc}") from exc
        log.info(f"Saved analysis to {path}")
        return record

    async def find_by_report(self, report_id: str) -> Optional[AnalysisRecord]:
        path = self._record_path(report_id)
        if not path.is_file():
            return None
        return AnalysisRecord.model_validate_json(path.read_text(encoding="utf-8"))

    async def find_by_id(self, analysis_id: str) -> Optional[AnalysisRecord]:
        for path in sorted(self._base.glob("*.json")):
            record = AnalysisRecord.model_validate_json(path.read_text(encoding="utf-8"))
            if record.id == analysis_id:
                return record
        return None
