"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from medinsight.core.config import AppSettings

log = logging.getLogger(__name__)

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_thresholds(settings)
    _check_persistence(settings)
    _check_log_level(settings)


def _check_thresholds(settings: AppSettings) -> None:
    """Severity thresholds must descend critical > high > moderate."""
    s = settings.summary
    if not (s.critical_threshold > s.high_threshold > s.moderate_threshold):
        raise ValueError(
            "MEDINSIGHT_SUMMARY thresholds must satisfy critical > high > moderate "
            f"(got {s.critical_threshold}, {s.high_threshold}, {s.moderate_threshold})."
        )


def _check_persistence(settings: AppSettings) -> None:
    """Reject a file store path that exists but is not a directory."""
    if settings.persistence.backend != "file":
        return
    path = settings.persistence.store_path
    if path.exists() and not path.is_dir():
        raise ValueError(
            f"MEDINSIGHT_PERSISTENCE_STORE_PATH={path} exists and is not a directory."
        )
    if not path.exists():
        log.warning("Analysis store path %s does not exist yet; it will be created", path)


def _check_log_level(settings: AppSettings) -> None:
    level = settings.observability.log_level.upper()
    if level not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"MEDINSIGHT_OBSERVABILITY_LOG_LEVEL={settings.observability.log_level!r} "
            f"is not one of {sorted(_VALID_LOG_LEVELS)}."
        )
