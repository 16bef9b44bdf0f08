"""Nested pydantic-settings configuration for the application.

Each sub-config reads its own ``MEDINSIGHT_<GROUP>_*`` env vars, e.g.::

    export MEDINSIGHT_ENGINE_BACKEND=rules
    export MEDINSIGHT_SUMMARY_CRITICAL_THRESHOLD=0.9
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class EngineConfig(BaseSettings):
    """Extraction engine selection.

    ``backend`` is ``"rules"`` for the built-in rule engine or a dotted
    path (``package.module:ClassName``) to an alternate implementation.
    """

    model_config = {"env_prefix": "MEDINSIGHT_ENGINE_"}

    backend: str = "rules"
    max_summary_chars: int = Field(default=5000, ge=10)


class SummaryConfig(BaseSettings):
    """Timeline summary configuration.

    Env vars use ``MEDINSIGHT_SUMMARY_`` prefix.
    """

    model_config = {"env_prefix": "MEDINSIGHT_SUMMARY_"}

    critical_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    high_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    moderate_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    fan_out: bool = True


class PersistenceConfig(BaseSettings):
    """Persistence configuration.

    Env vars use ``MEDINSIGHT_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "MEDINSIGHT_PERSISTENCE_"}

    backend: Literal["memory", "file"] = "memory"
    store_path: Path = Path("./analyses")


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``MEDINSIGHT_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "MEDINSIGHT_OBSERVABILITY_"}

    service_name: str = "medinsight"
    log_level: str = "INFO"


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    engine: EngineConfig = EngineConfig()
    summary: SummaryConfig = SummaryConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
