"""Extraction engine factory: resolves the engine from config."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from medinsight.engines.protocols import IExtractionEngine
from medinsight.engines.rule_engine import RuleBasedExtractionEngine

if TYPE_CHECKING:
    from medinsight.core.config import AppSettings

log = logging.getLogger(__name__)


def create_extraction_engine(settings: AppSettings) -> IExtractionEngine:
    """Create an extraction engine based on settings.

    When ``settings.engine.backend`` is ``"rules"``, returns the built-in
    :class:`RuleBasedExtractionEngine`.

    When it's a dotted path like ``mypackage.engines:LLMEngine``, imports
    and instantiates the external class, passing ``settings`` to the
    constructor.

    Raises:
        ImportError: If the dotted-path class cannot be found.
        TypeError: If the resolved object is not callable or the instance
            does not satisfy :class:`IExtractionEngine`.
    """
    backend_spec = settings.engine.backend

    if backend_spec == "rules":
        log.info("Using built-in RuleBasedExtractionEngine")
        return RuleBasedExtractionEngine(max_summary_chars=settings.engine.max_summary_chars)

    log.info("Loading external extraction engine: %s", backend_spec)
    cls = _import_dotted_path(backend_spec)

    if not callable(cls):
        raise TypeError(
            f"Extraction engine {backend_spec!r} resolved to {cls!r}, which is not callable"
        )

    engine = cls(settings)
    if not isinstance(engine, IExtractionEngine):
        raise TypeError(
            f"Extraction engine {backend_spec!r} does not implement IExtractionEngine"
        )
    return engine


def _import_dotted_path(dotted: str) -> Any:
    """Import ``module.path:ClassName`` or ``module.path.attr``."""
    if ":" in dotted:
        module_path, obj_name = dotted.rsplit(":", 1)
    elif "." in dotted:
        module_path, obj_name = dotted.rsplit(".", 1)
    else:
        return importlib.import_module(dotted)

    mod = importlib.import_module(module_path)
    return getattr(mod, obj_name)
