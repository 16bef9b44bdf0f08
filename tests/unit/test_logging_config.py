"""Tests for setup_logging()."""

from __future__ import annotations

import logging

import structlog

from medinsight.core.config import ObservabilityConfig
from medinsight.hooks.logging_config import setup_logging


def test_routes_root_logger_through_structlog():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(ObservabilityConfig(service_name="medinsight-test", log_level="debug"))

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.DEBUG
        assert structlog.contextvars.get_contextvars()["service"] == "medinsight-test"
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("medinsight").setLevel(logging.NOTSET)
        structlog.contextvars.clear_contextvars()
