"""Cross-cutting runtime hooks."""

from __future__ import annotations

from medinsight.hooks.logging_config import setup_logging

__all__ = ["setup_logging"]
