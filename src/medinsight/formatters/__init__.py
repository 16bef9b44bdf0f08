"""Output formatters for rendering summaries and analysis records.

Usage::

    from medinsight.formatters import JSONFormatter

    json_bytes = JSONFormatter().format(summary)
"""

from __future__ import annotations

from medinsight.formatters.json_formatter import JSONFormatter

__all__ = ["JSONFormatter"]
