"""Document style detection by keyword heuristics.

Classification is per call and stateless: nothing is remembered between
documents. A document can carry more than one style (e.g. a CT-guided
biopsy report is both imaging and pathology).
"""

from __future__ import annotations

import logging
from enum import Enum

from medinsight.engines.patterns import IMAGING_KEYWORDS, PATHOLOGY_KEYWORDS

log = logging.getLogger(__name__)


class DocumentStyle(str, Enum):
    """Rule batteries that apply to a document."""

    IMAGING = "imaging"
    PATHOLOGY = "pathology"


class DocumentStyleClassifier:
    """Selects which style-specific rule batteries to run on a text."""

    _STYLE_PATTERNS = (
        (DocumentStyle.IMAGING, IMAGING_KEYWORDS),
        (DocumentStyle.PATHOLOGY, PATHOLOGY_KEYWORDS),
    )

    def classify(self, text: str) -> frozenset[DocumentStyle]:
        styles = frozenset(
            style for style, pattern in self._STYLE_PATTERNS if pattern.search(text)
        )
        log.debug("Detected document styles: %s", sorted(s.value for s in styles))
        return styles
