"""Regex tables for rule-based extraction.

Used by ``RuleBasedExtractionEngine`` and ``DocumentStyleClassifier``.
All patterns are case-insensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from medinsight.models import FindingSeverity

# ── Document style keywords ──────────────────────────────────────────

IMAGING_KEYWORDS: Pattern[str] = re.compile(
    r"x-ray|\bct\b|\bmri\b|ultrasound|imaging|radiology", re.IGNORECASE
)
PATHOLOGY_KEYWORDS: Pattern[str] = re.compile(
    r"pathology|biopsy|histology|cytology|specimen", re.IGNORECASE
)


# ── Lab analytes ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class LabRule:
    """One named analyte and the thresholds used to flag it.

    ``reference_range`` is display text; flags come from ``low``/``high``.
    A value below ``low`` is low; a value above ``high`` (or equal to it
    when ``high_inclusive``) is high.
    """

    name: str
    pattern: Pattern[str]
    unit: str
    reference_range: str
    low: Optional[float] = None
    high: Optional[float] = None
    high_inclusive: bool = False


LAB_RULES: list[LabRule] = [
    LabRule(
        name="Hemoglobin",
        pattern=re.compile(r"(?:hemoglobin|hgb|hb)[:\s]+([0-9.]+)\s*(?:g/dl)?", re.IGNORECASE),
        unit="g/dL",
        reference_range="13.5-17.5",
        low=13.5,
        high=17.5,
    ),
    LabRule(
        name="Glucose",
        pattern=re.compile(r"(?:glucose|blood sugar)[:\s]+([0-9.]+)\s*(?:mg/dl)?", re.IGNORECASE),
        unit="mg/dL",
        reference_range="70-100",
        low=70.0,
        high=125.0,
    ),
    LabRule(
        name="Total Cholesterol",
        pattern=re.compile(r"(?:total cholesterol|cholesterol)[:\s]+([0-9.]+)\s*(?:mg/dl)?", re.IGNORECASE),
        unit="mg/dL",
        reference_range="<200",
        high=200.0,
        high_inclusive=True,
    ),
    LabRule(
        name="HDL Cholesterol",
        pattern=re.compile(r"hdl[:\s]+([0-9.]+)\s*(?:mg/dl)?", re.IGNORECASE),
        unit="mg/dL",
        reference_range=">40",
        low=40.0,
    ),
    LabRule(
        name="LDL Cholesterol",
        pattern=re.compile(r"ldl[:\s]+([0-9.]+)\s*(?:mg/dl)?", re.IGNORECASE),
        unit="mg/dL",
        reference_range="<100",
        high=100.0,
        high_inclusive=True,
    ),
    LabRule(
        name="WBC",
        pattern=re.compile(r"(?:wbc|white blood cell)[:\s]+([0-9.]+)\s*(?:k/ul)?", re.IGNORECASE),
        unit="K/uL",
        reference_range="4.5-11.0",
        low=4.5,
        high=11.0,
    ),
]


# ── Severity tiers (first match wins) ────────────────────────────────

SEVERITY_TIERS: list[tuple[FindingSeverity, Pattern[str]]] = [
    (
        FindingSeverity.CRITICAL,
        re.compile(r"critical|emergency|urgent|severe|malignant|cancer", re.IGNORECASE),
    ),
    (
        FindingSeverity.HIGH,
        re.compile(r"abnormal|elevated|decreased|fracture|mass|lesion", re.IGNORECASE),
    ),
    (
        FindingSeverity.MEDIUM,
        re.compile(r"moderate|mild|borderline", re.IGNORECASE),
    ),
]


# ── Section capture ──────────────────────────────────────────────────

IMPRESSION_SECTION = re.compile(r"impression[:\s]+(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL)
FINDINGS_SECTION = re.compile(
    r"findings[:\s]+(.*?)(?:\n\n|impression|\Z)", re.IGNORECASE | re.DOTALL
)
DIAGNOSIS_SECTION = re.compile(r"diagnosis[:\s]+(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL)
SPECIMEN_SECTION = re.compile(r"specimen[:\s]+(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL)


# ── Fixed keyword findings ───────────────────────────────────────────

FRACTURE_KEYWORDS = re.compile(r"fracture|broken|displaced", re.IGNORECASE)
NORMAL_STUDY_KEYWORDS = re.compile(r"normal study|no acute findings|unremarkable", re.IGNORECASE)
MASS_KEYWORDS = re.compile(r"mass|lesion|tumor", re.IGNORECASE)
MALIGNANT_KEYWORDS = re.compile(r"malignant|carcinoma|cancer|metastatic", re.IGNORECASE)
BENIGN_KEYWORDS = re.compile(r"benign|non-malignant|negative for malignancy", re.IGNORECASE)


# ── Medications ──────────────────────────────────────────────────────

MEDICATION_VOCABULARY: tuple[str, ...] = (
    "aspirin",
    "acetaminophen",
    "ibuprofen",
    "metformin",
    "lisinopril",
    "atorvastatin",
    "levothyroxine",
)

MEDICATION_PATTERN = re.compile(
    r"\b(" + "|".join(MEDICATION_VOCABULARY) + r")\s+([0-9]+\s*mg)?",
    re.IGNORECASE,
)
