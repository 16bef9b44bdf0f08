"""Rule-based extraction engine: regex batteries over decoded document text.

Lab and medication rules run on every document; imaging and pathology
rules run when ``DocumentStyleClassifier`` detects the matching style.
Any internal error is converted into a ``PartialExtraction`` so the engine
never raises past ``analyze``.
"""

from __future__ import annotations

import logging
import re

from medinsight.engines.classifier import DocumentStyle, DocumentStyleClassifier
from medinsight.engines.patterns import (
    BENIGN_KEYWORDS,
    DIAGNOSIS_SECTION,
    FINDINGS_SECTION,
    FRACTURE_KEYWORDS,
    IMPRESSION_SECTION,
    LAB_RULES,
    MALIGNANT_KEYWORDS,
    MASS_KEYWORDS,
    MEDICATION_PATTERN,
    NORMAL_STUDY_KEYWORDS,
    SEVERITY_TIERS,
    SPECIMEN_SECTION,
    LabRule,
)
from medinsight.models import (
    CompleteExtraction,
    Diagnosis,
    ExtractedData,
    ExtractionResult,
    Finding,
    FindingSeverity,
    LabFlag,
    LabValue,
    Medication,
    PartialExtraction,
)

log = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")

BASE_CONFIDENCE = 0.5
CONFIDENCE_CAP = 0.9


def detect_severity(text: str) -> FindingSeverity:
    """Map free text to a severity via the keyword tiers; first tier wins."""
    for severity, pattern in SEVERITY_TIERS:
        if pattern.search(text):
            return severity
    return FindingSeverity.LOW


def flag_lab_value(rule: LabRule, value: float) -> LabFlag:
    if rule.low is not None and value < rule.low:
        return LabFlag.LOW
    if rule.high is not None:
        if value > rule.high or (rule.high_inclusive and value == rule.high):
            return LabFlag.HIGH
    return LabFlag.NORMAL


def _parse_number(rule: LabRule, raw: str) -> float:
    match = _LEADING_NUMBER.match(raw)
    if match is None:
        raise ValueError(f"Unparseable {rule.name} value: {raw!r}")
    return float(match.group(0))


class RuleBasedExtractionEngine:
    """Pattern-matching engine for lab, imaging and pathology reports."""

    def __init__(
        self,
        classifier: DocumentStyleClassifier | None = None,
        *,
        max_summary_chars: int = 5000,
    ) -> None:
        self._classifier = classifier or DocumentStyleClassifier()
        self._max_summary_chars = max_summary_chars

    @property
    def engine_type(self) -> str:
        return "rules"

    async def analyze(
        self,
        content: bytes,
        file_name: str,
        declared_format: str,
    ) -> ExtractionResult:
        # PDF/DOCX/image decoding is out of scope; bytes are read as text.
        text = content.decode("utf-8", errors="replace")
        log.debug("Analyzing %s (%s, %d bytes)", file_name, declared_format, len(content))

        try:
            data = self.extract(text)
            return CompleteExtraction(
                extracted_data=data,
                confidence_score=self.calculate_confidence(data),
                summary_text=self.generate_summary(data, file_name),
            )
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            log.warning("Extraction of %s stopped early: %s", file_name, message)
            return PartialExtraction(
                extracted_data=ExtractedData(
                    findings=[Finding(category="error", description=message)]
                ),
                confidence_score=0.0,
                summary_text=self._clip(f"Analysis failed: {message}"),
                error_details=message[:2000],
            )

    # ── Extraction batteries ────────────────────────────────────────

    def extract(self, text: str) -> ExtractedData:
        """Run every applicable rule battery over *text*."""
        data = ExtractedData()
        styles = self._classifier.classify(text)

        data.lab_values.extend(self.extract_lab_values(text))

        if DocumentStyle.IMAGING in styles:
            data.findings.extend(self.extract_imaging_findings(text))

        if DocumentStyle.PATHOLOGY in styles:
            diagnoses, findings = self.extract_pathology_data(text)
            data.diagnoses.extend(diagnoses)
            data.findings.extend(findings)

        data.medications.extend(self.extract_medications(text))
        return data

    @staticmethod
    def extract_lab_values(text: str) -> list[LabValue]:
        values: list[LabValue] = []
        for rule in LAB_RULES:
            match = rule.pattern.search(text)
            if not match:
                continue
            raw = match.group(1)
            try:
                number = _parse_number(rule, raw)
            except ValueError as exc:
                # Only this analyte is dropped; the rest of the document stands.
                log.warning("Skipping lab value: %s", exc)
                continue
            values.append(
                LabValue(
                    name=rule.name,
                    value=raw,
                    unit=rule.unit,
                    reference_range=rule.reference_range,
                    flag=flag_lab_value(rule, number),
                )
            )
        return values

    @staticmethod
    def extract_imaging_findings(text: str) -> list[Finding]:
        findings: list[Finding] = []

        impression = IMPRESSION_SECTION.search(text)
        if impression and impression.group(1).strip():
            body = impression.group(1).strip()
            findings.append(
                Finding(category="Imaging Impression", description=body, severity=detect_severity(body))
            )

        section = FINDINGS_SECTION.search(text)
        if section and section.group(1).strip():
            body = section.group(1).strip()
            findings.append(
                Finding(category="Imaging Findings", description=body, severity=detect_severity(body))
            )

        if FRACTURE_KEYWORDS.search(text):
            findings.append(
                Finding(category="Structural", description="Fracture detected", severity=FindingSeverity.HIGH)
            )
        if NORMAL_STUDY_KEYWORDS.search(text):
            findings.append(
                Finding(
                    category="General",
                    description="Normal study with no acute findings",
                    severity=FindingSeverity.LOW,
                )
            )
        if MASS_KEYWORDS.search(text):
            findings.append(
                Finding(
                    category="Structural",
                    description="Mass or lesion identified",
                    severity=FindingSeverity.HIGH,
                )
            )
        return findings

    @staticmethod
    def extract_pathology_data(text: str) -> tuple[list[Diagnosis], list[Finding]]:
        diagnoses: list[Diagnosis] = []
        findings: list[Finding] = []

        section = DIAGNOSIS_SECTION.search(text)
        if section and section.group(1).strip():
            diagnoses.append(Diagnosis(description=section.group(1).strip(), confidence=0.85))

        specimen = SPECIMEN_SECTION.search(text)
        if specimen and specimen.group(1).strip():
            findings.append(
                Finding(
                    category="Specimen",
                    description=specimen.group(1).strip(),
                    severity=FindingSeverity.LOW,
                )
            )

        if MALIGNANT_KEYWORDS.search(text):
            diagnoses.append(Diagnosis(description="Malignant findings", confidence=0.9))
            findings.append(
                Finding(
                    category="Pathology",
                    description="Malignant cells identified",
                    severity=FindingSeverity.CRITICAL,
                )
            )

        if BENIGN_KEYWORDS.search(text):
            diagnoses.append(Diagnosis(description="Benign findings", confidence=0.95))
            findings.append(
                Finding(
                    category="Pathology",
                    description="Benign tissue confirmed",
                    severity=FindingSeverity.LOW,
                )
            )
        return diagnoses, findings

    @staticmethod
    def extract_medications(text: str) -> list[Medication]:
        return [
            Medication(name=m.group(1), dosage=m.group(2) or "unknown", frequency="unknown")
            for m in MEDICATION_PATTERN.finditer(text)
        ]

    # ── Scoring and summary ─────────────────────────────────────────

    @staticmethod
    def calculate_confidence(data: ExtractedData) -> float:
        score = BASE_CONFIDENCE
        if data.lab_values:
            score += 0.1
        if data.diagnoses:
            score += 0.15
        if data.medications:
            score += 0.05
        if data.findings:
            score += 0.1
        return round(min(score, CONFIDENCE_CAP), 4)

    def generate_summary(self, data: ExtractedData, file_name: str) -> str:
        parts = [f"Analysis of {file_name}:"]

        if data.lab_values:
            abnormal = [lab for lab in data.lab_values if lab.flag != LabFlag.NORMAL]
            if abnormal:
                parts.append(f"\n{len(abnormal)} abnormal lab value(s) detected.")
            else:
                parts.append(f"\nAll {len(data.lab_values)} lab values within normal range.")

        if data.diagnoses:
            parts.append(f"\n{len(data.diagnoses)} diagnosis/diagnoses identified.")

        if data.medications:
            parts.append(f"\n{len(data.medications)} medication(s) mentioned.")

        critical = [f for f in data.findings if f.severity == FindingSeverity.CRITICAL]
        if critical:
            parts.append(f"\nWARNING: {len(critical)} critical finding(s) require immediate attention.")

        return self._clip(" ".join(parts))

    def _clip(self, summary: str) -> str:
        return summary[: self._max_summary_chars]
