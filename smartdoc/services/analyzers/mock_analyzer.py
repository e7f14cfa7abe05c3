"""
Mock Analyzer.

Deterministic, rule-based analysis for development, tests and fallback
when no LLM key is configured. Does not make any API calls.
"""
import re
from typing import Dict, List, Tuple

from ...core.logging_config import get_logger
from .base import AnalysisInput, AnalysisResult, Analyzer, ConflictFinding

logger = get_logger(__name__)

# "Notice period: 30 days" on its own line
TERM_PATTERN = re.compile(
    r"^\s*(?P<term>[A-Za-z][A-Za-z /\-]{1,60}?)\s*:\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>[A-Za-z%]+)?\s*$",
    re.MULTILINE
)
SSN_PATTERN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")
VAGUE_PHRASES = (
    "as appropriate",
    "as needed",
    "reasonable",
    "may be",
    "to be determined",
    "tbd",
    "from time to time",
    "at the discretion",
)
BINDING_TYPES = {"policy", "contract"}


def _normalize_unit(unit: str) -> str:
    unit = (unit or "").lower()
    if unit == "percent":
        return "%"
    return unit[:-1] if unit.endswith("s") and len(unit) > 1 else unit


def extract_terms(text: str) -> Dict[str, Tuple[float, str]]:
    """Map each ``term: value unit`` line to its value; first occurrence wins."""
    terms: Dict[str, Tuple[float, str]] = {}
    for match in TERM_PATTERN.finditer(text):
        term = " ".join(match.group("term").lower().split())
        if term not in terms:
            terms[term] = (float(match.group("value")), _normalize_unit(match.group("unit")))
    return terms


def _summarize(document: AnalysisInput) -> str:
    sentences = re.split(r"(?<=[.!?])\s+", " ".join(document.text.split()))
    summary = " ".join(sentences[:2]).strip()
    if len(summary) > 300:
        summary = summary[:297].rstrip() + "..."
    return summary or f"{document.name} contains no readable text."


def _format_value(value: float, unit: str) -> str:
    number = int(value) if value.is_integer() else value
    return f"{number} {unit}".strip()


class MockAnalyzer(Analyzer):
    """
    Rule-based analyzer.

    - policy: the same ``term: N unit`` line carries different values in two
      documents (high when both are policies/contracts, medium otherwise)
    - compliance: unmasked Social Security numbers
    - ambiguity: vague phrases such as "as appropriate" or "TBD"
    """

    name = "mock"

    def analyze(self, document: AnalysisInput, corpus: List[AnalysisInput]) -> AnalysisResult:
        findings: List[ConflictFinding] = []
        findings.extend(self._policy_conflicts(document, corpus))
        findings.extend(self._compliance_gaps(document))
        findings.extend(self._ambiguities(document))

        word_count = len(document.text.split())
        confidence = round(min(0.95, 0.55 + word_count / 2000), 2)

        logger.debug(f"Mock analysis of {document.id}: {len(findings)} findings, confidence {confidence}")
        return AnalysisResult(summary=_summarize(document), confidence=confidence, conflicts=findings)

    def _policy_conflicts(self, document: AnalysisInput, corpus: List[AnalysisInput]) -> List[ConflictFinding]:
        own_terms = extract_terms(document.text)
        if not own_terms:
            return []

        findings = []
        for other in corpus:
            if other.id == document.id:
                continue
            other_terms = extract_terms(other.text)
            for term, (value, unit) in own_terms.items():
                if term not in other_terms:
                    continue
                other_value, other_unit = other_terms[term]
                if (value, unit) == (other_value, other_unit):
                    continue
                binding = document.type in BINDING_TYPES and other.type in BINDING_TYPES
                findings.append(ConflictFinding(
                    type="policy",
                    severity="high" if binding else "medium",
                    description=(
                        f"'{term}' is {_format_value(value, unit)} in {document.name} "
                        f"but {_format_value(other_value, other_unit)} in {other.name}"
                    ),
                    recommendation=f"Align '{term}' across both documents or state which one takes precedence.",
                    documents=[document.id, other.id]
                ))
        return findings

    def _compliance_gaps(self, document: AnalysisInput) -> List[ConflictFinding]:
        matches = SSN_PATTERN.findall(document.text)
        if not matches:
            return []
        return [ConflictFinding(
            type="compliance",
            severity="high",
            description=f"{document.name} contains {len(matches)} unmasked Social Security number(s)",
            recommendation="Redact or mask personal identifiers before sharing this document.",
            documents=[document.id]
        )]

    def _ambiguities(self, document: AnalysisInput) -> List[ConflictFinding]:
        lowered = document.text.lower()
        found = [phrase for phrase in VAGUE_PHRASES if re.search(rf"\b{re.escape(phrase)}\b", lowered)]
        if not found:
            return []
        return [ConflictFinding(
            type="ambiguity",
            severity="medium" if len(found) >= 3 else "low",
            description=f"{document.name} uses vague language: {', '.join(found)}",
            recommendation="Replace vague wording with concrete obligations, owners and deadlines.",
            documents=[document.id]
        )]
