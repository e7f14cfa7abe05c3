"""
Base Analyzer Interface.

An analyzer reads one document (plus the owner's other analyzed documents)
and produces a summary, a confidence score and zero or more conflicts.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

CONFLICT_TYPES = ("policy", "compliance", "ambiguity")
SEVERITIES = ("low", "medium", "high")


@dataclass(frozen=True)
class AnalysisInput:
    id: str
    name: str
    type: str
    text: str


@dataclass(frozen=True)
class ConflictFinding:
    type: str
    severity: str
    description: str
    recommendation: str
    documents: List[str]


@dataclass
class AnalysisResult:
    summary: str
    confidence: float
    conflicts: List[ConflictFinding] = field(default_factory=list)


class Analyzer(ABC):
    """
    Abstract base class for analyzers.

    Implementations are synchronous; the analysis service runs them in an
    executor with a timeout.
    """

    name = "analyzer"

    @abstractmethod
    def analyze(self, document: AnalysisInput, corpus: List[AnalysisInput]) -> AnalysisResult:
        """
        Analyze ``document`` against ``corpus``.

        Args:
            document: The document being analyzed
            corpus: The owner's other analyzed documents

        Returns:
            AnalysisResult; every finding references ``document.id`` and may
            reference documents from ``corpus``

        Raises:
            AnalysisError: if the analysis cannot be completed
        """
        pass
