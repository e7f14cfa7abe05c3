"""
Analyzers - pluggable document analysis (summary, confidence, conflicts).

To add a new analyzer:
1. Create a class inheriting from Analyzer
2. Implement analyze()
3. Register it in AnalyzerFactory
"""
from .base import AnalysisInput, AnalysisResult, Analyzer, ConflictFinding
from .factory import AnalyzerFactory
from .mock_analyzer import MockAnalyzer
from .openrouter_analyzer import OpenRouterAnalyzer

__all__ = [
    "AnalysisInput",
    "AnalysisResult",
    "Analyzer",
    "ConflictFinding",
    "AnalyzerFactory",
    "MockAnalyzer",
    "OpenRouterAnalyzer",
]
