"""
Analyzer Factory.

Selects the analyzer from configuration, falling back to MockAnalyzer
when no API key is available.
"""
from typing import Optional

from ...core.config import ANALYZER, OPENROUTER_API_KEY
from ...core.logging_config import get_logger
from .base import Analyzer
from .mock_analyzer import MockAnalyzer
from .openrouter_analyzer import OpenRouterAnalyzer

logger = get_logger(__name__)


class AnalyzerFactory:

    @staticmethod
    def get_analyzer(analyzer_type: Optional[str] = None) -> Analyzer:
        """
        Get the analyzer named by ``analyzer_type`` (defaults to ANALYZER).

        Returns:
            Analyzer instance (OpenRouterAnalyzer or MockAnalyzer)
        """
        analyzer_type = (analyzer_type or ANALYZER).lower()

        if analyzer_type == "openrouter":
            if OPENROUTER_API_KEY:
                logger.info("Using OpenRouter analyzer")
                return OpenRouterAnalyzer()
            logger.warning("OpenRouter API key not configured, using MockAnalyzer")
            return MockAnalyzer()
        elif analyzer_type == "mock":
            logger.info("Using MockAnalyzer (configured)")
            return MockAnalyzer()
        else:
            logger.warning(f"Unknown analyzer '{analyzer_type}', using MockAnalyzer")
            return MockAnalyzer()
