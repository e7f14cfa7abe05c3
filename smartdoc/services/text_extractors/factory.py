"""
Text Extractor Factory.

Manages registration and retrieval of text extractors for different file formats.
"""
from pathlib import Path
from typing import Dict, Optional

from ...core.logging_config import get_logger
from .base import BaseTextExtractor
from .pdf_extractor import PDFExtractor
from .text_extractor import TextExtractor

logger = get_logger(__name__)


class TextExtractorFactory:
    """
    Registry of extractors keyed by file extension.

    Unknown extensions fall back to plain-text decoding, which is what the
    analyzers need for notes and other free-form uploads.
    """

    _extractors: Dict[str, BaseTextExtractor] = {}
    _initialized = False

    @classmethod
    def _initialize(cls):
        if cls._initialized:
            return
        cls._initialized = True
        cls.register(PDFExtractor())
        for extension, name in [
            (".txt", "TXT"),
            (".md", "Markdown"),
            (".markdown", "Markdown"),
            (".csv", "CSV"),
            (".json", "JSON"),
            (".html", "HTML"),
        ]:
            cls.register(TextExtractor(extension, name))

    @classmethod
    def register(cls, extractor: BaseTextExtractor):
        cls._extractors[extractor.file_extension] = extractor
        logger.debug(f"Registered extractor for {extractor.file_extension} ({extractor.format_name})")

    @classmethod
    def get_extractor(cls, filename: str) -> Optional[BaseTextExtractor]:
        cls._initialize()
        return cls._extractors.get(Path(filename).suffix.lower())

    @classmethod
    def extract_text(cls, filename: str, file_bytes: bytes) -> str:
        """
        Extract text from ``file_bytes`` using the extractor for ``filename``.

        Raises:
            FileProcessingError: If extraction fails or yields no text
        """
        extractor = cls.get_extractor(filename)
        if extractor is None:
            extractor = TextExtractor(Path(filename).suffix.lower() or ".bin", "Plain text")
        return extractor.extract(file_bytes)
