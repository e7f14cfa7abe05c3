"""
Plain Text Extractor.

Extracts text from plain text files (TXT, MD, CSV, ...).
"""
from .base import BaseTextExtractor


class TextExtractor(BaseTextExtractor):
    """Extractor for plain text files."""

    def extract(self, file_bytes: bytes) -> str:
        text_content = file_bytes.decode('utf-8', errors='ignore')
        self.validate_content(text_content)
        return text_content
