"""
Base Text Extractor Interface.

All text extractors must inherit from this base class and implement
the extract() method.
"""
from abc import ABC, abstractmethod

from ...api.exceptions import FileProcessingError


class BaseTextExtractor(ABC):
    """
    Abstract base class for text extractors.

    Each file format has its own extractor class that inherits from this
    base class and implements the extract() method.
    """

    def __init__(self, file_extension: str, format_name: str):
        """
        Args:
            file_extension: File extension (e.g., '.pdf', '.txt')
            format_name: Human-readable format name (e.g., 'PDF', 'TXT')
        """
        self.file_extension = file_extension.lower()
        self.format_name = format_name

    @abstractmethod
    def extract(self, file_bytes: bytes) -> str:
        """
        Extract text from file bytes.

        Raises:
            FileProcessingError: If extraction fails or yields no text
        """
        pass

    def validate_content(self, text_content: str) -> None:
        """Reject empty extraction results."""
        if not text_content or not text_content.strip():
            raise FileProcessingError(
                f"{self.format_name} file appears to be empty or contains no extractable text"
            )
