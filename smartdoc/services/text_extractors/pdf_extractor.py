"""
PDF Text Extractor.

Extracts text from PDF files using pypdf library.
"""
import io

from pypdf import PdfReader

from ...api.exceptions import FileProcessingError
from ...core.logging_config import get_logger
from .base import BaseTextExtractor

logger = get_logger(__name__)


class PDFExtractor(BaseTextExtractor):
    """Extractor for PDF files."""

    def __init__(self):
        super().__init__(".pdf", "PDF")

    def extract(self, file_bytes: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            text_content = ""

            for page in reader.pages:
                page_text = page.extract_text()
                if page_text:
                    text_content += page_text + "\n"
        except Exception as e:
            logger.error(f"Error extracting text from PDF: {e}", exc_info=True)
            raise FileProcessingError(f"Error extracting text from PDF: {e}") from e

        self.validate_content(text_content)
        return text_content
