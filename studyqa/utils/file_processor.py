"""File processing utilities for extracting text from uploaded documents."""
import logging

import pypdf
import pytesseract
from PIL import Image

logger = logging.getLogger(__name__)


class FileProcessor:
    """Extract text content from PDFs (parsed) and raster images (OCR)."""

    PDF_TYPES = {'application/pdf', 'pdf'}
    IMAGE_TYPES = {'image/png', 'image/jpeg', 'image/jpg', 'png', 'jpeg', 'jpg'}

    def __init__(self, ocr_language: str = 'eng'):
        self.ocr_language = ocr_language

    def extract_text(self, file_path: str, media_type: str) -> str:
        """
        Extract text from a file.

        Args:
            file_path: Path to the file on disk
            media_type: Declared MIME type of the upload

        Returns:
            Extracted plain text

        Raises:
            ValueError: If the media type is not supported or extraction fails
        """
        media_type = (media_type or '').lower()

        if media_type in self.PDF_TYPES:
            return self._extract_from_pdf(file_path)
        elif media_type in self.IMAGE_TYPES:
            return self._extract_from_image(file_path)

        raise ValueError(f"Unsupported file type: {media_type}")

    def _extract_from_pdf(self, file_path: str) -> str:
        """Extract text from PDF file, one line per page."""
        text_parts = []

        try:
            with open(file_path, 'rb') as file:
                pdf_reader = pypdf.PdfReader(file)

                for page in pdf_reader.pages:
                    text_parts.append(page.extract_text() or '')
        except Exception as e:
            logger.warning("PDF extraction failed for %s: %s", file_path, e)
            raise ValueError(f"Failed to extract text from PDF: {str(e)}") from e

        return "\n".join(text_parts)

    def _extract_from_image(self, file_path: str) -> str:
        """Extract text from an image with Tesseract OCR."""
        try:
            with Image.open(file_path) as image:
                return pytesseract.image_to_string(image, lang=self.ocr_language)
        except Exception as e:
            logger.warning("OCR failed for %s: %s", file_path, e)
            raise ValueError(f"Failed to extract text from image: {str(e)}") from e

    @classmethod
    def is_supported(cls, media_type: str) -> bool:
        """Check if a media type can be extracted."""
        return (media_type or '').lower() in cls.PDF_TYPES | cls.IMAGE_TYPES
