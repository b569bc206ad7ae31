"""PDF text extraction for uploaded resumes and job descriptions."""

import io
import re
from typing import Optional

import PyPDF2
from PyPDF2.errors import PdfReadError

from interview_eval.config import get_settings
from interview_eval.models.document import DocumentMetadata, ParsedDocument
from interview_eval.utils.errors import ExtractionError
from interview_eval.utils.logging import get_logger

logger = get_logger("parser_service")


class ParserService:
    """
    Extract text from PDF files with PyPDF2.

    A document whose extracted text is shorter than ``min_text_length``
    characters is treated as unreadable (usually a scanned image).
    """

    def __init__(self, min_text_length: Optional[int] = None):
        """
        Initialize parser service.

        Args:
            min_text_length: Minimum stripped text length (defaults to settings.retrieval.min_extracted_chars)
        """
        self.min_text_length = (
            min_text_length
            if min_text_length is not None
            else get_settings().retrieval.min_extracted_chars
        )

    def extract_text(self, file_data: bytes, filename: Optional[str] = None) -> ParsedDocument:
        """
        Extract text and metadata from PDF bytes.

        Args:
            file_data: PDF file bytes
            filename: Optional filename for logging

        Returns:
            ParsedDocument with extracted text and metadata

        Raises:
            ExtractionError: If the PDF is unreadable or has too little text
        """
        filename = filename or "unknown"
        if not file_data:
            raise ExtractionError("No file uploaded", details={"filename": filename})

        try:
            pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_data))
            pages = list(pdf_reader.pages)
        except PdfReadError as e:
            raise ExtractionError(
                f"PDF file is corrupted or invalid: {str(e)}",
                details={"filename": filename},
            ) from e

        text_parts = []
        for page_num, page in enumerate(pages, start=1):
            try:
                page_text = page.extract_text() or ""
            except Exception as page_error:
                logger.warning(f"Failed to extract text from page {page_num} in {filename}: {page_error}")
                continue
            if page_text.strip():
                text_parts.append(page_text)

        full_text = "\n\n".join(text_parts)
        if len(full_text.strip()) < self.min_text_length:
            logger.warning(
                f"Extracted text too short: {filename}, chars={len(full_text.strip())}, "
                f"minimum={self.min_text_length}"
            )
            raise ExtractionError(
                details={"filename": filename, "character_count": len(full_text.strip())}
            )

        metadata = pdf_reader.metadata or {}
        word_count = len(re.findall(r"\b\w+\b", full_text))
        document_metadata = DocumentMetadata(
            page_count=len(pages),
            word_count=word_count,
            character_count=len(full_text),
            title=metadata.get("/Title"),
            author=metadata.get("/Author"),
        )

        logger.info(
            f"Successfully parsed PDF: {filename}, pages={len(pages)}, "
            f"words={word_count}, chars={len(full_text)}"
        )
        return ParsedDocument(text=full_text, metadata=document_metadata)
