"""
Text extraction for PDF and image BOM uploads.

Extractors share one interface (bytes + filename → raw text) so the line
parser downstream does not care where the text came from.

    simulated   - returns a fixed supplier sample (no real OCR yet)
    pdfplumber  - text layer of native PDFs
"""

import asyncio
from abc import ABC, abstractmethod
from io import BytesIO
from typing import Optional
import pdfplumber
import structlog

from config import settings
from exceptions import PDFParseError

logger = structlog.get_logger(__name__)

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "bmp", "webp", "tif", "tiff", "heic"}

SAMPLE_OCR_TEXT = """
1. Blue Jeans Size 32 - Qty 10 - Rs.850
2. White T-Shirt M - 15 pcs @ 350
3. Black Formal Shirt L x 8 - ₹750
4. Red Kurti Size S - 12 units - 450 INR
5. Navy Blue Polo XL - Quantity 6 - Rate 550
"""


class TextExtractor(ABC):
    """Turns an uploaded document into raw text."""

    name: str = "base"

    @abstractmethod
    def extract_text(self, data: bytes, filename: str) -> str:
        """
        Extract text from a document.

        Raises:
            PDFParseError: If no text can be extracted
        """

    async def extract_text_async(self, data: bytes, filename: str) -> str:
        """Run extraction off the event loop."""
        return await asyncio.to_thread(self.extract_text, data, filename)


class SimulatedOCRExtractor(TextExtractor):
    """
    Stand-in for OCR: ignores the document and returns SAMPLE_OCR_TEXT.
    """

    name = "simulated"

    def __init__(self, delay_seconds: float = 0, sample_text: str = SAMPLE_OCR_TEXT):
        self.delay_seconds = delay_seconds
        self.sample_text = sample_text

    def extract_text(self, data: bytes, filename: str) -> str:
        logger.info(
            "simulated_ocr_used",
            filename=filename,
            size_bytes=len(data)
        )
        return self.sample_text

    async def extract_text_async(self, data: bytes, filename: str) -> str:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return self.extract_text(data, filename)


class PdfPlumberExtractor(TextExtractor):
    """Text layer of native (non-scanned) PDFs."""

    name = "pdfplumber"

    def extract_text(self, data: bytes, filename: str) -> str:
        if not filename.lower().endswith(".pdf"):
            raise PDFParseError(
                message="Images need OCR, which is not configured",
                details={"filename": filename, "extractor": self.name}
            )

        try:
            all_text = ""
            with pdfplumber.open(BytesIO(data)) as pdf:
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        all_text += page_text + "\n"
        except Exception as e:
            logger.error("pdf_extraction_failed", filename=filename, error=str(e))
            raise PDFParseError(
                message=f"Failed to extract text from PDF: {str(e)}",
                details={"original_error": str(e)}
            )

        if not all_text.strip():
            raise PDFParseError(
                message="No text could be extracted from PDF (may be scanned image without OCR)",
                details={"pdf_size_bytes": len(data)}
            )

        logger.info(
            "pdf_text_extracted",
            filename=filename,
            text_length=len(all_text)
        )
        return all_text


def create_text_extractor(kind: str) -> TextExtractor:
    """Build the extractor named by BOM_TEXT_EXTRACTOR."""
    if kind == "pdfplumber":
        return PdfPlumberExtractor()
    return SimulatedOCRExtractor(delay_seconds=settings.ocr_simulated_delay_seconds)


# Singleton instance
_text_extractor: Optional[TextExtractor] = None


def get_text_extractor() -> TextExtractor:
    """Get or create the configured TextExtractor."""
    global _text_extractor
    if _text_extractor is None:
        _text_extractor = create_text_extractor(settings.bom_text_extractor)
    return _text_extractor
