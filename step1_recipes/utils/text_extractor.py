#!/usr/bin/env python3
"""
Text Extractor - Per-page text layer of a PDF

Tries, in order:
1. pdfplumber - words with positions
2. PyMuPDF (fitz) - words with positions
3. PyPDF2 - plain text only (no positions)

Positions are converted to PDF space (origin bottom-left, y grows upwards) so
the layout reconstructor can sort lines by descending y.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..models import PageContent, TextFragment

logger = logging.getLogger(__name__)

try:
    import pdfplumber
    PDFPLUMBER_AVAILABLE = True
except ImportError:
    PDFPLUMBER_AVAILABLE = False
    logger.warning("pdfplumber not available. Install with: pip install pdfplumber")

try:
    import fitz  # PyMuPDF
    MUPDF_AVAILABLE = True
except ImportError:
    MUPDF_AVAILABLE = False
    logger.warning("PyMuPDF not available. Install with: pip install pymupdf")

try:
    import PyPDF2
    PYPDF2_AVAILABLE = True
except ImportError:
    PYPDF2_AVAILABLE = False
    logger.warning("PyPDF2 not available. Install with: pip install PyPDF2")


class PDFExtractionError(Exception):
    """The PDF could not be read at all (missing, corrupt, encrypted, ...)"""


class TextExtractor:
    """Extract per-page text and positioned fragments from a PDF"""

    def backends(self):
        backends = []
        if PDFPLUMBER_AVAILABLE:
            backends.append(('pdfplumber', self._extract_with_pdfplumber))
        if MUPDF_AVAILABLE:
            backends.append(('PyMuPDF', self._extract_with_mupdf))
        if PYPDF2_AVAILABLE:
            backends.append(('PyPDF2', self._extract_with_pypdf2))
        return backends

    def extract_pages(self, pdf_path: Path, first_page: int = 1,
                      last_page: Optional[int] = None) -> List[PageContent]:
        """
        Extract the pages of a PDF in document order

        Args:
            pdf_path: Path to PDF file
            first_page: First 1-based page to return
            last_page: Last 1-based page to return (None = through the end)

        Returns:
            List of PageContent

        Raises:
            PDFExtractionError: When no backend can read the file
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise PDFExtractionError(f"Failed to parse PDF: {pdf_path} does not exist")

        backends = self.backends()
        if not backends:
            raise PDFExtractionError("Failed to parse PDF: no PDF library installed")

        last_error: Optional[Exception] = None
        for name, method in backends:
            try:
                pages = method(pdf_path, first_page, last_page)
                logger.debug(f"Extracted {len(pages)} pages from {pdf_path.name} using {name}")
                return pages
            except Exception as e:
                logger.debug(f"{name} extraction failed for {pdf_path.name}: {e}")
                last_error = e

        raise PDFExtractionError(f"Failed to parse PDF {pdf_path.name}: {last_error}") from last_error

    @staticmethod
    def _in_range(page_number: int, first_page: int, last_page: Optional[int]) -> bool:
        return page_number >= first_page and (last_page is None or page_number <= last_page)

    def _extract_with_pdfplumber(self, pdf_path: Path, first_page: int,
                                 last_page: Optional[int]) -> List[PageContent]:
        pages = []
        with pdfplumber.open(pdf_path) as pdf:
            for page_number, page in enumerate(pdf.pages, start=1):
                if last_page is not None and page_number > last_page:
                    break
                if not self._in_range(page_number, first_page, last_page):
                    continue

                height = float(page.height)
                fragments = tuple(
                    TextFragment(
                        text=word['text'],
                        x=float(word['x0']),
                        y=height - float(word['bottom']),
                        width=float(word['x1']) - float(word['x0']),
                        height=float(word['bottom']) - float(word['top']),
                    )
                    for word in page.extract_words()
                )
                pages.append(PageContent(
                    page_number=page_number,
                    fragments=fragments or None,
                    text=page.extract_text() or '',
                ))
        return pages

    def _extract_with_mupdf(self, pdf_path: Path, first_page: int,
                            last_page: Optional[int]) -> List[PageContent]:
        pages = []
        doc = fitz.open(pdf_path)
        try:
            for page_number, page in enumerate(doc, start=1):
                if last_page is not None and page_number > last_page:
                    break
                if not self._in_range(page_number, first_page, last_page):
                    continue

                height = float(page.rect.height)
                # words: (x0, y0, x1, y1, text, block_no, line_no, word_no), origin top-left
                fragments = tuple(
                    TextFragment(text=w[4], x=float(w[0]), y=height - float(w[3]),
                                 width=float(w[2]) - float(w[0]), height=float(w[3]) - float(w[1]))
                    for w in page.get_text("words")
                )
                pages.append(PageContent(
                    page_number=page_number,
                    fragments=fragments or None,
                    text=page.get_text() or '',
                ))
        finally:
            doc.close()
        return pages

    def _extract_with_pypdf2(self, pdf_path: Path, first_page: int,
                             last_page: Optional[int]) -> List[PageContent]:
        pages = []
        with open(pdf_path, 'rb') as file:
            pdf_reader = PyPDF2.PdfReader(file)
            for page_number, page in enumerate(pdf_reader.pages, start=1):
                if last_page is not None and page_number > last_page:
                    break
                if not self._in_range(page_number, first_page, last_page):
                    continue
                pages.append(PageContent(page_number=page_number, text=page.extract_text() or ''))
        return pages
