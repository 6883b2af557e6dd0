#!/usr/bin/env python3
"""
PDF Processor - Turn a recipe PDF into RecipeRecords, one candidate per page

Pages are processed in order and independently: a failure on one page is
logged and the page skipped, only an unreadable file aborts the run.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .layout_reconstructor import LayoutReconstructor, normalize_page_text
from .models import PageContent, RecipeRecord
from .recipe_assembler import RecipeAssembler
from .utils.text_extractor import PDFExtractionError, TextExtractor

logger = logging.getLogger(__name__)

__all__ = ['PDFProcessor', 'PDFExtractionError']


class PDFProcessor:
    """Process recipe PDF files"""

    def __init__(self, rule_loader, skip_pages: Optional[int] = None,
                 text_extractor: Optional[TextExtractor] = None):
        """
        Initialize PDF processor

        Args:
            rule_loader: RuleLoader instance
            skip_pages: Leading pages to ignore (overrides extraction.skip_leading_pages)
            text_extractor: PDF text layer (defaults to TextExtractor())
        """
        self.rule_loader = rule_loader
        self.settings = rule_loader.get_extraction_settings()

        self.skip_pages = skip_pages if skip_pages is not None else int(self.settings.get('skip_leading_pages') or 0)
        if self.skip_pages < 0:
            raise ValueError(f"skip_pages must be >= 0, got {self.skip_pages}")
        self.max_pages = self.settings.get('max_pages')
        self.min_page_chars = self.settings.get('min_page_chars', 50)

        self.text_extractor = text_extractor or TextExtractor()
        self.reconstructor = LayoutReconstructor(tolerance=float(self.settings.get('line_tolerance', 5.0)))
        self.assembler = RecipeAssembler(rule_loader, self.settings)

    def _page_range(self):
        first_page = self.skip_pages + 1
        last_page = self.skip_pages + int(self.max_pages) if self.max_pages else None
        return first_page, last_page

    def _load_pages(self, pdf_path: Path) -> List[PageContent]:
        first_page, last_page = self._page_range()
        pages = self.text_extractor.extract_pages(pdf_path, first_page=first_page, last_page=last_page)
        # Extractors may ignore the range (e.g. test doubles); enforce it here
        return [
            p for p in pages
            if p.page_number >= first_page and (last_page is None or p.page_number <= last_page)
        ]

    def page_text(self, page: PageContent) -> str:
        """Reading-order text of a page (layout reconstruction when positions are known)"""
        if page.fragments:
            return self.reconstructor.reconstruct_text(page.fragments)
        return normalize_page_text(page.text)

    def process_page(self, page: PageContent) -> Optional[RecipeRecord]:
        text = self.page_text(page)
        if len(' '.join(text.split())) <= self.min_page_chars:
            logger.debug(f"Page {page.page_number}: too little text ({len(text)} chars), skipped")
            return None
        return self.assembler.assemble(text, page.page_number)

    def process_file(self, pdf_path: Path) -> List[RecipeRecord]:
        """
        Extract recipes from a PDF file

        Args:
            pdf_path: Path to PDF file

        Returns:
            Recipes in ascending page order (empty when no page qualifies)

        Raises:
            PDFExtractionError: When the file cannot be read
        """
        pdf_path = Path(pdf_path)
        logger.info(f"Processing PDF: {pdf_path.name}")

        pages = self._load_pages(pdf_path)

        recipes: List[RecipeRecord] = []
        for page in pages:
            try:
                recipe = self.process_page(page)
            except Exception as e:
                logger.warning(f"Page {page.page_number} of {pdf_path.name} skipped: {e}", exc_info=True)
                continue
            if recipe:
                recipes.append(recipe)

        logger.info(f"Parsed {len(recipes)} recipes from {len(pages)} pages of {pdf_path.name}")
        return recipes

    def dump_raw_text(self, pdf_path: Path) -> List[Dict[str, Any]]:
        """
        Per-page reconstructed text, for tuning the rule files on a new cookbook

        Args:
            pdf_path: Path to PDF file

        Returns:
            One dict per page: page_number, text, line_count, char_count, has_positions
        """
        pages = self._load_pages(Path(pdf_path))
        dump = []
        for page in pages:
            text = self.page_text(page)
            dump.append({
                'page_number': page.page_number,
                'text': text,
                'line_count': len(text.splitlines()) if text else 0,
                'char_count': len(text),
                'has_positions': bool(page.fragments),
            })
        return dump
