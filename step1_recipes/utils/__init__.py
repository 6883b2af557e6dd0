"""
Step 1 Utilities Module

Contains the PDF text layer used by the page processor.
"""

from .text_extractor import PDFExtractionError, TextExtractor

__all__ = ['PDFExtractionError', 'TextExtractor']
