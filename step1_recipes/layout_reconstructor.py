#!/usr/bin/env python3
"""
Layout Reconstructor - Order positioned text fragments into reading-order lines

The glyph stream of a PDF page has no guaranteed reading order, and every
downstream extractor is order-sensitive. Fragments are bucketed into lines by
vertical proximity, lines are sorted top-to-bottom (descending y, PDF origin is
bottom-left) and fragments left-to-right.
"""

import re
import logging
from typing import Iterable, List

from .models import TextFragment

logger = logging.getLogger(__name__)

_INLINE_WHITESPACE = re.compile(r'[ \t\f\v\u00a0]+')


class Line:
    """Fragments sharing an approximate vertical position"""

    def __init__(self, first: TextFragment):
        self.y = first.y  # representative y: the first fragment's
        self.fragments: List[TextFragment] = [first]

    def accepts(self, fragment: TextFragment, tolerance: float) -> bool:
        return abs(fragment.y - self.y) <= tolerance

    def text(self) -> str:
        ordered = sorted(self.fragments, key=lambda f: f.x)
        return ' '.join(f.text.strip() for f in ordered if f.text.strip()).strip()


class LayoutReconstructor:
    """Rebuild reading-order lines from the fragments of one page"""

    def __init__(self, tolerance: float = 5.0):
        """
        Args:
            tolerance: Max vertical distance (PDF units) between a fragment and a line's y
        """
        self.tolerance = tolerance

    def group_lines(self, fragments: Iterable[TextFragment]) -> List[Line]:
        """Bucket fragments into lines, top-to-bottom"""
        lines: List[Line] = []
        for fragment in fragments:
            for line in lines:
                if line.accepts(fragment, self.tolerance):
                    line.fragments.append(fragment)
                    break
            else:
                lines.append(Line(fragment))

        lines.sort(key=lambda line: line.y, reverse=True)
        return lines

    def reconstruct(self, fragments: Iterable[TextFragment]) -> List[str]:
        """
        Convert fragments into ordered line strings

        Args:
            fragments: Fragments of one page, in any order

        Returns:
            Non-empty line strings in reading order
        """
        lines = [line.text() for line in self.group_lines(fragments)]
        lines = [line for line in lines if line]
        logger.debug(f"Reconstructed {len(lines)} lines")
        return lines

    def reconstruct_text(self, fragments: Iterable[TextFragment]) -> str:
        return '\n'.join(self.reconstruct(fragments))


def normalize_page_text(text: str) -> str:
    """
    Fallback when positions are unavailable: collapse runs of spaces within
    each line, keep the source line breaks, drop blank lines at the edges.
    """
    if not text:
        return ''
    lines = [_INLINE_WHITESPACE.sub(' ', line).strip() for line in text.splitlines()]
    return '\n'.join(lines).strip()
