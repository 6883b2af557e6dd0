#!/usr/bin/env python3
"""
Direction Extractor

1. Section-bounded: everything after a directions header
2. After-ingredients: directions header that follows the ingredients section
3. Line accumulation: lines after a directions header, joined into steps

Every result is renumbered "1. ...", "2. ..." in order.
"""

import re
import logging
from typing import Dict, List, Optional

from .field_classifiers import FieldClassifier, words_pattern
from .strategy_chain import run_strategies

logger = logging.getLogger(__name__)

# Split on inline "N. " markers or blank lines
STEP_SPLIT_PATTERN = re.compile(r'(?:^|(?<=\s))\d+\.\s+|\n\s*\n')
STEP_PREFIX_PATTERN = re.compile(r'^(?:step\s*)?\d+[.):]\s*', re.IGNORECASE)


def number_steps(steps: List[str]) -> List[str]:
    return [f"{i}. {step}" for i, step in enumerate(steps, start=1)]


class DirectionExtractor:
    """Find the ordered preparation steps of a page"""

    def __init__(self, classifier: FieldClassifier, settings: Dict):
        self.classifier = classifier
        direction_settings = settings.get('directions', {})
        self.min_step_length = direction_settings.get('min_step_length', 11)
        self.new_step_min_length = direction_settings.get('new_step_min_length', 21)

        ingredient_headers = words_pattern(classifier.ingredient_headers)
        direction_headers = words_pattern(classifier.direction_headers)
        self.section_re = re.compile(r'\b' + direction_headers + r'\b[:\s]*([\s\S]*)\Z', re.IGNORECASE)
        self.after_ingredients_re = re.compile(
            r'\b' + ingredient_headers + r'\b[\s\S]*?\b' + direction_headers + r'\b[:\s]*([\s\S]*)\Z',
            re.IGNORECASE
        )
        self.header_line_re = re.compile(r'^' + direction_headers + r'\b[:\s]*(.*)$', re.IGNORECASE)

        self.strategies = [
            ('section_bounded', self._from_section),
            ('after_ingredients', self._from_after_ingredients),
            ('line_accumulation', self._from_lines),
        ]

    def extract(self, text: str) -> List[str]:
        return run_strategies('directions', self.strategies, text) or []

    def parse_steps(self, section: str) -> List[str]:
        """
        Split a directions section into numbered steps

        Args:
            section: Text following a directions header

        Returns:
            Renumbered steps; macro lines and fragments of 10 chars or less are dropped
        """
        steps = []
        for segment in STEP_SPLIT_PATTERN.split(section or ''):
            step = ' '.join(segment.split())
            step = STEP_PREFIX_PATTERN.sub('', step).strip()
            if len(step) < self.min_step_length:
                continue
            if self.classifier.is_macro_line(step):
                continue
            steps.append(step)
        return number_steps(steps)

    # ---------------- strategies ----------------

    def _from_section(self, text: str) -> Optional[List[str]]:
        match = self.section_re.search(text or '')
        return self.parse_steps(match.group(1)) if match else None

    def _from_after_ingredients(self, text: str) -> Optional[List[str]]:
        match = self.after_ingredients_re.search(text or '')
        return self.parse_steps(match.group(1)) if match else None

    def _from_lines(self, text: str) -> Optional[List[str]]:
        steps: List[str] = []
        current = ''
        in_section = False

        for raw in (text or '').split('\n'):
            line = raw.strip()
            header = self.header_line_re.match(line)
            if header:
                in_section = True
                line = header.group(1).strip()
            if not in_section or not line:
                continue

            if len(line) >= self.new_step_min_length:
                if current:
                    steps.append(current)
                current = line
            else:
                current = f"{current} {line}".strip()

        if current:
            steps.append(current)

        steps = [STEP_PREFIX_PATTERN.sub('', s).strip() for s in steps]
        return number_steps([s for s in steps if s])
