#!/usr/bin/env python3
"""
Ingredient Extractor

Strategies, in priority order:
1. Section-bounded: text between an ingredients header and a directions header
2. Grouped-by-section-header: cookbook layouts where measurements and
   descriptions run together under component headers ("Chicken: 2 lbs ...
   Sauce: 1/4 cup soy sauce ...") ahead of the first section keyword
3. Unbounded scan: every ingredient-like line of the page

extract_alternative() is the last-resort recovery pass the assembler runs
when the chain finds nothing.
"""

import re
import logging
from typing import Dict, List, Optional

from .field_classifiers import FieldClassifier, MACRO_WORDS, clean_ingredient, split_lines, words_pattern
from .strategy_chain import run_strategies

logger = logging.getLogger(__name__)

# Nutrition and yield boilerplate removed before grouped parsing
BOILERPLATE_PATTERNS = [
    re.compile(r'\b' + MACRO_WORDS + r'\s*[:\-]?\s*\d+(?:\.\d+)?\s*g?\b', re.IGNORECASE),
    re.compile(r'\d+(?:\.\d+)?\s*g?\s*' + MACRO_WORDS + r'\b', re.IGNORECASE),
    re.compile(r'\bper\s+serving\b', re.IGNORECASE),
    re.compile(r'\bmakes\s+\d+(?:\s+servings?)?', re.IGNORECASE),
    re.compile(r'\bserves\s+\d+', re.IGNORECASE),
]


class IngredientExtractor:
    """Find the ingredient lines of a page"""

    def __init__(self, classifier: FieldClassifier, rule_loader, settings: Dict):
        """
        Args:
            classifier: FieldClassifier sharing the same rule set
            rule_loader: RuleLoader instance
            settings: Extraction settings
        """
        self.classifier = classifier
        sections = rule_loader.get_section_keywords()
        self.grouped_min_length = settings.get('grouped_ingredients', {}).get('min_length', 4)

        ingredient_headers = words_pattern(classifier.ingredient_headers)
        direction_headers = words_pattern(classifier.direction_headers)
        self.section_re = re.compile(
            r'\b' + ingredient_headers + r'\b[:\s]*([\s\S]*?)(?=\b' + direction_headers + r'\b|\Z)',
            re.IGNORECASE
        )

        subsections = words_pattern(sections.get('subsection_headers', []))
        self.subsection_split_re = re.compile(r'\b' + subsections + r'\s*:', re.IGNORECASE)

        # Measurement token: number, optional fraction, optional unit, optional parentheses
        self.measurement_token_re = re.compile(
            r'(?<![\w./])(\(?\d+(?:\.\d+)?(?:\s*/\s*\d+)?(?:\s*' + classifier.unit_pattern + r'\b\.?)?\)?)',
            re.IGNORECASE
        )

        # A boundary word ends a description; hyphenated words ("low-fat") do not count
        boundaries = words_pattern(sections.get('boundary_words', []))
        self.boundary_re = re.compile(
            r'(?<![\w-])' + boundaries + r'\b(?!-)'
            r'|\b' + words_pattern(classifier.ingredient_headers + classifier.direction_headers) + r'\b'
            r'|\b\w+\s*:',
            re.IGNORECASE
        )

        self.strategies = [
            ('section_bounded', self._from_section),
            ('grouped_by_section_header', self._from_grouped_layout),
            ('unbounded_scan', self._from_scan),
        ]

    def extract(self, text: str) -> List[str]:
        return run_strategies('ingredients', self.strategies, text) or []

    def extract_alternative(self, text: str) -> List[str]:
        """Recovery pass over the whole page, skipping title/macro/direction lines"""
        return self._from_scan(text)

    # ---------------- strategies ----------------

    def _from_section(self, text: str) -> Optional[List[str]]:
        match = self.section_re.search(text or '')
        if not match:
            return None

        ingredients = []
        for line in split_lines(match.group(1)):
            if len(line) > 2 and self.classifier.is_ingredient_like(line):
                cleaned = clean_ingredient(line)
                if cleaned:
                    ingredients.append(cleaned)
        return ingredients

    def _from_grouped_layout(self, text: str) -> Optional[List[str]]:
        if not text:
            return None

        region = text
        first_section = self.classifier.structural_any_re.search(region)
        if first_section:
            region = region[:first_section.start()]

        if not self.subsection_split_re.search(region):
            return None

        lines = region.split('\n')
        if len(lines) > 1 and not any(ch.isdigit() for ch in lines[0]):
            region = '\n'.join(lines[1:])  # heading line

        for pattern in BOILERPLATE_PATTERNS:
            region = pattern.sub(' ', region)
        region = ' '.join(region.split())

        ingredients = []
        for segment in self.subsection_split_re.split(region):
            ingredients.extend(self._pair_measurements(segment))
        return ingredients

    def _pair_measurements(self, segment: str) -> List[str]:
        tokens = self.measurement_token_re.split(segment)
        results = []
        # tokens: [prefix, measurement, description, measurement, description, ...]
        for i in range(1, len(tokens), 2):
            measurement = tokens[i].strip()
            description = tokens[i + 1] if i + 1 < len(tokens) else ''
            boundary = self.boundary_re.search(description)
            if boundary:
                description = description[:boundary.start()]
            description = description.strip(' ,;.-')
            if not description:
                continue

            ingredient = f"{measurement} {description}".strip()
            if len(ingredient) >= self.grouped_min_length:
                results.append(ingredient)
        return results

    def _from_scan(self, text: str) -> List[str]:
        c = self.classifier
        ingredients = []
        for line in split_lines(text):
            if len(line) < 3:
                continue
            if c.is_structural_keyword(line) and len(line.split()) <= 2:
                continue
            if c.is_title_like(line) or c.is_macro_line(line) or c.is_direction_like(line):
                continue
            if c.is_ingredient_like(line):
                cleaned = clean_ingredient(line)
                if cleaned:
                    ingredients.append(cleaned)
        return ingredients
