#!/usr/bin/env python3
"""
Field Classifiers - Predicates deciding what a line of recipe text looks like

All predicates are pure: patterns are compiled once from the vocabulary rule
files when the classifier is built, and nothing is mutated afterwards.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Newlines, or the 3+ space runs that joined PDF text leaves between lines
LINE_SPLIT_PATTERN = re.compile(r'[\n\r]|\s{3,}')

BULLET_PREFIX_PATTERN = re.compile(r'^[-*•]\s*')
NUMBER_PREFIX_PATTERN = re.compile(r'^\d+\.(?!\d)\s*')

MACRO_WORDS = r'(?:calories|calorie|kcal|proteins|protein|carbohydrates|carbohydrate|carbs|carb|fats|fat|fibers|fiber|fibres|fibre)'


def words_pattern(words: Iterable[str]) -> str:
    """Alternation of escaped words, longest first so 'ingredients' wins over 'ingredient'"""
    unique = sorted({w.strip().lower() for w in words if w and w.strip()}, key=len, reverse=True)
    return '(?:' + '|'.join(re.escape(w) for w in unique) + ')' if unique else r'(?!x)x'


def split_lines(text: str) -> List[str]:
    """Split page text into trimmed, non-empty candidate lines"""
    if not text:
        return []
    return [part.strip() for part in LINE_SPLIT_PATTERN.split(text) if part and part.strip()]


def clean_ingredient(line: str) -> str:
    """Strip bullet and list-number prefixes"""
    line = BULLET_PREFIX_PATTERN.sub('', line)
    line = NUMBER_PREFIX_PATTERN.sub('', line)
    return line.strip()


class FieldClassifier:
    """Classify single lines as title / macro / ingredient / direction text"""

    def __init__(self, rule_loader, settings: Optional[Dict] = None):
        """
        Initialize classifier from rule files

        Args:
            rule_loader: RuleLoader instance
            settings: Extraction settings (defaults to rule_loader.get_extraction_settings())
        """
        self.settings = settings or rule_loader.get_extraction_settings()
        sections = rule_loader.get_section_keywords()
        vocabulary = rule_loader.get_ingredient_vocabulary()
        units = rule_loader.get_unit_rules().get('table', {})

        self.likeness = self.settings.get('ingredient_likeness', {})
        self.title_like = self.settings.get('title_like', {})

        self.ingredient_headers = list(sections.get('ingredient_headers', []))
        self.direction_headers = list(sections.get('direction_headers', []))
        structural = words_pattern(self.ingredient_headers + self.direction_headers)

        self.structural_start_re = re.compile(r'^\s*' + structural + r'\b', re.IGNORECASE)
        self.structural_any_re = re.compile(r'\b' + structural + r'\b', re.IGNORECASE)

        self.macro_keyword_re = re.compile(r'\b' + MACRO_WORDS + r'\b', re.IGNORECASE)
        self.macro_line_re = re.compile(
            r'\b' + MACRO_WORDS + r'\s*[:\-]?\s*\d|\d+(?:\.\d+)?\s*g?\s*' + MACRO_WORDS + r'\b',
            re.IGNORECASE
        )

        self.unit_pattern = words_pattern(units.keys())
        self.measurement_re = re.compile(r'\d+(?:\.\d+)?\s*' + self.unit_pattern + r'\b', re.IGNORECASE)
        self.food_word_re = re.compile(r'\b' + words_pattern(vocabulary.get('food_words', [])) + r'\b', re.IGNORECASE)
        self.cooking_verb_re = re.compile(r'\b' + words_pattern(vocabulary.get('cooking_verbs', [])) + r'\b', re.IGNORECASE)
        self.bullet_markers = tuple(vocabulary.get('bullet_markers', ['*', '-', '•']))

        self.navigation_re = re.compile(
            r'\b' + words_pattern(sections.get('navigation_phrases', [])) + r'\b|^\s*page\s+\d+\s*$',
            re.IGNORECASE
        )
        self.title_rejection_re = re.compile(
            r'\b' + words_pattern(sections.get('title_rejections', [])) + r'\b', re.IGNORECASE
        )

        self.numbered_marker_re = re.compile(r'^\d+[.)]\s')
        self.word_header_re = re.compile(r'^\w+:')
        self.bare_word_header_re = re.compile(r'^\w+:\s*$')

    # ---------------- predicates ----------------

    def is_macro_line(self, line: str) -> bool:
        """Nutrition keyword adjacent to a number"""
        return bool(line) and bool(self.macro_line_re.search(line))

    def is_structural_keyword(self, line: str) -> bool:
        """Line begins with (or equals) a section header"""
        return bool(line) and bool(self.structural_start_re.match(line))

    def contains_structural_keyword(self, line: str) -> bool:
        return bool(self.structural_any_re.search(line or ''))

    def contains_macro_keyword(self, line: str) -> bool:
        return bool(self.macro_keyword_re.search(line or ''))

    def is_navigation_text(self, line: str) -> bool:
        return bool(self.navigation_re.search(line or ''))

    def is_title_rejection(self, line: str) -> bool:
        """'per serving' / 'makes' boilerplate"""
        return bool(self.title_rejection_re.search(line or ''))

    def is_bare_word_header(self, line: str) -> bool:
        return bool(self.bare_word_header_re.match(line or ''))

    def is_ingredient_like(self, line: str) -> bool:
        """
        Composite ingredient gate (favors recall)

        Args:
            line: One trimmed line

        Returns:
            True when any ingredient signal is present
        """
        if not line or len(line) < self.likeness.get('min_length', 3):
            return False

        if line[0].isdigit():
            return True
        if self.measurement_re.search(line):
            return True
        if line.startswith(self.bullet_markers) or self.numbered_marker_re.match(line):
            return True
        if self.word_header_re.match(line):
            return True

        words = line.split()
        if self.food_word_re.search(line) and len(words) < self.likeness.get('food_word_max_words', 15):
            return True

        return (
            self.likeness.get('general_min_length', 5) <= len(line) < self.likeness.get('general_max_length', 150)
            and ' ' in line
            and len(words) < self.likeness.get('general_max_words', 20)
            and line.count(':') <= self.likeness.get('max_colons', 1)
        )

    def is_direction_like(self, line: str) -> bool:
        """Numbered/parenthesized step marker or a cooking verb"""
        if not line:
            return False
        return bool(self.numbered_marker_re.match(line) or self.cooking_verb_re.search(line))

    def is_title_like(self, line: str) -> bool:
        """Short, multi-word, digit-free text"""
        if not line:
            return False
        return (
            len(line) < self.title_like.get('max_length', 100)
            and ' ' in line
            and not any(ch.isdigit() for ch in line)
            and len(line.split(' ')) < self.title_like.get('max_words', 10)
        )
