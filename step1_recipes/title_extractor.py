#!/usr/bin/env python3
"""
Title Extractor

1. First qualifying line of the page
2. Leading words of the page, up to the first section keyword
"""

import logging
import string
from typing import Dict, List, Optional, Tuple

from .field_classifiers import FieldClassifier, split_lines
from .strategy_chain import run_strategies

logger = logging.getLogger(__name__)


class TitleExtractor:
    """Find the recipe title on a page"""

    def __init__(self, classifier: FieldClassifier, settings: Dict):
        self.classifier = classifier
        self.title_settings = settings.get('title', {})
        self.min_length = self.title_settings.get('min_length', 5)
        self.max_length = self.title_settings.get('max_length', 100)
        self.fallback_max_words = self.title_settings.get('fallback_max_words', 8)
        self.fallback_min_words = self.title_settings.get('fallback_min_words', 2)

        # Section headers that end the leading-words fallback; multi-word
        # headers only stop it as a whole phrase ("ingredient list", not "list")
        headers = [h.lower().split() for h in classifier.ingredient_headers + classifier.direction_headers]
        self.section_tokens = {h[0] for h in headers if len(h) == 1}
        self.section_phrases = [tuple(h) for h in headers if len(h) > 1]

        self.strategies = [
            ('first_qualifying_line', self._from_lines),
            ('leading_words', self._from_leading_words),
        ]

    def extract(self, text: str) -> Optional[str]:
        return run_strategies('title', self.strategies, text)

    def is_title_candidate(self, line: str) -> bool:
        c = self.classifier
        return bool(
            line
            and not c.contains_structural_keyword(line)
            and not c.contains_macro_keyword(line)
            and not c.is_title_rejection(line)
            and not c.is_navigation_text(line)
            and self.min_length < len(line) < self.max_length
            and not line[0].isdigit()
            and not c.is_bare_word_header(line)
            and len(line.split()) > 1
        )

    def _from_lines(self, text: str) -> Optional[str]:
        for line in split_lines(text):
            if self.is_title_candidate(line):
                return line
        return None

    def _from_leading_words(self, text: str) -> Optional[str]:
        words: List[str] = []
        tokens: List[str] = []
        for word in (text or '').split():
            token = word.strip(string.punctuation).lower()
            if token in self.section_tokens:
                break
            phrase = self._phrase_ending_at(tokens + [token])
            if phrase:
                # Drop the words of the phrase already taken
                del words[len(words) - (len(phrase) - 1):]
                break
            words.append(word)
            tokens.append(token)
            if len(words) >= self.fallback_max_words:
                break

        if len(words) >= self.fallback_min_words:
            return ' '.join(words)
        return None

    def _phrase_ending_at(self, tokens: List[str]) -> Optional[Tuple[str, ...]]:
        for phrase in self.section_phrases:
            if tuple(tokens[-len(phrase):]) == phrase:
                return phrase
        return None
