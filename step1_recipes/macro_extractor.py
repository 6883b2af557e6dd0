#!/usr/bin/env python3
"""
Macro Extractor - Calories / protein / carbs / fat / fiber from page text

Patterns come from 20_macro_patterns.yaml. For each macro the variants are
tried in order (number_first, label_first, abbreviation) and the first match
wins.

Nutrition blocks are written either label-first ("Calories: 165 Protein 31g")
or number-first ("165 calories, 31g protein"). In a label-first text the
number before a label belongs to the previous label, so a number_first hit
preceded by a label is skipped ("Calories: 165 Protein 31g" must not give
protein=165).
"""

import re
import logging
from typing import Dict, List, Optional, Pattern

from .field_classifiers import MACRO_WORDS
from .models import MACRO_KEYS

logger = logging.getLogger(__name__)

VARIANT_ORDER = ('number_first', 'label_first', 'abbreviation')

_LABEL = r'\b' + MACRO_WORDS + r'\b'
_NUMBER = r'\d+(?:\.\d+)?'
LABEL_FIRST_PROBE = re.compile(_LABEL + r'\s*[:\-]?\s*' + _NUMBER, re.IGNORECASE)
NUMBER_FIRST_PROBE = re.compile(_NUMBER + r'\s*g?\s*(?:of\s+)?' + _LABEL, re.IGNORECASE)


def is_label_first(text: str) -> bool:
    """True when the first label/number pair of the text puts the label first"""
    label_first = LABEL_FIRST_PROBE.search(text)
    if not label_first:
        return False
    number_first = NUMBER_FIRST_PROBE.search(text)
    return number_first is None or label_first.start() < number_first.start()


class MacroExtractor:
    """Extract nutrition values from free text"""

    def __init__(self, rule_loader):
        """
        Compile macro patterns once

        Args:
            rule_loader: RuleLoader instance
        """
        rules = rule_loader.get_macro_patterns()
        self.patterns: Dict[str, List[tuple]] = {}

        for macro in MACRO_KEYS:
            variants = rules.get(macro) or {}
            compiled = []
            for variant in VARIANT_ORDER:
                for pattern in variants.get(variant) or []:
                    try:
                        compiled.append((variant, re.compile(pattern, re.IGNORECASE)))
                    except re.error as e:
                        logger.warning(f"Invalid {macro} {variant} pattern '{pattern}': {e}")
            self.patterns[macro] = compiled

        guard = rules.get('label_guard')
        self.label_guard: Optional[Pattern] = re.compile(guard, re.IGNORECASE) if guard else None

    def extract(self, text: str) -> Dict[str, float]:
        """
        Args:
            text: Page text

        Returns:
            Dict of found macros only (absent means not found, never 0)
        """
        macros: Dict[str, float] = {}
        if not text:
            return macros

        guarded = is_label_first(text)
        for macro, variants in self.patterns.items():
            try:
                value = self._first_value(text, variants, guarded)
            except Exception as e:
                logger.warning(f"Macro '{macro}' extraction failed: {e}")
                continue
            if value is not None:
                macros[macro] = value

        return macros

    def _first_value(self, text: str, variants: List[tuple], guarded: bool) -> Optional[float]:
        for variant, pattern in variants:
            if variant == 'number_first':
                matches = pattern.finditer(text)
            else:
                match = pattern.search(text)
                matches = [match] if match else []

            for match in matches:
                if variant == 'number_first' and guarded and self._follows_label(text, match.start(1)):
                    continue
                try:
                    return float(match.group(1))
                except (TypeError, ValueError):
                    continue
        return None

    def _follows_label(self, text: str, number_start: int) -> bool:
        if not self.label_guard:
            return False
        return bool(self.label_guard.search(text[:number_start]))
