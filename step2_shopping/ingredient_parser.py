#!/usr/bin/env python3
"""
Ingredient Parser - Split one ingredient line into amount / unit / name

    "2 cups flour, sifted"  ->  amount "2", unit "cups", name "flour"
    "1/2 tsp salt"          ->  amount "1/2" (quantity 0.5), unit "tsp", name "salt"
"""

import re
import logging
from dataclasses import dataclass
from typing import Optional

from .unit_converter import UnitConverter

logger = logging.getLogger(__name__)

AMOUNT_PATTERN = re.compile(r'^(\d+(?:\.\d+)?(?:\s*/\s*\d+)?)')
LEADING_OF_PATTERN = re.compile(r'^of\s+', re.IGNORECASE)


def parse_quantity(amount: Optional[str]) -> Optional[float]:
    """'2' -> 2.0, '1.5' -> 1.5, '1/2' -> 0.5; None when not numeric"""
    if not amount:
        return None
    try:
        if '/' in amount:
            numerator, denominator = (part.strip() for part in amount.split('/', 1))
            return float(numerator) / float(denominator)
        return float(amount)
    except (ValueError, ZeroDivisionError):
        return None


@dataclass(frozen=True)
class IngredientLine:
    """One parsed ingredient line (derived on demand, never stored in a recipe)"""
    original_text: str
    amount: Optional[str]
    unit: str
    name: str

    @property
    def quantity(self) -> Optional[float]:
        return parse_quantity(self.amount)


class IngredientParser:
    """Best-effort parser for free-text ingredient lines"""

    def __init__(self, rule_loader, unit_converter: Optional[UnitConverter] = None):
        """
        Args:
            rule_loader: RuleLoader instance (unit vocabulary from 40_units.yaml)
            unit_converter: Shared UnitConverter (built from rule_loader if omitted)
        """
        self.unit_converter = unit_converter or UnitConverter(rule_loader)
        units = sorted(self.unit_converter.units(), key=len, reverse=True)
        unit_alternation = '|'.join(re.escape(u) for u in units) or r'(?!x)x'
        # Unit must immediately follow the amount
        self.unit_pattern = re.compile(r'^\s*(' + unit_alternation + r')\b\.?', re.IGNORECASE)

    def parse(self, text: str) -> IngredientLine:
        """
        Parse one ingredient line

        Args:
            text: Ingredient line as extracted

        Returns:
            IngredientLine (never raises; unparseable parts are left empty)
        """
        original = text or ''
        rest = original.strip()

        amount = None
        amount_match = AMOUNT_PATTERN.match(rest)
        if amount_match:
            amount = amount_match.group(1)
            rest = rest[amount_match.end():]

        unit = ''
        if amount:
            unit_match = self.unit_pattern.match(rest)
            if unit_match:
                unit = unit_match.group(1).lower()
                rest = rest[unit_match.end():]

        stripped = rest.strip()
        name = LEADING_OF_PATTERN.sub('', stripped)
        name = name.split(',', 1)[0].strip()

        if len(name) < 2:
            name = stripped

        return IngredientLine(original_text=original, amount=amount, unit=unit, name=name)
