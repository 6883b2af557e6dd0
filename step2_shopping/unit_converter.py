#!/usr/bin/env python3
"""
Unit Converter - Map recognized units to a canonical base unit

Mass converts to grams, volume to milliliters. The table lives in
40_units.yaml so step 1 (measurement detection) and step 2 share one
vocabulary.
"""

import logging
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class UnitConverter:
    """Convert (quantity, unit) pairs to canonical units"""

    def __init__(self, rule_loader):
        """
        Args:
            rule_loader: RuleLoader instance
        """
        unit_rules = rule_loader.get_unit_rules()
        self.canonical_units: Dict[str, str] = dict(unit_rules.get('canonical') or {'mass': 'g', 'volume': 'ml'})

        self.table: Dict[str, Tuple[str, float]] = {}
        for unit, entry in (unit_rules.get('table') or {}).items():
            try:
                self.table[str(unit).lower()] = (entry['dimension'], float(entry['factor']))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Ignoring malformed unit entry '{unit}': {e}")

        logger.debug(f"UnitConverter loaded {len(self.table)} units")

    @staticmethod
    def normalize_unit(unit: Optional[str]) -> str:
        return (unit or '').strip().lower().rstrip('.')

    def units(self) -> List[str]:
        """Recognized unit tokens"""
        return list(self.table.keys())

    def dimension(self, unit: Optional[str]) -> Optional[str]:
        """'mass', 'volume', or None for unrecognized/missing units"""
        entry = self.table.get(self.normalize_unit(unit))
        return entry[0] if entry else None

    def canonical_unit(self, dimension: Optional[str]) -> str:
        return self.canonical_units.get(dimension, '') if dimension else ''

    def to_canonical(self, quantity: float, unit: Optional[str]) -> Optional[Tuple[float, str, str]]:
        """
        Convert a quantity to its canonical unit

        Args:
            quantity: Numeric amount
            unit: Unit token (any case)

        Returns:
            (converted quantity, dimension, canonical unit), or None when the
            unit is not recognized
        """
        entry = self.table.get(self.normalize_unit(unit))
        if not entry:
            return None
        dimension, factor = entry
        return quantity * factor, dimension, self.canonical_unit(dimension)
