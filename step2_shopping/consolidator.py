#!/usr/bin/env python3
"""
Ingredient Consolidator - Aggregate ingredient lines across recipes

Lines are grouped by a normalized name. The first numeric contribution of a
group fixes its dimension (mass, volume, or 'none' for unitless and
unrecognized units); later contributions of the same dimension are summed in
the canonical unit, anything else is kept in `unmerged` and never added to
the total.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from step1_recipes.models import RecipeRecord

from .category_classifier import CategoryClassifier
from .ingredient_parser import IngredientParser
from .unit_converter import UnitConverter

logger = logging.getLogger(__name__)

DIMENSIONLESS = 'none'


def normalize_ingredient_name(name: str) -> str:
    """Lowercase, collapse whitespace, strip a trailing 's', then 'ed', then 'ing'"""
    normalized = ' '.join((name or '').lower().split())
    normalized = re.sub(r's$', '', normalized)
    normalized = re.sub(r'ed$', '', normalized)
    normalized = re.sub(r'ing$', '', normalized)
    return normalized.strip()


@dataclass
class ConsolidatedIngredient:
    """One shopping-list line: an ingredient summed over all selected recipes"""
    name: str
    display_name: str
    total_amount: float = 0.0
    dimension: Optional[str] = None
    unit: str = ''
    category: str = ''
    recipes: List[str] = field(default_factory=list)
    amounts: List[Dict[str, Any]] = field(default_factory=list)
    unmerged: List[Dict[str, Any]] = field(default_factory=list)
    original_texts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'display_name': self.display_name,
            'total_amount': round(self.total_amount, 2),
            'dimension': self.dimension,
            'unit': self.unit,
            'category': self.category,
            'recipes': list(self.recipes),
            'amounts': [dict(a) for a in self.amounts],
            'unmerged': [dict(u) for u in self.unmerged],
            'original_texts': list(self.original_texts),
        }


class IngredientConsolidator:
    """Consolidate and categorize the ingredients of a batch of recipes"""

    def __init__(self, rule_loader):
        """
        Args:
            rule_loader: RuleLoader instance
        """
        self.unit_converter = UnitConverter(rule_loader)
        self.parser = IngredientParser(rule_loader, self.unit_converter)
        self.classifier = CategoryClassifier(rule_loader)

    def consolidate(self, recipes: Iterable[RecipeRecord]) -> Dict[str, ConsolidatedIngredient]:
        """
        Aggregate ingredients by normalized name

        Args:
            recipes: Selected RecipeRecords

        Returns:
            Normalized name -> ConsolidatedIngredient, in first-seen order
        """
        ingredients: Dict[str, ConsolidatedIngredient] = {}

        for recipe in recipes:
            for text in recipe.ingredients:
                if not text or not text.strip():
                    continue
                self._add_line(ingredients, text, recipe.title)

        for item in ingredients.values():
            item.category = self.classifier.classify(item.name)

        logger.info(f"Consolidated ingredients into {len(ingredients)} items")
        return ingredients

    def _add_line(self, ingredients: Dict[str, ConsolidatedIngredient], text: str, recipe_title: str) -> None:
        parsed = self.parser.parse(text)
        key = normalize_ingredient_name(parsed.name) or normalize_ingredient_name(text)

        item = ingredients.get(key)
        if item is None:
            item = ConsolidatedIngredient(name=key, display_name=parsed.name or text.strip())
            ingredients[key] = item

        contribution = {'amount': parsed.amount, 'unit': parsed.unit, 'recipe': recipe_title}
        item.amounts.append(contribution)
        item.recipes.append(recipe_title)
        item.original_texts.append(text)

        quantity = parsed.quantity
        if quantity is None:
            return

        converted = self.unit_converter.to_canonical(quantity, parsed.unit)
        if converted:
            value, dimension, canonical_unit = converted
        else:
            # Unrecognized or missing unit: summed as a plain count
            value, dimension, canonical_unit = quantity, DIMENSIONLESS, ''

        if item.dimension is None:
            item.dimension = dimension
            item.unit = canonical_unit

        if item.dimension == dimension:
            item.total_amount += value
        else:
            logger.debug(
                f"'{key}': {parsed.amount} {parsed.unit} from '{recipe_title}' is {dimension}, "
                f"total is {item.dimension}; kept separate"
            )
            item.unmerged.append(dict(contribution, dimension=dimension))

    def categorize(self, ingredients: Dict[str, ConsolidatedIngredient]) -> Dict[str, List[ConsolidatedIngredient]]:
        """
        Group consolidated ingredients by category

        Returns:
            Category -> items sorted by display name (case-insensitive);
            categories in order of first appearance
        """
        categorized: Dict[str, List[ConsolidatedIngredient]] = {}
        for item in ingredients.values():
            categorized.setdefault(item.category or self.classifier.fallback_category, []).append(item)

        for items in categorized.values():
            items.sort(key=lambda i: i.display_name.lower())
        return categorized
