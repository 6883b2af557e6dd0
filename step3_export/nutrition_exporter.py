#!/usr/bin/env python3
"""
Nutrition Exporter - Convert RecipeRecords to the nutrition-app import schema

Each recipe becomes:
    id, name, nutrition{calories, protein, carbohydrates, fat, fiber},
    ingredients[{name, amount, unit, original_text}], instructions, servings,
    prep_time, cook_time, tags, source, notes

Missing macros export as 0 (the app has no "unknown" value).
"""

import re
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from step1_recipes.models import RecipeRecord
from step2_shopping.ingredient_parser import IngredientParser

logger = logging.getLogger(__name__)


class NutritionExporter:
    """Format recipes for import into a nutrition tracking app"""

    def __init__(self, rule_loader, parser: Optional[IngredientParser] = None):
        """
        Args:
            rule_loader: RuleLoader instance (reads 60_export.yaml)
            parser: Ingredient parser (built from rule_loader if omitted)
        """
        rules = rule_loader.get_export_rules()
        self.version = str(rules.get('version', '1.0'))
        self.source = rules.get('source', 'PDF Import')
        self.nutrition_fields: Dict[str, str] = dict(rules.get('nutrition_fields') or {
            'calories': 'calories',
            'protein': 'protein',
            'carbohydrates': 'carbs',
            'fat': 'fat',
            'fiber': 'fiber',
        })

        servings = rules.get('servings') or {}
        self.servings_title_re = re.compile(
            servings.get('title_pattern', r'serves?\s*(\d+)|(\d+)\s*servings?'), re.IGNORECASE
        )
        self.large_batch_re = re.compile(
            servings.get('large_batch_pattern', r'\b(?:[2-9]|[1-9]\d+)\s*(?:cups?|lbs?|pounds?)\b'), re.IGNORECASE
        )
        self.servings_no_ingredients = int(servings.get('no_ingredients', 1))
        self.servings_many = int(servings.get('many_large_batch', 6))
        self.servings_many_count = int(servings.get('many_large_batch_count', 2))
        self.servings_some = int(servings.get('some_large_batch', 4))
        self.servings_default = int(servings.get('default', 2))

        self.tag_rules = []
        for rule in rules.get('tag_rules') or []:
            try:
                self.tag_rules.append((rule['tag'], rule.get('source', 'ingredients'),
                                       re.compile(rule['pattern'], re.IGNORECASE)))
            except (KeyError, re.error) as e:
                logger.warning(f"Ignoring tag rule {rule}: {e}")

        self.parser = parser or IngredientParser(rule_loader)

    def export_recipes(self, recipes: Sequence[RecipeRecord]) -> Dict[str, Any]:
        """
        Build the export document

        Args:
            recipes: Recipes to export

        Returns:
            Dict with version, export_date, total_recipes, recipes
        """
        exported = [self.format_recipe(recipe) for recipe in recipes]
        logger.info(f"Formatted {len(exported)} recipes for export")
        return {
            'version': self.version,
            'export_date': datetime.now(timezone.utc).isoformat(),
            'total_recipes': len(exported),
            'recipes': exported,
        }

    def format_recipe(self, recipe: RecipeRecord) -> Dict[str, Any]:
        return {
            'id': recipe.id,
            'name': recipe.title,
            'nutrition': {
                field: recipe.macros.get(macro, 0)
                for field, macro in self.nutrition_fields.items()
            },
            'ingredients': [self._format_ingredient(text) for text in recipe.ingredients],
            'instructions': list(recipe.directions),
            'servings': self.estimate_servings(recipe),
            'prep_time': None,
            'cook_time': None,
            'tags': self.generate_tags(recipe),
            'source': self.source,
            'notes': f"Imported from page {recipe.page_number}",
        }

    def _format_ingredient(self, text: str) -> Dict[str, Any]:
        parsed = self.parser.parse(text)
        return {
            'name': parsed.name,
            'amount': parsed.amount or '',
            'unit': parsed.unit,
            'original_text': text,
        }

    def estimate_servings(self, recipe: RecipeRecord) -> int:
        """
        Servings heuristic

        1 without ingredients; "serves N" / "N servings" in the title; else by
        the number of large-batch lines (2+ cups or pounds)
        """
        if not recipe.ingredients:
            return self.servings_no_ingredients

        match = self.servings_title_re.search(recipe.title or '')
        if match:
            number = next((g for g in match.groups() if g), None)
            if number:
                return int(number)

        large_batch = [line for line in recipe.ingredients if self.large_batch_re.search(line)]
        if len(large_batch) > self.servings_many_count:
            return self.servings_many
        if large_batch:
            return self.servings_some
        return self.servings_default

    def generate_tags(self, recipe: RecipeRecord) -> List[str]:
        texts = {
            'ingredients': ' '.join(recipe.ingredients).lower(),
            'directions': ' '.join(recipe.directions).lower(),
        }
        return [tag for tag, source, pattern in self.tag_rules if pattern.search(texts.get(source, ''))]
