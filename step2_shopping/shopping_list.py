#!/usr/bin/env python3
"""
Shopping List Generator - Consolidated, categorized shopping list for a set of recipes
"""

import logging
from typing import Any, Dict, List, Sequence, Union

from step1_recipes.models import RecipeRecord

from .consolidator import ConsolidatedIngredient, IngredientConsolidator

logger = logging.getLogger(__name__)


def _format_number(value: float) -> str:
    rounded = round(value * 100) / 100
    return str(int(rounded)) if rounded == int(rounded) else str(rounded)


def format_amount(amount: float, unit: str) -> str:
    """
    Human-readable amount

    '720 ml', '1.33 g'; a unitless amount renders as a rounded count ('3')
    """
    if not unit:
        return str(int(amount + 0.5))
    return f"{_format_number(amount)} {unit}"


def format_item(item: ConsolidatedIngredient) -> str:
    """'Flour (720 ml) [2 recipes]'"""
    display = item.display_name[:1].upper() + item.display_name[1:]
    if item.total_amount > 0:
        display += f" ({format_amount(item.total_amount, item.unit)})"
    if len(item.recipes) > 1:
        display += f" [{len(item.recipes)} recipes]"
    return display


class ShoppingListGenerator:
    """Build the shopping list document from selected recipes"""

    def __init__(self, rule_loader):
        self.consolidator = IngredientConsolidator(rule_loader)

    def generate_list(self, recipes: Sequence[RecipeRecord]) -> Dict[str, Any]:
        """
        Generate a shopping list

        Args:
            recipes: Selected RecipeRecords

        Returns:
            Dict with summary, recipes, categorized_list, flat_list, formatted_list
        """
        consolidated = self.consolidator.consolidate(recipes)
        categorized = self.consolidator.categorize(consolidated)

        categorized_list = {
            category: [item.to_dict() for item in items]
            for category, items in categorized.items()
        }
        flat_list = [item for items in categorized_list.values() for item in items]
        formatted_list = {
            category: [format_item(item) for item in items]
            for category, items in categorized.items()
        }

        unmerged_count = sum(1 for item in consolidated.values() if item.unmerged)
        if unmerged_count:
            logger.warning(f"{unmerged_count} items mix units of different dimensions; see 'unmerged'")

        logger.info(
            f"Shopping list: {len(recipes)} recipes, {len(consolidated)} items, "
            f"{len(categorized)} categories"
        )

        return {
            'summary': {
                'total_recipes': len(recipes),
                'total_items': len(consolidated),
                'categories': list(categorized.keys()),
            },
            'recipes': [{'id': r.id, 'name': r.title} for r in recipes],
            'categorized_list': categorized_list,
            'flat_list': flat_list,
            'formatted_list': formatted_list,
        }

    @staticmethod
    def to_rows(shopping_list: Dict[str, Any]) -> List[Dict[str, Union[str, float]]]:
        """Flat table rows for CSV / Excel output"""
        rows = []
        for item in shopping_list.get('flat_list', []):
            rows.append({
                'Category': item['category'],
                'Item': item['display_name'],
                'Total Amount': item['total_amount'] if item['total_amount'] else '',
                'Unit': item['unit'],
                'Recipes': '; '.join(dict.fromkeys(item['recipes'])),
                'Recipe Count': len(item['recipes']),
                'Unmerged': '; '.join(
                    f"{u['amount']} {u['unit']}".strip() + f" ({u['recipe']})" for u in item['unmerged']
                ),
                'Original Text': ' | '.join(item['original_texts']),
            })
        return rows
