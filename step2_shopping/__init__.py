"""
Step 2: Shopping List
Parses ingredient lines of the selected recipes, converts units, consolidates
duplicates and groups them by shopping category.
"""

from .ingredient_parser import IngredientLine, IngredientParser
from .unit_converter import UnitConverter
from .category_classifier import CategoryClassifier
from .consolidator import ConsolidatedIngredient, IngredientConsolidator, normalize_ingredient_name
from .shopping_list import ShoppingListGenerator, format_amount
from .main import generate_shopping_list, select_recipes

__all__ = [
    'IngredientLine',
    'IngredientParser',
    'UnitConverter',
    'CategoryClassifier',
    'ConsolidatedIngredient',
    'IngredientConsolidator',
    'normalize_ingredient_name',
    'ShoppingListGenerator',
    'format_amount',
    'generate_shopping_list',
    'select_recipes',
]
