"""
Step 3: Nutrition App Export
Formats extracted recipes (nutrition, ingredients, instructions, servings,
tags) for import into a nutrition tracking app.
"""

from .nutrition_exporter import NutritionExporter
from .main import export_recipes

__all__ = ['NutritionExporter', 'export_recipes']
