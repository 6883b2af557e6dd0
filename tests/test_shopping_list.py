#!/usr/bin/env python3
"""
Shopping List Tests: consolidation, categories, formatting and step 2 output
"""

import json
import tempfile
import unittest
from pathlib import Path

from recipe_rules import RULES_DIR
from step1_recipes.main import OUTPUT_FILENAME, save_extracted_recipes
from step1_recipes.models import RecipeRecord
from step1_recipes.rule_loader import RuleLoader
from step2_shopping.category_classifier import CategoryClassifier
from step2_shopping.consolidator import DIMENSIONLESS, IngredientConsolidator, normalize_ingredient_name
from step2_shopping.main import CSV_FILENAME, EXCEL_FILENAME, JSON_FILENAME, generate_shopping_list, select_recipes
from step2_shopping.shopping_list import ShoppingListGenerator, format_amount


def make_recipes():
    return [
        RecipeRecord(page_number=1, title='Pancakes', ingredients=('2 cups flour', '3 eggs', '1 tsp salt')),
        RecipeRecord(page_number=2, title='Bread', ingredients=('1 cup flour, sifted', '2 eggs', '100 g salt', '  ')),
    ]


class TestNormalizeName(unittest.TestCase):

    def test_normalization(self):
        self.assertEqual(normalize_ingredient_name('Eggs'), 'egg')
        self.assertEqual(normalize_ingredient_name('  Red   Onions '), 'red onion')
        self.assertEqual(normalize_ingredient_name('Mixed'), 'mix')
        self.assertEqual(normalize_ingredient_name('dressing'), 'dress')


class TestCategoryClassifier(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.classifier = CategoryClassifier(RuleLoader(RULES_DIR))

    def test_first_keyword_wins(self):
        self.assertEqual(self.classifier.classify('chicken breast'), 'Meat & Poultry')
        self.assertEqual(self.classifier.classify('egg'), 'Dairy & Eggs')
        self.assertEqual(self.classifier.classify('black pepper'), 'Pantry & Condiments')

    def test_fallback(self):
        result = self.classifier.classify_with_source('saffron thread')
        self.assertEqual(result['category'], 'Other')
        self.assertEqual(result['category_source'], 'fallback')


class TestIngredientConsolidator(unittest.TestCase):
    """Test aggregation across recipes"""

    def setUp(self):
        self.consolidator = IngredientConsolidator(RuleLoader(RULES_DIR))

    def test_same_dimension_is_summed(self):
        items = self.consolidator.consolidate(make_recipes())

        flour = items['flour']
        self.assertEqual(flour.total_amount, 720.0)
        self.assertEqual(flour.unit, 'ml')
        self.assertEqual(flour.dimension, 'volume')
        self.assertEqual(flour.recipes, ['Pancakes', 'Bread'])
        self.assertEqual(flour.category, 'Grains & Starches')

    def test_plural_names_merge_as_counts(self):
        eggs = self.consolidator.consolidate(make_recipes())['egg']
        self.assertEqual(eggs.total_amount, 5.0)
        self.assertEqual(eggs.dimension, DIMENSIONLESS)
        self.assertEqual(eggs.unit, '')
        self.assertEqual(eggs.display_name, 'eggs')

    def test_dimension_mismatch_is_kept_separate(self):
        salt = self.consolidator.consolidate(make_recipes())['salt']
        self.assertEqual(salt.total_amount, 5.0)
        self.assertEqual(salt.unit, 'ml')
        self.assertEqual(salt.unmerged, [{'amount': '100', 'unit': 'g', 'recipe': 'Bread', 'dimension': 'mass'}])
        self.assertEqual(len(salt.amounts), 2)

    def test_blank_lines_are_ignored(self):
        items = self.consolidator.consolidate(make_recipes())
        self.assertEqual(list(items), ['flour', 'egg', 'salt'])

    def test_line_without_name_is_keyed_by_its_text(self):
        recipe = RecipeRecord(page_number=1, title='Spice Mix', ingredients=('2 g',))
        item = self.consolidator.consolidate([recipe])['2 g']
        self.assertEqual(item.display_name, '2 g')
        self.assertEqual(item.total_amount, 2.0)
        self.assertEqual(item.unit, 'g')

    def test_amount_without_number_is_recorded(self):
        recipe = RecipeRecord(page_number=1, title='Soup', ingredients=('Salt to taste',))
        item = self.consolidator.consolidate([recipe])['salt to taste']
        self.assertEqual(item.total_amount, 0.0)
        self.assertIsNone(item.dimension)
        self.assertEqual(item.amounts, [{'amount': None, 'unit': '', 'recipe': 'Soup'}])

    def test_categorize_sorts_by_display_name(self):
        recipe = RecipeRecord(page_number=1, title='Salad', ingredients=('1 tomato', '2 carrots', '1 Onion'))
        categorized = self.consolidator.categorize(self.consolidator.consolidate([recipe]))
        self.assertEqual([i.display_name for i in categorized['Vegetables']], ['carrots', 'Onion', 'tomato'])


class TestFormatting(unittest.TestCase):

    def test_format_amount(self):
        self.assertEqual(format_amount(720.0, 'ml'), '720 ml')
        self.assertEqual(format_amount(1.3333, 'g'), '1.33 g')
        self.assertEqual(format_amount(2.5, ''), '3')
        self.assertEqual(format_amount(2.4, ''), '2')


class TestShoppingListGenerator(unittest.TestCase):

    def setUp(self):
        self.generator = ShoppingListGenerator(RuleLoader(RULES_DIR))

    def test_generate_list(self):
        with self.assertLogs('step2_shopping.shopping_list', level='WARNING'):
            shopping_list = self.generator.generate_list(make_recipes())

        self.assertEqual(shopping_list['summary'], {
            'total_recipes': 2,
            'total_items': 3,
            'categories': ['Grains & Starches', 'Dairy & Eggs', 'Pantry & Condiments'],
        })
        self.assertEqual([r['name'] for r in shopping_list['recipes']], ['Pancakes', 'Bread'])
        self.assertEqual(shopping_list['formatted_list'], {
            'Grains & Starches': ['Flour (720 ml) [2 recipes]'],
            'Dairy & Eggs': ['Eggs (5) [2 recipes]'],
            'Pantry & Condiments': ['Salt (5 ml) [2 recipes]'],
        })
        self.assertEqual(len(shopping_list['flat_list']), 3)

    def test_rows(self):
        rows = self.generator.to_rows(self.generator.generate_list(make_recipes()))
        salt = rows[2]
        self.assertEqual(salt['Item'], 'salt')
        self.assertEqual(salt['Total Amount'], 5.0)
        self.assertEqual(salt['Recipes'], 'Pancakes; Bread')
        self.assertEqual(salt['Recipe Count'], 2)
        self.assertEqual(salt['Unmerged'], '100 g (Bread)')
        self.assertEqual(salt['Original Text'], '1 tsp salt | 100 g salt')

    def test_empty_selection(self):
        shopping_list = self.generator.generate_list([])
        self.assertEqual(shopping_list['summary']['total_items'], 0)
        self.assertEqual(shopping_list['formatted_list'], {})


class TestGenerateShoppingList(unittest.TestCase):
    """Step 2 entry point against a step 1 output file"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.step1_dir = Path(self.tmp.name) / 'step1'
        self.step1_dir.mkdir()
        self.recipes = make_recipes()
        save_extracted_recipes({'book.pdf': self.recipes}, self.step1_dir / OUTPUT_FILENAME)

    def test_select_by_title_or_id(self):
        selected = select_recipes(self.recipes, ['PANCAKES', self.recipes[1].id])
        self.assertEqual([r.title for r in selected], ['Pancakes', 'Bread'])
        self.assertEqual(select_recipes(self.recipes, None), self.recipes)

    def test_unknown_selector_warns(self):
        with self.assertLogs('step2_shopping.main', level='WARNING'):
            selected = select_recipes(self.recipes, ['Lasagne'])
        self.assertEqual(selected, [])

    def test_writes_outputs(self):
        output_dir = Path(self.tmp.name) / 'step2'
        shopping_list = generate_shopping_list(self.step1_dir, output_dir, selectors=['Pancakes'])

        self.assertEqual(shopping_list['summary']['total_recipes'], 1)
        self.assertTrue((output_dir / CSV_FILENAME).exists())
        self.assertTrue((output_dir / EXCEL_FILENAME).exists())
        with open(output_dir / JSON_FILENAME, 'r', encoding='utf-8') as f:
            saved = json.load(f)
        self.assertEqual(saved['formatted_list']['Grains & Starches'], ['Flour (480 ml)'])

    def test_excel_optional(self):
        output_dir = Path(self.tmp.name) / 'step2'
        generate_shopping_list(self.step1_dir, output_dir, excel=False)
        self.assertFalse((output_dir / EXCEL_FILENAME).exists())
        self.assertTrue((output_dir / JSON_FILENAME).exists())


if __name__ == '__main__':
    unittest.main()
