#!/usr/bin/env python3
"""
Recipe Assembler Tests: validation, title backfill and recovery pass
"""

import unittest
from unittest.mock import patch

from recipe_rules import RULES_DIR
from step1_recipes.recipe_assembler import RecipeAssembler
from step1_recipes.rule_loader import RuleLoader
from step1_recipes.strategy_chain import run_strategies

RECIPE_PAGE = (
    'Chicken Curry\n'
    'Calories: 450 Protein: 35g Carbs: 40g Fat: 12g\n'
    'Ingredients\n'
    '2 cups rice\n'
    '1 lb chicken breast\n'
    '1 tbsp curry powder\n'
    'Directions\n'
    '1. Cook the rice according to the package.\n'
    '2. Brown the chicken in a large skillet over medium heat.\n'
    '3. Stir in curry powder and serve over rice.'
)


class TestRecipeAssembler(unittest.TestCase):
    """Test per-page recipe assembly"""

    def setUp(self):
        self.assembler = RecipeAssembler(RuleLoader(RULES_DIR))

    def test_full_recipe(self):
        recipe = self.assembler.assemble(RECIPE_PAGE, 4)

        self.assertIsNotNone(recipe)
        self.assertEqual(recipe.page_number, 4)
        self.assertEqual(recipe.title, 'Chicken Curry')
        self.assertEqual(recipe.macros, {'calories': 450.0, 'protein': 35.0, 'carbs': 40.0, 'fat': 12.0})
        self.assertEqual(recipe.ingredients, ('2 cups rice', '1 lb chicken breast', '1 tbsp curry powder'))
        self.assertEqual(len(recipe.directions), 3)
        self.assertTrue(recipe.directions[1].startswith('2. Brown the chicken'))
        self.assertEqual(recipe.original_text, RECIPE_PAGE)
        self.assertTrue(recipe.id)

    def test_missing_title_is_backfilled(self):
        text = 'Ingredients\n2 cups flour\n1 tsp salt\nDirections\n1. Mix everything together well.'
        recipe = self.assembler.assemble(text, 7)
        self.assertEqual(recipe.title, 'Recipe from Page 7')
        self.assertEqual(recipe.ingredients, ('2 cups flour', '1 tsp salt'))

    def test_page_without_title_or_ingredients_is_discarded(self):
        self.assertIsNone(self.assembler.assemble('Instructions\n1. Whisk.\n2. Serve.', 3))

    def test_title_only_page_is_kept(self):
        recipe = self.assembler.assemble('Summer Desserts\nA chapter of sweet things', 9)
        self.assertEqual(recipe.title, 'Summer Desserts')

    def test_alternative_recovery_runs_when_chain_is_empty(self):
        text = 'x' * 150
        with patch.object(self.assembler.ingredient_extractor, 'extract', return_value=[]), \
                patch.object(self.assembler.ingredient_extractor, 'extract_alternative',
                             return_value=['2 eggs']) as alternative:
            recipe = self.assembler.assemble(text, 1)

        alternative.assert_called_once_with(text)
        self.assertEqual(recipe.ingredients, ('2 eggs',))
        self.assertEqual(recipe.title, 'Recipe from Page 1')

    def test_unstructured_page_with_title_is_kept(self):
        text = (
            'Summer Garden Notes\n'
            'Fresh herbs taste best picked in the morning\n'
            'Keep basil on the counter rather than the fridge\n'
            'Soft leaves bruise easily so handle them gently'
        )
        extractor = self.assembler.ingredient_extractor
        with patch.object(extractor, 'extract_alternative', wraps=extractor.extract_alternative) as alternative:
            recipe = self.assembler.assemble(text, 5)

        alternative.assert_called_once_with(text)
        self.assertEqual(recipe.title, 'Summer Garden Notes')
        self.assertEqual(recipe.ingredients, ())

    def test_unstructured_page_without_title_is_discarded(self):
        text = '_' * 120
        extractor = self.assembler.ingredient_extractor
        with patch.object(extractor, 'extract_alternative', wraps=extractor.extract_alternative) as alternative:
            recipe = self.assembler.assemble(text, 6)

        alternative.assert_called_once_with(text)
        self.assertIsNone(recipe)

    def test_alternative_recovery_skipped_for_short_pages(self):
        with patch.object(self.assembler.ingredient_extractor, 'extract', return_value=[]), \
                patch.object(self.assembler.ingredient_extractor, 'extract_alternative') as alternative:
            self.assembler.assemble('Short Page\nnothing here', 1)
        alternative.assert_not_called()

    def test_alternative_recovery_disabled_by_flag(self):
        self.assembler.flags = {'enable_alternative_recovery': False}
        with patch.object(self.assembler.ingredient_extractor, 'extract', return_value=[]), \
                patch.object(self.assembler.ingredient_extractor, 'extract_alternative') as alternative:
            self.assembler.assemble('y' * 150, 1)
        alternative.assert_not_called()

    def test_failing_strategy_does_not_abort_page(self):
        def broken(text):
            raise ValueError('bad pattern')

        extractor = self.assembler.title_extractor
        extractor.strategies = [('broken', broken)] + extractor.strategies
        with self.assertLogs('step1_recipes.strategy_chain', level='WARNING'):
            recipe = self.assembler.assemble(RECIPE_PAGE, 2)
        self.assertEqual(recipe.title, 'Chicken Curry')


class TestStrategyChain(unittest.TestCase):

    def test_first_non_empty_result_wins(self):
        strategies = [('empty', lambda t: []), ('first', lambda t: [t]), ('second', lambda t: ['never'])]
        self.assertEqual(run_strategies('field', strategies, 'value'), ['value'])

    def test_exception_counts_as_no_result(self):
        def boom(text):
            raise RuntimeError('boom')

        with self.assertLogs('step1_recipes.strategy_chain', level='WARNING'):
            result = run_strategies('field', [('boom', boom), ('ok', lambda t: 'ok')], 'x')
        self.assertEqual(result, 'ok')

    def test_all_empty(self):
        self.assertIsNone(run_strategies('field', [('none', lambda t: None)], 'x'))


if __name__ == '__main__':
    unittest.main()
