#!/usr/bin/env python3
"""
Ingredient Parser and Unit Converter Tests
"""

import unittest

from recipe_rules import RULES_DIR
from step1_recipes.rule_loader import RuleLoader
from step2_shopping.ingredient_parser import IngredientParser, parse_quantity
from step2_shopping.unit_converter import UnitConverter


class TestIngredientParser(unittest.TestCase):
    """Test amount / unit / name splitting"""

    @classmethod
    def setUpClass(cls):
        cls.parser = IngredientParser(RuleLoader(RULES_DIR))

    def assertParsed(self, text, amount, unit, name):
        parsed = self.parser.parse(text)
        self.assertEqual((parsed.amount, parsed.unit, parsed.name), (amount, unit, name))
        self.assertEqual(parsed.original_text, text)

    def test_amount_unit_name(self):
        self.assertParsed('2 cups flour, sifted', '2', 'cups', 'flour')

    def test_fraction(self):
        parsed = self.parser.parse('1/2 tsp salt')
        self.assertEqual(parsed.amount, '1/2')
        self.assertEqual(parsed.quantity, 0.5)

    def test_unit_attached_to_amount(self):
        self.assertParsed('200g chicken breast', '200', 'g', 'chicken breast')

    def test_unit_with_period_and_case(self):
        self.assertParsed('1 Lb. ground beef', '1', 'lb', 'ground beef')

    def test_longest_unit_wins(self):
        self.assertParsed('1 liter water', '1', 'liter', 'water')

    def test_unit_must_be_whole_word(self):
        self.assertParsed('1 glass orange juice', '1', '', 'glass orange juice')

    def test_leading_of_removed(self):
        self.assertParsed('2 cups of milk', '2', 'cups', 'milk')

    def test_count_without_unit(self):
        self.assertParsed('3 eggs', '3', '', 'eggs')

    def test_no_amount(self):
        self.assertParsed('Salt to taste', None, '', 'Salt to taste')

    def test_short_name_falls_back_to_rest_of_line(self):
        self.assertParsed('1 cup a, b', '1', 'cup', 'a, b')

    def test_amount_and_unit_only_leaves_empty_name(self):
        self.assertParsed('2 g', '2', 'g', '')

    def test_parse_quantity(self):
        self.assertEqual(parse_quantity('1.5'), 1.5)
        self.assertEqual(parse_quantity('3 / 4'), 0.75)
        self.assertIsNone(parse_quantity('1/0'))
        self.assertIsNone(parse_quantity(None))


class TestUnitConverter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.converter = UnitConverter(RuleLoader(RULES_DIR))

    def test_volume_to_ml(self):
        self.assertEqual(self.converter.to_canonical(2, 'cups'), (480.0, 'volume', 'ml'))

    def test_mass_to_g(self):
        self.assertEqual(self.converter.to_canonical(1, 'LB.'), (453.59, 'mass', 'g'))

    def test_unknown_unit(self):
        self.assertIsNone(self.converter.to_canonical(1, 'pinch'))
        self.assertIsNone(self.converter.dimension(''))

    def test_dimension_lookup(self):
        self.assertEqual(self.converter.dimension('Tsp'), 'volume')
        self.assertEqual(self.converter.canonical_unit('mass'), 'g')
        self.assertEqual(self.converter.canonical_unit(None), '')


if __name__ == '__main__':
    unittest.main()
