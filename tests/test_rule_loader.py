#!/usr/bin/env python3
"""
Rule Loader Tests: caching, hot-reload toggle and shared.yaml merging
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path

from recipe_rules import RULES_DIR
from step1_recipes.models import MACRO_KEYS
from step1_recipes.rule_loader import DEFAULT_EXTRACTION_SETTINGS, RuleLoader


class TestRuleLoader(unittest.TestCase):
    """Test the YAML rule loader"""

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_default_rules_dir_is_packaged_rules(self):
        loader = RuleLoader()
        self.assertEqual(loader.rules_dir, RULES_DIR)
        self.assertTrue((loader.rules_dir / 'shared.yaml').exists())

    def test_hot_reload_default_off(self):
        """Hot-reload is OFF by default"""
        original_env = os.environ.pop('RECIPES_HOT_RELOAD', None)
        try:
            loader = RuleLoader(RULES_DIR)
            self.assertFalse(loader._enable_hot_reload)
            self.assertIsNone(loader._file_checksums)
        finally:
            if original_env is not None:
                os.environ['RECIPES_HOT_RELOAD'] = original_env

    def test_hot_reload_env_variable(self):
        """RECIPES_HOT_RELOAD=1 enables hot-reload"""
        original_env = os.environ.get('RECIPES_HOT_RELOAD')
        try:
            os.environ['RECIPES_HOT_RELOAD'] = '1'
            self.assertTrue(RuleLoader(RULES_DIR)._enable_hot_reload)

            os.environ['RECIPES_HOT_RELOAD'] = '0'
            self.assertFalse(RuleLoader(RULES_DIR)._enable_hot_reload)
        finally:
            if original_env is not None:
                os.environ['RECIPES_HOT_RELOAD'] = original_env
            elif 'RECIPES_HOT_RELOAD' in os.environ:
                del os.environ['RECIPES_HOT_RELOAD']

    def test_hot_reload_explicit_on(self):
        loader = RuleLoader(RULES_DIR, enable_hot_reload=True)
        self.assertTrue(loader._enable_hot_reload)
        self.assertIsInstance(loader._file_checksums, dict)

    def test_no_duplicate_reads_hot_reload_off(self):
        """Files are read only once when hot-reload is OFF"""
        loader = RuleLoader(RULES_DIR, enable_hot_reload=False)

        loader.reset_file_read_count()
        keywords1 = loader.get_section_keywords()
        first_read_count = loader.get_file_read_count()
        self.assertEqual(first_read_count, 1)

        keywords2 = loader.get_section_keywords()
        self.assertEqual(loader.get_file_read_count(), first_read_count)
        self.assertEqual(keywords1, keywords2)

    def test_reload_works_when_hot_reload_on(self):
        """A modified file is re-read when hot-reload is ON"""
        (self.tmp_dir / '40_units.yaml').write_text(
            "units:\n  table:\n    g: {dimension: mass, factor: 1}\n", encoding='utf-8'
        )
        loader = RuleLoader(self.tmp_dir, enable_hot_reload=True)
        self.assertEqual(list(loader.get_unit_rules()['table']), ['g'])

        (self.tmp_dir / '40_units.yaml').write_text(
            "units:\n  table:\n    kg: {dimension: mass, factor: 1000}\n", encoding='utf-8'
        )
        self.assertEqual(list(loader.get_unit_rules()['table']), ['kg'])

    def test_clear_cache_forces_reread(self):
        loader = RuleLoader(RULES_DIR)
        loader.get_flags()
        loader.reset_file_read_count()
        loader.clear_cache()
        loader.get_flags()
        self.assertEqual(loader.get_file_read_count(), 1)

    def test_extraction_settings_merge_over_defaults(self):
        (self.tmp_dir / 'shared.yaml').write_text(
            "extraction:\n  min_page_chars: 10\n  title:\n    min_length: 3\n", encoding='utf-8'
        )
        settings = RuleLoader(self.tmp_dir).get_extraction_settings()

        self.assertEqual(settings['min_page_chars'], 10)
        self.assertEqual(settings['title']['min_length'], 3)
        self.assertEqual(settings['title']['max_length'], 100)
        self.assertEqual(settings['line_tolerance'], 5.0)
        # Defaults are not mutated by the merge
        self.assertEqual(DEFAULT_EXTRACTION_SETTINGS['title']['min_length'], 5)

    def test_missing_rule_files_are_empty(self):
        loader = RuleLoader(self.tmp_dir)
        with self.assertLogs('step1_recipes.rule_loader', level='WARNING'):
            self.assertEqual(loader.get_unit_rules(), {})
        self.assertEqual(loader.get_extraction_settings()['min_page_chars'], 50)

    def test_invalid_yaml_is_logged_and_empty(self):
        (self.tmp_dir / '10_section_keywords.yaml').write_text("section_keywords: [unclosed\n", encoding='utf-8')
        loader = RuleLoader(self.tmp_dir)
        with self.assertLogs('step1_recipes.rule_loader', level='ERROR'):
            self.assertEqual(loader.get_section_keywords(), {})

    def test_shipped_rules_cover_all_macros(self):
        patterns = RuleLoader(RULES_DIR).get_macro_patterns()
        for macro in MACRO_KEYS:
            self.assertIn(macro, patterns)
            self.assertTrue(patterns[macro]['number_first'])
            self.assertTrue(patterns[macro]['label_first'])
        self.assertIn('label_guard', patterns)


if __name__ == '__main__':
    unittest.main()
