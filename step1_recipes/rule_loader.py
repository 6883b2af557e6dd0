#!/usr/bin/env python3
"""
Rule Loader - Load YAML rules from the recipe_rules directory
Merges shared.yaml extraction thresholds over built-in defaults.
"""

import os
import yaml
import logging
import hashlib
from pathlib import Path
from typing import Dict, Any, Optional, List

logger = logging.getLogger(__name__)

# Thresholds used when shared.yaml is missing or leaves a key out
DEFAULT_EXTRACTION_SETTINGS: Dict[str, Any] = {
    'skip_leading_pages': 0,
    'max_pages': None,
    'min_page_chars': 50,
    'line_tolerance': 5.0,
    'alternative_min_chars': 100,
    'title': {
        'min_length': 5,
        'max_length': 100,
        'fallback_max_words': 8,
        'fallback_min_words': 2,
    },
    'ingredient_likeness': {
        'min_length': 3,
        'food_word_max_words': 15,
        'general_min_length': 5,
        'general_max_length': 150,
        'general_max_words': 20,
        'max_colons': 1,
    },
    'grouped_ingredients': {
        'min_length': 4,
    },
    'directions': {
        'min_step_length': 11,
        'new_step_min_length': 21,
    },
    'title_like': {
        'max_length': 100,
        'max_words': 10,
    },
}


def _default_rules_dir() -> Path:
    from recipe_rules import RULES_DIR
    return RULES_DIR


class RuleLoader:
    """Load and parse YAML rules, merging shared.yaml over built-in defaults"""

    def __init__(self, rules_dir: Optional[Path] = None, enable_hot_reload: Optional[bool] = None):
        """
        Initialize rule loader with rules directory

        Args:
            rules_dir: Path to recipe_rules directory (defaults to the packaged rules)
            enable_hot_reload: Enable checksum-based hot-reload. When None, reads
                              RECIPES_HOT_RELOAD from the environment (default: off)
        """
        self.rules_dir = Path(rules_dir) if rules_dir else _default_rules_dir()
        if enable_hot_reload is None:
            enable_hot_reload = os.environ.get('RECIPES_HOT_RELOAD', '0') == '1'
        self._enable_hot_reload = enable_hot_reload
        self._rules_cache: Dict[str, Dict[str, Any]] = {}
        self._file_checksums = {} if enable_hot_reload else None  # Only track when enabled
        self._file_read_count = 0

    def _calculate_file_checksum(self, file_path: Path) -> str:
        """Calculate MD5 checksum for a file"""
        try:
            with open(file_path, 'rb') as f:
                return hashlib.md5(f.read()).hexdigest()
        except OSError as e:
            logger.warning(f"Error calculating checksum for {file_path}: {e}")
            return ''

    def _should_reload_file(self, filename: str, rule_file: Path) -> bool:
        """Check if a rule file should be (re)loaded"""
        # Fast path: when hot-reload is disabled, only check cache
        if not self._enable_hot_reload:
            return filename not in self._rules_cache

        current_checksum = self._calculate_file_checksum(rule_file)
        cached_checksum = self._file_checksums.get(filename)

        if current_checksum != cached_checksum:
            if cached_checksum:
                logger.debug(f"Rule file {filename} modified, reloading...")
            return True

        return False

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a YAML file directly"""
        self._file_read_count += 1
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading YAML file {file_path}: {e}")
            return {}

    def _merge_rules(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries
        override takes precedence over base
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_rules(result[key], value)
            else:
                result[key] = value

        return result

    def load_rule_file_by_name(self, filename: str) -> Dict[str, Any]:
        """
        Load a specific rule file by filename (e.g., '40_units.yaml')

        Args:
            filename: Rule file name

        Returns:
            Rule dictionary or empty dict if not found
        """
        rule_file = self.rules_dir / filename

        if not rule_file.exists():
            logger.warning(f"Rule file not found: {rule_file}")
            return {}

        if self._should_reload_file(filename, rule_file):
            self._rules_cache[filename] = self._load_yaml_file(rule_file)
            if self._enable_hot_reload:
                self._file_checksums[filename] = self._calculate_file_checksum(rule_file)
            logger.debug(f"Loaded rule file: {filename}")

        return self._rules_cache.get(filename, {})

    def _load_shared_rules(self) -> Dict[str, Any]:
        """Load shared.yaml rules"""
        return self.load_rule_file_by_name('shared.yaml')

    def get_flags(self) -> Dict[str, Any]:
        """Get feature flags from shared.yaml"""
        return self._load_shared_rules().get('flags', {})

    def get_extraction_settings(self) -> Dict[str, Any]:
        """
        Get extraction thresholds: built-in defaults overridden by shared.yaml

        Returns:
            Settings dictionary (page range, minimum lengths, classifier bounds)
        """
        shared = self._load_shared_rules().get('extraction', {}) or {}
        return self._merge_rules(DEFAULT_EXTRACTION_SETTINGS, shared)

    def get_section_keywords(self) -> Dict[str, List[str]]:
        """Get structural/subsection keywords from 10_section_keywords.yaml"""
        rules = self.load_rule_file_by_name('10_section_keywords.yaml')
        return rules.get('section_keywords', {})

    def get_macro_patterns(self) -> Dict[str, Any]:
        """Get macro regex variants from 20_macro_patterns.yaml"""
        rules = self.load_rule_file_by_name('20_macro_patterns.yaml')
        return rules.get('macro_patterns', {})

    def get_ingredient_vocabulary(self) -> Dict[str, List[str]]:
        """Get food words, cooking verbs and bullet markers from 30_ingredient_vocabulary.yaml"""
        rules = self.load_rule_file_by_name('30_ingredient_vocabulary.yaml')
        return rules.get('ingredient_vocabulary', {})

    def get_unit_rules(self) -> Dict[str, Any]:
        """Get the unit table from 40_units.yaml"""
        rules = self.load_rule_file_by_name('40_units.yaml')
        return rules.get('units', {})

    def get_category_rules(self) -> Dict[str, Any]:
        """Get shopping category keyword rules from 50_shopping_categories.yaml"""
        rules = self.load_rule_file_by_name('50_shopping_categories.yaml')
        return rules.get('shopping_categories', {})

    def get_export_rules(self) -> Dict[str, Any]:
        """Get nutrition export rules from 60_export.yaml"""
        rules = self.load_rule_file_by_name('60_export.yaml')
        return rules.get('nutrition_export', {})

    def clear_cache(self):
        """Clear the rules cache"""
        logger.debug("Clearing rules cache")
        self._rules_cache.clear()
        if self._file_checksums is not None:
            self._file_checksums.clear()

    def get_file_read_count(self) -> int:
        """Number of YAML files read from disk since the last reset"""
        return self._file_read_count

    def reset_file_read_count(self):
        """Reset the file read counter"""
        self._file_read_count = 0
