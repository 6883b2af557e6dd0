"""
Recipe Rules
YAML rule files for recipe extraction, shopping list consolidation and export.

Python = engine; YAML = business logic.
"""

from pathlib import Path

RULES_DIR = Path(__file__).parent

__all__ = ['RULES_DIR']
