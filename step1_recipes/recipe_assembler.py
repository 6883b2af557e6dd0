#!/usr/bin/env python3
"""
Recipe Assembler - Combine field extractors into one RecipeRecord per page
"""

import logging
from typing import Dict, Optional

from .direction_extractor import DirectionExtractor
from .field_classifiers import FieldClassifier
from .ingredient_extractor import IngredientExtractor
from .macro_extractor import MacroExtractor
from .models import RecipeRecord
from .title_extractor import TitleExtractor

logger = logging.getLogger(__name__)


class RecipeAssembler:
    """Run every field extractor on a page and decide whether it holds a recipe"""

    def __init__(self, rule_loader, settings: Optional[Dict] = None):
        """
        Args:
            rule_loader: RuleLoader instance
            settings: Extraction settings override (defaults to the rule files)
        """
        self.rule_loader = rule_loader
        self.settings = settings or rule_loader.get_extraction_settings()
        self.flags = rule_loader.get_flags()
        self.alternative_min_chars = self.settings.get('alternative_min_chars', 100)

        self.classifier = FieldClassifier(rule_loader, self.settings)
        self.title_extractor = TitleExtractor(self.classifier, self.settings)
        self.macro_extractor = MacroExtractor(rule_loader)
        self.ingredient_extractor = IngredientExtractor(self.classifier, rule_loader, self.settings)
        self.direction_extractor = DirectionExtractor(self.classifier, self.settings)

    def assemble(self, page_text: str, page_number: int) -> Optional[RecipeRecord]:
        """
        Build a recipe from one page of reconstructed text

        Args:
            page_text: Reading-order text of the page
            page_number: 1-based page number

        Returns:
            RecipeRecord, or None when the page has neither title nor ingredients
        """
        title = self.title_extractor.extract(page_text)
        macros = self.macro_extractor.extract(page_text)
        ingredients = self.ingredient_extractor.extract(page_text)
        directions = self.direction_extractor.extract(page_text)

        if (not ingredients
                and self.flags.get('enable_alternative_recovery', True)
                and len(page_text) > self.alternative_min_chars):
            ingredients = self.ingredient_extractor.extract_alternative(page_text)
            if ingredients:
                logger.debug(f"Page {page_number}: recovered {len(ingredients)} ingredients with alternative pass")

        if not title and not ingredients:
            logger.debug(f"Page {page_number}: no title or ingredients, not a recipe")
            return None

        if not title:
            title = f"Recipe from Page {page_number}"

        recipe = RecipeRecord(
            page_number=page_number,
            title=title,
            macros=macros,
            ingredients=tuple(ingredients),
            directions=tuple(directions),
            original_text=page_text,
        )
        logger.debug(
            f"Page {page_number}: '{title}' ({len(ingredients)} ingredients, "
            f"{len(directions)} steps, {len(macros)} macros)"
        )
        return recipe
