"""
Category Classifier
Assigns consolidated ingredients to shopping categories using the ordered
keyword rules in 50_shopping_categories.yaml.
"""

import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class CategoryClassifier:
    """
    Rule-based shopping category classifier.
    The first keyword found as a substring of the name wins; rule order is the
    file order, so more specific keywords must come first.
    """

    def __init__(self, rule_loader):
        """
        Initialize classifier with rule loader.

        Args:
            rule_loader: RuleLoader instance
        """
        self.rule_loader = rule_loader

        category_rules = rule_loader.get_category_rules()
        self.fallback_category = category_rules.get('fallback_category', 'Other')
        self.keyword_rules: List[Dict[str, str]] = []
        for rule in category_rules.get('keyword_rules') or []:
            keyword = str(rule.get('keyword', '')).strip().lower()
            category = rule.get('category')
            if not keyword or not category:
                logger.warning(f"Ignoring incomplete category rule: {rule}")
                continue
            self.keyword_rules.append({'keyword': keyword, 'category': category})

        logger.info(f"CategoryClassifier initialized with {len(self.keyword_rules)} keyword rules")

    def classify(self, name: str) -> str:
        return self.classify_with_source(name)['category']

    def classify_with_source(self, name: str) -> Dict[str, Any]:
        """
        Classify one ingredient name.

        Args:
            name: Normalized ingredient name

        Returns:
            Dict with category, category_source ('keyword' or 'fallback') and
            category_rule_id
        """
        lower_name = (name or '').lower()

        for idx, rule in enumerate(self.keyword_rules):
            if rule['keyword'] in lower_name:
                return self._build_result(rule['category'], 'keyword', f"keyword_rule_{idx}")

        return self._build_result(self.fallback_category, 'fallback', 'fallback')

    def _build_result(self, category: str, source: str, rule_id: str) -> Dict[str, Any]:
        return {
            'category': category,
            'category_source': source,
            'category_rule_id': rule_id,
        }
