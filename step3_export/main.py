#!/usr/bin/env python3
"""
Step 3 Main Entry Point
Reads Step 1 output and writes the nutrition-app import file
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from step1_recipes.logger import setup_logger
from step1_recipes.main import OUTPUT_FILENAME as STEP1_OUTPUT_FILENAME, load_extracted_recipes
from step1_recipes.rule_loader import RuleLoader
from step2_shopping.main import select_recipes

from .nutrition_exporter import NutritionExporter

logger = logging.getLogger(__name__)

EXPORT_FILENAME = 'nutrition_export.json'


def export_recipes(
    input_file: Path,
    output_dir: Path,
    rules_dir: Optional[Path] = None,
    selectors: Optional[Sequence[str]] = None
) -> Dict[str, Any]:
    """
    Main processing function

    Args:
        input_file: Step 1 extracted_recipes.json (or the directory holding it)
        output_dir: Output directory
        rules_dir: Directory containing rule YAML files
        selectors: Recipe ids or titles to include (default: all)

    Returns:
        Export document
    """
    input_file = Path(input_file)
    if input_file.is_dir():
        input_file = input_file / STEP1_OUTPUT_FILENAME
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    setup_logger(log_level='INFO', log_dir=output_dir / 'logs', log_name='step3_export')

    logger.info(f"Loading recipes from: {input_file}")
    recipes = select_recipes(load_extracted_recipes(input_file), selectors)

    exporter = NutritionExporter(RuleLoader(rules_dir))
    export_data = exporter.export_recipes(recipes)

    output_file = output_dir / EXPORT_FILENAME
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(export_data, f, indent=2, ensure_ascii=False, default=str)
    logger.info(f"Saved {export_data['total_recipes']} recipes to {output_file}")

    return export_data


def main() -> None:
    """Main entry point for step3_export"""
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description='Step 3: Export extracted recipes for a nutrition tracking app'
    )
    parser.add_argument('input_file', type=str, help='Step 1 extracted_recipes.json (or its directory)')
    parser.add_argument('output_dir', type=str, nargs='?', default='output',
                        help='Output directory (default: output)')
    parser.add_argument('--recipe', action='append', dest='selectors', default=None,
                        help='Recipe id or title to include (repeatable; default: all recipes)')
    parser.add_argument('--rules-dir', type=str, default=None,
                        help='Directory containing rule YAML files (default: bundled recipe_rules)')

    args = parser.parse_args()

    try:
        export_recipes(
            Path(args.input_file),
            Path(args.output_dir),
            Path(args.rules_dir) if args.rules_dir else None,
            selectors=args.selectors,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Step 3 failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
