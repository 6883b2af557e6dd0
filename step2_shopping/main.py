#!/usr/bin/env python3
"""
Step 2 Main Entry Point
Reads Step 1 output (extracted_recipes.json), selects recipes and writes a
consolidated shopping list as JSON, CSV and Excel
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from step1_recipes.logger import setup_logger
from step1_recipes.main import OUTPUT_FILENAME as STEP1_OUTPUT_FILENAME, load_extracted_recipes
from step1_recipes.models import RecipeRecord
from step1_recipes.rule_loader import RuleLoader

from .shopping_list import ShoppingListGenerator

logger = logging.getLogger(__name__)

JSON_FILENAME = 'shopping_list.json'
CSV_FILENAME = 'shopping_list.csv'
EXCEL_FILENAME = 'shopping_list.xlsx'


def select_recipes(recipes: List[RecipeRecord], selectors: Optional[Sequence[str]] = None) -> List[RecipeRecord]:
    """
    Pick recipes by id or (case-insensitive) title

    Args:
        recipes: All extracted recipes
        selectors: Recipe ids or titles; None or empty selects everything

    Returns:
        Selected recipes in their original order
    """
    if not selectors:
        return list(recipes)

    wanted = {s.strip().lower() for s in selectors if s and s.strip()}
    selected = [r for r in recipes if r.id.lower() in wanted or r.title.lower() in wanted]

    found = {r.id.lower() for r in selected} | {r.title.lower() for r in selected}
    for selector in sorted(wanted - found):
        logger.warning(f"No recipe matches selector '{selector}'")
    return selected


def write_excel(df: pd.DataFrame, output_file: Path) -> None:
    """Excel workbook: one sheet with every item, one with mixed-unit items"""
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    with pd.ExcelWriter(output_file, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name='Shopping List', index=False)

        if 'Unmerged' in df.columns:
            unmerged_df = df[df['Unmerged'] != ''].copy()
        else:
            unmerged_df = df.iloc[0:0]
        unmerged_df.to_excel(writer, sheet_name='Mixed Units', index=False)

        for sheet_name in writer.sheets:
            worksheet = writer.sheets[sheet_name]

            header_fill = PatternFill(start_color='366092', end_color='366092', fill_type='solid')
            header_font = Font(bold=True, color='FFFFFF')
            for cell in worksheet[1]:
                cell.fill = header_fill
                cell.font = header_font
                cell.alignment = Alignment(horizontal='center', vertical='center')

            for column in worksheet.columns:
                column_letter = get_column_letter(column[0].column)
                max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
                worksheet.column_dimensions[column_letter].width = min(max_length + 2, 50)


def generate_shopping_list(
    input_file: Path,
    output_dir: Path,
    rules_dir: Optional[Path] = None,
    selectors: Optional[Sequence[str]] = None,
    excel: bool = True
) -> Dict[str, Any]:
    """
    Main processing function

    Args:
        input_file: Step 1 extracted_recipes.json (or the directory holding it)
        output_dir: Output directory
        rules_dir: Directory containing rule YAML files
        selectors: Recipe ids or titles to include (default: all)
        excel: Also write shopping_list.xlsx

    Returns:
        Shopping list dict
    """
    input_file = Path(input_file)
    if input_file.is_dir():
        input_file = input_file / STEP1_OUTPUT_FILENAME
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    setup_logger(log_level='INFO', log_dir=output_dir / 'logs', log_name='step2_shopping')

    logger.info(f"Loading recipes from: {input_file}")
    recipes = load_extracted_recipes(input_file)
    selected = select_recipes(recipes, selectors)
    logger.info(f"Selected {len(selected)} of {len(recipes)} recipes")

    generator = ShoppingListGenerator(RuleLoader(rules_dir))
    shopping_list = generator.generate_list(selected)

    json_path = output_dir / JSON_FILENAME
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(shopping_list, f, indent=2, ensure_ascii=False, default=str)
    logger.info(f"Saved shopping list to {json_path}")

    df = pd.DataFrame(generator.to_rows(shopping_list))
    csv_path = output_dir / CSV_FILENAME
    df.to_csv(csv_path, index=False)
    logger.info(f"Saved shopping list table to {csv_path}")

    if excel:
        excel_path = output_dir / EXCEL_FILENAME
        write_excel(df, excel_path)
        logger.info(f"Saved shopping list workbook to {excel_path}")

    return shopping_list


def main() -> None:
    """Main entry point for step2_shopping"""
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description='Step 2: Build a consolidated shopping list from extracted recipes'
    )
    parser.add_argument(
        'input_file',
        type=str,
        help='Step 1 extracted_recipes.json (or its directory)'
    )
    parser.add_argument(
        'output_dir',
        type=str,
        nargs='?',
        default='output',
        help='Output directory (default: output)'
    )
    parser.add_argument(
        '--recipe',
        action='append',
        dest='selectors',
        default=None,
        help='Recipe id or title to include (repeatable; default: all recipes)'
    )
    parser.add_argument(
        '--rules-dir',
        type=str,
        default=None,
        help='Directory containing rule YAML files (default: bundled recipe_rules)'
    )
    parser.add_argument(
        '--no-excel',
        action='store_true',
        help='Skip the Excel workbook'
    )

    args = parser.parse_args()

    try:
        generate_shopping_list(
            Path(args.input_file),
            Path(args.output_dir),
            Path(args.rules_dir) if args.rules_dir else None,
            selectors=args.selectors,
            excel=not args.no_excel,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Step 2 failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
