#!/usr/bin/env python3
"""
Step 1 Main Entry Point - Rule-Driven Recipe Extraction

Reads one recipe PDF (or every PDF in a directory) and writes the recipes
found, one per qualifying page, to extracted_recipes.json.

RULE FILES (recipe_rules/, loaded by RuleLoader):
   shared.yaml                   - extraction thresholds and flags
   10_section_keywords.yaml      - ingredient/direction headers, boundaries
   20_macro_patterns.yaml        - nutrition value patterns
   30_ingredient_vocabulary.yaml - food words, cooking verbs, bullets
   40_units.yaml                 - unit vocabulary (also used by step 2)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

from .logger import setup_logger
from .models import RecipeRecord
from .pdf_processor import PDFExtractionError, PDFProcessor
from .rule_loader import RuleLoader

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = 'extracted_recipes.json'
RAW_TEXT_FILENAME = 'raw_text.json'


def find_pdf_files(input_path: Path) -> List[Path]:
    if input_path.is_file():
        return [input_path]
    return sorted(p for p in input_path.glob('**/*') if p.suffix.lower() == '.pdf')


def process_files(
    input_path: Path,
    output_dir: Path,
    rules_dir: Optional[Path] = None,
    skip_pages: Optional[int] = None,
    dump_text: bool = False,
    use_threads: bool = False,
    max_workers: int = 4
) -> Dict[str, List[RecipeRecord]]:
    """
    Main processing function

    Args:
        input_path: A PDF file or a directory searched recursively for PDFs
        output_dir: Output directory for JSON and logs
        rules_dir: Directory containing rule YAML files (default: recipe_rules package)
        skip_pages: Leading pages to ignore in every file
        dump_text: Also write per-page reconstructed text to raw_text.json
        use_threads: Process files in parallel (file-level only, no shared state)
        max_workers: Maximum number of parallel workers

    Returns:
        Mapping of file name -> recipes

    Raises:
        PDFExtractionError: When a single input file cannot be read
    """
    input_path = Path(input_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    setup_logger(log_level='INFO', log_dir=output_dir / 'logs', log_name='step1_recipes')

    rule_loader = RuleLoader(rules_dir)
    processor = PDFProcessor(rule_loader, skip_pages=skip_pages)

    pdf_files = find_pdf_files(input_path)
    logger.info(f"Found {len(pdf_files)} PDF files in {input_path}")
    single_file = input_path.is_file()

    def process_one(pdf_file: Path) -> Optional[List[RecipeRecord]]:
        try:
            return processor.process_file(pdf_file)
        except PDFExtractionError as e:
            if single_file:
                raise
            logger.error(f"Skipping {pdf_file.name}: {e}")
            return None

    results: Dict[str, List[RecipeRecord]] = {}
    if use_threads and len(pdf_files) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(process_one, f): f for f in pdf_files}
            for future in as_completed(futures):
                recipes = future.result()
                if recipes is not None:
                    results[futures[future].name] = recipes
        # Keep output independent of completion order
        results = {f.name: results[f.name] for f in pdf_files if f.name in results}
    else:
        for pdf_file in pdf_files:
            recipes = process_one(pdf_file)
            if recipes is not None:
                results[pdf_file.name] = recipes

    save_extracted_recipes(results, output_dir / OUTPUT_FILENAME)

    if dump_text:
        raw_text = {}
        for pdf_file in pdf_files:
            try:
                raw_text[pdf_file.name] = processor.dump_raw_text(pdf_file)
            except PDFExtractionError as e:
                logger.error(f"Cannot dump text of {pdf_file.name}: {e}")
        raw_path = output_dir / RAW_TEXT_FILENAME
        with open(raw_path, 'w', encoding='utf-8') as f:
            json.dump(raw_text, f, indent=2, ensure_ascii=False)
        logger.info(f"Saved raw page text to {raw_path}")

    total = sum(len(r) for r in results.values())
    logger.info(f"Step 1 complete: {total} recipes from {len(results)} files")
    return results


def save_extracted_recipes(results: Dict[str, List[RecipeRecord]], output_file: Path) -> None:
    data: List[Dict[str, Any]] = [
        {
            'source_file': source_file,
            'recipe_count': len(recipes),
            'recipes': [r.to_dict() for r in recipes],
        }
        for source_file, recipes in results.items()
    ]
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)
    logger.info(f"Saved extracted recipes to {output_file}")


def load_extracted_recipes(input_file: Path) -> List[RecipeRecord]:
    """
    Load step 1 output

    Args:
        input_file: extracted_recipes.json

    Returns:
        Recipes of all files, in file order then page order
    """
    with open(input_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    # Accept a bare list of recipe dicts as well as the per-file envelope
    recipes: List[RecipeRecord] = []
    for entry in data:
        if 'recipes' in entry:
            recipes.extend(RecipeRecord.from_dict(r) for r in entry['recipes'])
        else:
            recipes.append(RecipeRecord.from_dict(entry))
    return recipes


def main() -> None:
    """Main entry point for step1_recipes"""
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description='Step 1: Extract recipes (title, macros, ingredients, directions) from PDF files',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'input_path',
        type=str,
        help='PDF file or directory containing PDF files'
    )
    parser.add_argument(
        'output_dir',
        type=str,
        nargs='?',
        default='output',
        help='Output directory (default: output)'
    )
    parser.add_argument(
        '--rules-dir',
        type=str,
        default=None,
        help='Directory containing rule YAML files (default: bundled recipe_rules)'
    )
    parser.add_argument(
        '--skip-pages',
        type=int,
        default=None,
        help='Number of leading pages to ignore (cover, table of contents)'
    )
    parser.add_argument(
        '--dump-text',
        action='store_true',
        help='Also write reconstructed page text to raw_text.json'
    )
    parser.add_argument(
        '--use-threads',
        action='store_true',
        help='Process files in parallel using ThreadPoolExecutor (default: False)'
    )

    args = parser.parse_args()

    rules_dir = Path(args.rules_dir) if args.rules_dir else None

    logger.info(f"Input: {args.input_path}")
    logger.info(f"Output directory: {args.output_dir}")

    try:
        process_files(
            Path(args.input_path),
            Path(args.output_dir),
            rules_dir,
            skip_pages=args.skip_pages,
            dump_text=args.dump_text,
            use_threads=args.use_threads,
        )
    except PDFExtractionError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
