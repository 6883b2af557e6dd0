#!/usr/bin/env python3
"""
Main Workflow Script - 3-Step Recipe Processing Pipeline
        Step 1: Extract recipes from PDF cookbooks
        Step 2: Build a consolidated shopping list
        Step 3: Export recipes for a nutrition tracking app
"""

import sys
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional
from datetime import datetime

# Load environment variables from .env file if it exists (e.g. RECIPES_HOT_RELOAD=1)
_env_file = Path(__file__).parent / '.env'
if _env_file.exists():
    with open(_env_file, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#') and '=' in line:
                key, value = line.split('=', 1)
                os.environ[key.strip()] = value.strip()

from step1_recipes.main import process_files
from step1_recipes.pdf_processor import PDFExtractionError
from step2_shopping.main import generate_shopping_list
from step3_export.main import export_recipes
from config import (
    EXTRACTION, LOGGING, SHOPPING_LIST,
    STEP1_INPUT_DIR, STEP1_OUTPUT_DIR, STEP1_RULES_DIR,
    STEP2_OUTPUT_DIR, STEP3_OUTPUT_DIR,
)


def setup_logging(log_level: str = 'INFO', log_dir: Optional[str] = None):
    """Setup logging configuration

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (defaults to 'logs/')
    """
    log_dir = log_dir or 'logs'
    log_file = Path(log_dir) / 'workflow.log'

    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOGGING['format'],
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return logging.getLogger(__name__)


class RecipeWorkflow:
    """3-Step Recipe Processing Workflow"""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize workflow with configuration

        Args:
            config: Overrides for the module-level settings in config.py
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        rules_dir = self.config.get('STEP1_RULES_DIR', STEP1_RULES_DIR)
        self.rules_dir = Path(rules_dir) if rules_dir else None

    def _banner(self, title: str):
        self.logger.info("=" * 80)
        self.logger.info(title)
        self.logger.info("=" * 80)

    def step1_extract_recipes(self, input_path: Optional[str] = None,
                              output_dir: Optional[str] = None,
                              skip_pages: Optional[int] = None) -> Dict:
        """
        Step 1: Extract recipes from PDF files

        Args:
            input_path: PDF file or directory (defaults to STEP1_INPUT_DIR)
            output_dir: Output directory (defaults to STEP1_OUTPUT_DIR)
            skip_pages: Leading pages to ignore (defaults to EXTRACTION['skip_pages'])

        Returns:
            Mapping of file name -> recipe count
        """
        self._banner("STEP 1: Extract Recipes from PDF")

        input_path = Path(input_path or self.config.get('STEP1_INPUT_DIR', STEP1_INPUT_DIR))
        output_path = Path(output_dir or self.config.get('STEP1_OUTPUT_DIR', STEP1_OUTPUT_DIR))
        if skip_pages is None:
            skip_pages = EXTRACTION.get('skip_pages')

        if not input_path.exists():
            self.logger.error(f"Input not found: {input_path}")
            raise FileNotFoundError(f"Input not found: {input_path}")

        self.logger.info(f"Input: {input_path}")
        self.logger.info(f"Output directory: {output_path}")

        results = process_files(
            input_path,
            output_path,
            self.rules_dir,
            skip_pages=skip_pages,
            dump_text=EXTRACTION.get('dump_text', False),
            use_threads=EXTRACTION.get('use_threads', False),
        )
        counts = {name: len(recipes) for name, recipes in results.items()}
        self.logger.info(f"Step 1 Complete: {sum(counts.values())} recipes from {len(counts)} files")
        return counts

    def step2_shopping_list(self, input_dir: Optional[str] = None,
                            output_dir: Optional[str] = None,
                            selectors: Optional[List[str]] = None) -> Dict:
        """
        Step 2: Build the shopping list for the selected recipes

        Args:
            input_dir: Step 1 output directory (defaults to STEP1_OUTPUT_DIR)
            output_dir: Output directory (defaults to STEP2_OUTPUT_DIR)
            selectors: Recipe ids or titles (default: all recipes)

        Returns:
            Shopping list summary
        """
        self._banner("STEP 2: Shopping List")

        input_path = Path(input_dir or self.config.get('STEP1_OUTPUT_DIR', STEP1_OUTPUT_DIR))
        output_path = Path(output_dir or self.config.get('STEP2_OUTPUT_DIR', STEP2_OUTPUT_DIR))

        shopping_list = generate_shopping_list(
            input_path,
            output_path,
            self.rules_dir,
            selectors=selectors,
            excel=SHOPPING_LIST.get('write_excel', True),
        )
        self.logger.info(f"Step 2 Complete: {shopping_list['summary']['total_items']} items")
        return shopping_list['summary']

    def step3_export(self, input_dir: Optional[str] = None,
                     output_dir: Optional[str] = None,
                     selectors: Optional[List[str]] = None) -> Dict:
        """
        Step 3: Export recipes for the nutrition app

        Args:
            input_dir: Step 1 output directory (defaults to STEP1_OUTPUT_DIR)
            output_dir: Output directory (defaults to STEP3_OUTPUT_DIR)
            selectors: Recipe ids or titles (default: all recipes)

        Returns:
            Export summary
        """
        self._banner("STEP 3: Nutrition App Export")

        input_path = Path(input_dir or self.config.get('STEP1_OUTPUT_DIR', STEP1_OUTPUT_DIR))
        output_path = Path(output_dir or self.config.get('STEP3_OUTPUT_DIR', STEP3_OUTPUT_DIR))

        export_data = export_recipes(input_path, output_path, self.rules_dir, selectors=selectors)
        self.logger.info(f"Step 3 Complete: {export_data['total_recipes']} recipes exported")
        return {'total_recipes': export_data['total_recipes'], 'export_date': export_data['export_date']}

    def run_all(self, input_path: Optional[str] = None,
                step1_output_dir: Optional[str] = None,
                step2_output_dir: Optional[str] = None,
                step3_output_dir: Optional[str] = None,
                skip_pages: Optional[int] = None,
                selectors: Optional[List[str]] = None) -> Dict:
        """
        Run all steps; a failing step 2 or 3 is recorded in the summary

        Returns:
            Summary dict per step
        """
        summary = {'started_at': datetime.now().isoformat()}

        summary['step1'] = self.step1_extract_recipes(input_path, step1_output_dir, skip_pages)
        step1_output = step1_output_dir or self.config.get('STEP1_OUTPUT_DIR', STEP1_OUTPUT_DIR)

        try:
            summary['step2'] = self.step2_shopping_list(step1_output, step2_output_dir, selectors)
        except Exception as e:
            self.logger.error(f"Step 2 failed: {e}", exc_info=True)
            summary['step2'] = {'status': 'failed', 'error': str(e)}

        try:
            summary['step3'] = self.step3_export(step1_output, step3_output_dir, selectors)
        except Exception as e:
            self.logger.error(f"Step 3 failed: {e}", exc_info=True)
            summary['step3'] = {'status': 'failed', 'error': str(e)}

        summary['completed_at'] = datetime.now().isoformat()

        self._banner("WORKFLOW COMPLETE")
        self.logger.info(f"Summary: {json.dumps(summary, indent=2, default=str)}")
        return summary


def main():
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Recipe Processing Workflow')
    parser.add_argument('--step', type=int, choices=[1, 2, 3],
                        help='Run specific step only (1=extract, 2=shopping list, 3=export)')
    parser.add_argument('--input', type=str,
                        help='PDF file or directory of PDFs (Step 1 input)')
    parser.add_argument('--step1-output', type=str,
                        help='Step 1 output directory (Step 2/3 input)')
    parser.add_argument('--step2-output', type=str,
                        help='Step 2 output directory (shopping list)')
    parser.add_argument('--step3-output', type=str,
                        help='Step 3 output directory (nutrition export)')
    parser.add_argument('--skip-pages', type=int, default=None,
                        help='Leading PDF pages to ignore (cover, contents)')
    parser.add_argument('--recipe', action='append', dest='selectors', default=None,
                        help='Recipe id or title for steps 2/3 (repeatable; default: all)')
    parser.add_argument('--log-level', type=str, default=LOGGING['level'],
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])

    args = parser.parse_args()

    logger = setup_logging(args.log_level)

    workflow = RecipeWorkflow()

    try:
        if args.step == 1:
            workflow.step1_extract_recipes(args.input, args.step1_output, args.skip_pages)
        elif args.step == 2:
            workflow.step2_shopping_list(args.step1_output, args.step2_output, args.selectors)
        elif args.step == 3:
            workflow.step3_export(args.step1_output, args.step3_output, args.selectors)
        else:
            workflow.run_all(
                input_path=args.input,
                step1_output_dir=args.step1_output,
                step2_output_dir=args.step2_output,
                step3_output_dir=args.step3_output,
                skip_pages=args.skip_pages,
                selectors=args.selectors,
            )
    except (PDFExtractionError, FileNotFoundError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
