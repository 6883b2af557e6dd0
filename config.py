#!/usr/bin/env python3
"""
Configuration file for Recipe PDF Importer
Edit these values to match your folder layout
"""

# Workflow Folder Structure
# Step 1: Extract recipes from PDF cookbooks (Rule-Driven Architecture)
# Uses rule files from recipe_rules/:
# - shared.yaml: extraction thresholds (page range, minimum page length, ...)
# - 10_*.yaml .. 30_*.yaml: section keywords, macro patterns, vocabulary
# - 40_units.yaml: unit table (also used by step 2)
STEP1_INPUT_DIR = 'data/recipes'                  # Input: PDF file or folder of PDFs
STEP1_OUTPUT_DIR = 'data/step1_output'            # Output: extracted_recipes.json (Step 2/3 input)
STEP1_RULES_DIR = None                            # None = bundled recipe_rules package

# Step 2: Shopping list
STEP2_INPUT_DIR = 'data/step1_output'             # Input: Extracted recipes from Step 1
STEP2_OUTPUT_DIR = 'data/step2_output'            # Output: shopping_list.json / .csv / .xlsx

# Step 3: Nutrition app export
STEP3_INPUT_DIR = 'data/step1_output'             # Input: Extracted recipes from Step 1
STEP3_OUTPUT_DIR = 'data/step3_output'            # Output: nutrition_export.json

# Extraction Settings (override shared.yaml from the command line only)
EXTRACTION = {
    'skip_pages': None,                # None = use extraction.skip_leading_pages from shared.yaml
    'dump_text': False,                # Also write raw_text.json for rule tuning
    'use_threads': False,              # File-level parallelism in step 1
}

# Shopping List Settings
SHOPPING_LIST = {
    'write_excel': True,               # shopping_list.xlsx next to the JSON/CSV output
}

# Logging Settings
LOGGING = {
    'level': 'INFO',                   # DEBUG, INFO, WARNING, ERROR
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    # Note: Log files are in each step's output directory (logs/step*.log)
    # Workflow-level log is at logs/workflow.log
}
