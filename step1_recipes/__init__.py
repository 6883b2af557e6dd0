"""
Step 1: Extract Recipes from PDF Cookbooks
Reads PDF files page by page and extracts title, macros, ingredients and
directions using rule-driven heuristics.
"""

from .main import process_files, load_extracted_recipes
from .rule_loader import RuleLoader
from .models import TextFragment, PageContent, RecipeRecord
from .layout_reconstructor import LayoutReconstructor
from .field_classifiers import FieldClassifier
from .macro_extractor import MacroExtractor
from .title_extractor import TitleExtractor
from .ingredient_extractor import IngredientExtractor
from .direction_extractor import DirectionExtractor
from .recipe_assembler import RecipeAssembler
from .pdf_processor import PDFProcessor, PDFExtractionError
from .utils.text_extractor import TextExtractor

__all__ = [
    'process_files',
    'load_extracted_recipes',
    'RuleLoader',
    'TextFragment',
    'PageContent',
    'RecipeRecord',
    'LayoutReconstructor',
    'FieldClassifier',
    'MacroExtractor',
    'TitleExtractor',
    'IngredientExtractor',
    'DirectionExtractor',
    'RecipeAssembler',
    'PDFProcessor',
    'PDFExtractionError',
    'TextExtractor',
]
