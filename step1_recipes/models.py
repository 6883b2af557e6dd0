#!/usr/bin/env python3
"""
Data model for recipe extraction

TextFragment and PageContent come from the PDF text layer; RecipeRecord is the
output of the recipe assembler. All three are immutable.
"""

import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

MACRO_KEYS: Tuple[str, ...] = ('calories', 'protein', 'carbs', 'fat', 'fiber')


@dataclass(frozen=True)
class TextFragment:
    """A run of text at a position on one page (PDF space, origin bottom-left)"""
    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class PageContent:
    """
    Text of one page as delivered by the text layer.

    fragments is None when the backend could not provide positions; text then
    carries the page text with its own line breaks.
    """
    page_number: int
    fragments: Optional[Tuple[TextFragment, ...]] = None
    text: str = ''


@dataclass(frozen=True)
class RecipeRecord:
    """One recipe extracted from one page"""
    page_number: int
    title: str
    macros: Mapping[str, float] = field(default_factory=dict)
    ingredients: Tuple[str, ...] = ()
    directions: Tuple[str, ...] = ()
    original_text: str = ''
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        # Read-only copies so the caller's containers cannot change the record
        object.__setattr__(self, 'macros', MappingProxyType(dict(self.macros)))
        object.__setattr__(self, 'ingredients', tuple(self.ingredients))
        object.__setattr__(self, 'directions', tuple(self.directions))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'page_number': self.page_number,
            'title': self.title,
            'macros': dict(self.macros),
            'ingredients': list(self.ingredients),
            'directions': list(self.directions),
            'original_text': self.original_text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RecipeRecord':
        """Rebuild a record from step 1 JSON output"""
        macros = {}
        for key, value in (data.get('macros') or {}).items():
            if key not in MACRO_KEYS:
                continue
            try:
                macros[key] = float(value)
            except (TypeError, ValueError):
                continue
        kwargs = {
            'page_number': int(data.get('page_number') or 0),
            'title': data.get('title') or '',
            'macros': macros,
            'ingredients': tuple(data.get('ingredients') or ()),
            'directions': tuple(data.get('directions') or ()),
            'original_text': data.get('original_text') or '',
        }
        if data.get('id'):
            kwargs['id'] = str(data['id'])
        return cls(**kwargs)
