"""
Constants Package

Static tables shared by the parsing, matching and deduction services.
"""

from .units import (
    UNIT_SYNONYMS,
    BASE_UNIT_FACTORS,
    COMMON_FRACTIONS,
    UNICODE_FRACTIONS,
    FRACTION_SLASHES,
)

from .ingredients import STOP_WORDS, NOTE_KEYWORDS

from .validation import MAX_LENGTHS, MAX_INGREDIENTS_PER_RECIPE, MAX_UNDO_RECORDS

__all__ = [
    'UNIT_SYNONYMS',
    'BASE_UNIT_FACTORS',
    'COMMON_FRACTIONS',
    'UNICODE_FRACTIONS',
    'FRACTION_SLASHES',
    'STOP_WORDS',
    'NOTE_KEYWORDS',
    'MAX_LENGTHS',
    'MAX_INGREDIENTS_PER_RECIPE',
    'MAX_UNDO_RECORDS',
]
