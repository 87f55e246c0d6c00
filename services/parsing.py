"""
Parsing Service

Functions for parsing ingredient text and fractions from recipe data.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from constants import (
    COMMON_FRACTIONS,
    FRACTION_SLASHES,
    NOTE_KEYWORDS,
    STOP_WORDS,
    UNICODE_FRACTIONS,
)
from .units import DEFAULT_UNIT_TABLE, normalize_unit

_AMOUNT = r'\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+(?:\.\d+)?'

# Leading quantity: mixed fraction, simple fraction or number, optionally a range
QUANTITY_PATTERN = re.compile(
    r'^(?P<amount>' + _AMOUNT + r')(?:\s*[-\u2013\u2014]\s*(?:' + _AMOUNT + r'))?'
)

ASIDE_PATTERN = re.compile(r'\s*\([^)]*\)?')
DASH_PATTERN = re.compile(r'[-\u2013\u2014]')
STOP_WORD_PATTERN = re.compile(r'\b(?:' + '|'.join(re.escape(w) for w in STOP_WORDS) + r')\b')
NOTE_PATTERN = re.compile(r'\b(?:' + '|'.join(re.escape(k) for k in sorted(NOTE_KEYWORDS)) + r')\b')


@dataclass(frozen=True)
class ParsedIngredient:
    original: str
    name: str
    quantity: float = 1.0
    unit: Optional[str] = None


@dataclass(frozen=True)
class PlainText:
    """Ingredient given as a free-text line, e.g. ``"2 cups flour"``."""
    text: str


@dataclass(frozen=True)
class Structured:
    """Ingredient given as separate fields, e.g. ``{"name": "flour", "qty": 2}``."""
    name: str
    qty: Optional[float] = None
    unit: Optional[str] = None


def float_to_fraction(value):
    """Convert float to fraction string for display."""
    if value is None or value == 0:
        return '0'
    # Check if it's a whole number
    if value == int(value):
        return str(int(value))
    # Split into whole and decimal parts
    whole = int(value)
    decimal = value - whole
    # Check common fractions (with tolerance)
    for dec, frac in COMMON_FRACTIONS.items():
        if abs(decimal - dec) < 0.02:
            if whole > 0:
                return f"{whole} {frac}"
            return frac
    return f"{value:.2f}".rstrip('0').rstrip('.')


def normalize_fractions(text):
    """Replace Unicode fraction characters and slashes with ASCII equivalents."""
    # First, normalize all whitespace (including non-breaking spaces) to regular spaces
    text = re.sub(r'[\s\u00a0\u2000-\u200b]+', ' ', text)

    for slash in FRACTION_SLASHES:
        text = text.replace(slash, '/')

    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            # Mixed fraction like "1½" or "1 ½"
            pattern = r'(\d+)\s*' + re.escape(char)
            text = re.sub(pattern, lambda m: str(float(m.group(1)) + value), text)
            text = text.replace(char, str(value))
    return text


def parse_fraction(value, default=1.0, min_val=None):
    """
    Parse a fraction string like '1 1/2' or '1/4' into a float.
    Also handles plain numbers like '2' or '0.5'.
    """
    if value is None or value == '':
        return default

    value = normalize_fractions(str(value)).strip()
    total = 0.0

    try:
        # Try plain float first
        total = float(value)
    except ValueError:
        # Parse as fraction(s)
        parts = value.split()
        for part in parts:
            if '/' in part:
                try:
                    num, den = part.split('/')
                    total += float(num) / float(den)
                except (ValueError, ZeroDivisionError):
                    pass
            else:
                try:
                    total += float(part)
                except ValueError:
                    pass

    if not math.isfinite(total) or total <= 0:
        total = default
    if min_val is not None and total is not None and total < min_val:
        total = min_val

    return total


def _parse_amount(amount):
    """Convert a matched amount ('2', '1.5', '1/2', '1 1/2') to float, None on a zero denominator or overflow."""
    mixed = re.match(r'^(\d+)\s+(\d+)\s*/\s*(\d+)$', amount)
    frac = re.match(r'^(\d+)\s*/\s*(\d+)$', amount)
    if mixed:
        whole, num, den = (float(g) for g in mixed.groups())
        value = whole + num / den if den else None
    elif frac:
        num, den = (float(g) for g in frac.groups())
        value = num / den if den else None
    else:
        value = float(amount)

    if value is None or not math.isfinite(value):
        return None
    return value


def _strip_notes(text):
    # Only drop comma content when it is a note, keep names like "boneless, skinless"
    comma_match = re.search(r',\s*(.*)$', text)
    if comma_match:
        after_comma = comma_match.group(1)
        if NOTE_PATTERN.search(after_comma):
            text = text[:comma_match.start()]
    return text


def _take_unit(words, units):
    """Return (unit, remaining_words) if the leading word(s) name a known unit."""
    if len(words) > 1:
        pair = normalize_unit(words[0] + ' ' + words[1])
        if units.is_known(pair):
            return pair, words[2:]
    if words:
        first = normalize_unit(words[0])
        if first and units.is_known(first):
            return first, words[1:]
    return None, words


def parse_ingredient(text, units=None):
    """
    Parse ingredient text like '2 cups flour' into a ParsedIngredient.

    Never raises. Lines without a leading number get quantity 1, and
    ranges like '3-4' keep the lower bound.
    """
    units = units or DEFAULT_UNIT_TABLE
    original = text.strip() if isinstance(text, str) else ('' if text is None else str(text).strip())

    line = normalize_fractions(original).lower().strip()
    line = ASIDE_PATTERN.sub(' ', line).strip()

    quantity = 1.0
    qty_match = QUANTITY_PATTERN.match(line)
    if qty_match:
        value = _parse_amount(qty_match.group('amount'))
        if value is not None:
            quantity = value
            line = line[qty_match.end():].strip()

    unit, words = _take_unit(line.split(), units)
    if unit:
        line = ' '.join(words)

    pre_strip = ' '.join(line.split())

    name = _strip_notes(line)
    name = ASIDE_PATTERN.sub(' ', name)
    name = DASH_PATTERN.sub(' ', name)
    name = STOP_WORD_PATTERN.sub(' ', name)
    name = ' '.join(name.split()).strip(' ,;:')

    if not name:
        # Fall back when stripping removed everything
        name = pre_strip or ' '.join(normalize_fractions(original).lower().split())

    return ParsedIngredient(original=original, name=name, quantity=quantity, unit=unit)


def _coerce_qty(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            value = float(value)
        except OverflowError:
            return None
        return value if math.isfinite(value) and value > 0 else None
    return parse_fraction(value, default=None)


def coerce_ingredient(entry):
    """Turn a recipe ingredient entry (str, dict or variant) into PlainText or Structured."""
    if isinstance(entry, (PlainText, Structured)):
        return entry
    if isinstance(entry, dict):
        return Structured(
            name=str(entry.get('name') or '').strip(),
            qty=_coerce_qty(entry.get('qty', entry.get('quantity'))),
            unit=normalize_unit(entry.get('unit')),
        )
    return PlainText('' if entry is None else str(entry))


def _format_qty(qty):
    if math.isfinite(qty) and qty == int(qty):
        return str(int(qty))
    return str(qty)


def to_ingredient_line(entry):
    """Normalize a recipe ingredient entry into a single line for the parser."""
    entry = coerce_ingredient(entry)
    if isinstance(entry, PlainText):
        return entry.text.strip()
    parts = []
    if entry.qty is not None:
        parts.append(_format_qty(entry.qty))
    if entry.unit:
        parts.append(entry.unit)
    if entry.name:
        parts.append(entry.name)
    return ' '.join(parts)


def parse_ingredients(entries, units=None):
    """Parse a list of recipe ingredient entries."""
    return [parse_ingredient(to_ingredient_line(entry), units) for entry in entries]
