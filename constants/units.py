"""
Unit Constants and Conversion Tables

Contains unit synonyms, conversion factors, and fraction tables used to
build the unit table for ingredient parsing and inventory matching.
"""

# Unit synonyms for ingredient parsing (lowercase token -> canonical unit)
UNIT_SYNONYMS = {
    # Volume
    'ml': 'ml', 'milliliter': 'ml', 'milliliters': 'ml', 'millilitre': 'ml', 'millilitres': 'ml',
    'l': 'l', 'liter': 'l', 'liters': 'l', 'litre': 'l', 'litres': 'l',
    'tsp': 'tsp', 'tsps': 'tsp', 'teaspoon': 'tsp', 'teaspoons': 'tsp', 'ts': 'tsp',
    'tbsp': 'tbsp', 'tbsps': 'tbsp', 'tablespoon': 'tbsp', 'tablespoons': 'tbsp', 'tbs': 'tbsp', 'tb': 'tbsp',
    'fl oz': 'fl oz', 'floz': 'fl oz', 'fluid ounce': 'fl oz', 'fluid ounces': 'fl oz',
    'cup': 'cup', 'cups': 'cup', 'c': 'cup',
    'pint': 'pint', 'pints': 'pint', 'pt': 'pint',
    'quart': 'quart', 'quarts': 'quart', 'qt': 'quart',
    'gallon': 'gallon', 'gallons': 'gallon', 'gal': 'gallon',
    'dash': 'dash', 'dashes': 'dash',
    'pinch': 'pinch', 'pinches': 'pinch',
    'drop': 'drop', 'drops': 'drop',
    # Weight
    'g': 'g', 'gram': 'g', 'grams': 'g', 'gr': 'g',
    'kg': 'kg', 'kilogram': 'kg', 'kilograms': 'kg', 'kgs': 'kg',
    'mg': 'mg', 'milligram': 'mg', 'milligrams': 'mg',
    'oz': 'oz', 'ounce': 'oz', 'ounces': 'oz',
    'lb': 'lb', 'lbs': 'lb', 'pound': 'lb', 'pounds': 'lb',
    # Count
    'piece': 'piece', 'pieces': 'piece', 'pc': 'piece', 'pcs': 'piece',
    'unit': 'piece', 'units': 'piece', 'item': 'piece', 'items': 'piece',
    'each': 'piece', 'ea': 'piece', 'whole': 'piece', 'count': 'piece',
    # Count-like units
    'clove': 'clove', 'cloves': 'clove',
    'slice': 'slice', 'slices': 'slice',
    'leaf': 'leaf', 'leaves': 'leaf',
    'sprig': 'sprig', 'sprigs': 'sprig',
    'stalk': 'stalk', 'stalks': 'stalk',
    'head': 'head', 'heads': 'head',
    'bunch': 'bunch', 'bunches': 'bunch',
    'can': 'can', 'cans': 'can',
    'jar': 'jar', 'jars': 'jar',
    'package': 'package', 'packages': 'package', 'pkg': 'package',
    'bag': 'bag', 'bags': 'bag',
    'box': 'box', 'boxes': 'box',
    'stick': 'stick', 'sticks': 'stick',
}

# Unit conversion factors (canonical unit -> (base_unit, factor))
BASE_UNIT_FACTORS = {
    # Volume: base = ml
    'ml': ('ml', 1),
    'l': ('ml', 1000),
    'tsp': ('ml', 4.92892),
    'tbsp': ('ml', 14.7868),
    'fl oz': ('ml', 29.5735),
    'cup': ('ml', 236.588),
    'pint': ('ml', 473.176),
    'quart': ('ml', 946.353),
    'gallon': ('ml', 3785.41),
    'dash': ('ml', 0.616115),
    'pinch': ('ml', 0.308058),
    'drop': ('ml', 0.051343),
    # Weight: base = g
    'g': ('g', 1),
    'kg': ('g', 1000),
    'mg': ('g', 0.001),
    'oz': ('g', 28.3495),
    'lb': ('g', 453.592),
    # Count: base = piece, every count unit compares one to one
    'piece': ('piece', 1),
    'clove': ('piece', 1),
    'slice': ('piece', 1),
    'leaf': ('piece', 1),
    'sprig': ('piece', 1),
    'stalk': ('piece', 1),
    'head': ('piece', 1),
    'can': ('piece', 1),
    'jar': ('piece', 1),
    'package': ('piece', 1),
    'bag': ('piece', 1),
    'box': ('piece', 1),
}

# Common fractions for display (using precise values)
COMMON_FRACTIONS = {
    0.125: '1/8', 0.25: '1/4', 1/3: '1/3', 0.375: '3/8',
    0.5: '1/2', 0.625: '5/8', 2/3: '2/3', 0.75: '3/4', 0.875: '7/8'
}

# Unicode fraction characters mapping
UNICODE_FRACTIONS = {
    '\u00bd': 0.5,    # ½
    '\u2153': 1/3,    # ⅓
    '\u2154': 2/3,    # ⅔
    '\u00bc': 0.25,   # ¼
    '\u00be': 0.75,   # ¾
    '\u2155': 0.2,    # ⅕
    '\u2156': 0.4,    # ⅖
    '\u2157': 0.6,    # ⅗
    '\u2158': 0.8,    # ⅘
    '\u2159': 1/6,    # ⅙
    '\u215a': 5/6,    # ⅚
    '\u215b': 0.125,  # ⅛
    '\u215c': 0.375,  # ⅜
    '\u215d': 0.625,  # ⅝
    '\u215e': 0.875,  # ⅞
}

# Slash characters treated as an ASCII '/' inside quantities
FRACTION_SLASHES = ('\u2044', '\u2215')  # ⁄ ∕
