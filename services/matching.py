"""
Ingredient Matching Service

Functions for finding a recipe ingredient in a user's pantry and comparing
the quantity on hand with the quantity the recipe needs.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from .parsing import ParsedIngredient, parse_ingredient
from .units import DEFAULT_UNIT_TABLE


@dataclass(frozen=True)
class MatchPolicy:
    """
    Tunable constants for matching and deduction.

    incomparable_percentage: percentage reported when an item is found but
        its unit cannot be converted to the recipe's unit.
    cap_match_score: clamp recipe match scores at 100.
    deduct_unconvertible_raw: when cooking, deduct the recipe quantity as-is
        if the units cannot be converted (otherwise skip the ingredient).
    """
    incomparable_percentage: int = 50
    cap_match_score: bool = False
    deduct_unconvertible_raw: bool = True


DEFAULT_POLICY = MatchPolicy()


def policy_from_config(config):
    """Build a MatchPolicy from a Flask config (or any mapping)."""
    return MatchPolicy(
        incomparable_percentage=int(config.get('MATCH_INCOMPARABLE_PERCENTAGE', 50)),
        cap_match_score=bool(config.get('MATCH_SCORE_CAP', False)),
        deduct_unconvertible_raw=bool(config.get('DEDUCT_UNCONVERTIBLE_RAW', True)),
    )


@dataclass(frozen=True)
class IngredientMatch:
    status: str  # 'full', 'partial' or 'none'
    parsed: ParsedIngredient
    inventory_item: Optional[Any] = None
    has_enough: bool = False
    percentage: int = 0
    comparable: bool = False


def round_half_up(value):
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def item_field(item, key, default=None):
    """Read a field from an inventory item given as a model instance or a dict."""
    if isinstance(item, dict):
        value = item.get(key, default)
    else:
        value = getattr(item, key, default)
    return default if value is None else value


def normalize_name(name):
    return ' '.join(str(name or '').lower().split())


def names_overlap(a, b):
    """True when two ingredient names are equal or one contains the other."""
    a = normalize_name(a)
    b = normalize_name(b)
    if not a or not b:
        return False
    return a == b or a in b or b in a


def find_inventory_match(name, inventory):
    """Return the first inventory item whose name overlaps ``name``, in inventory order."""
    for item in inventory:
        if names_overlap(item_field(item, 'name', ''), name):
            return item
    return None


def match_ingredient(ingredient_line, inventory, units=None, policy=None):
    """
    Match one recipe ingredient line against the pantry.

    Returns an IngredientMatch:
    - 'none' when no pantry item name overlaps the ingredient name
    - 'partial' with the policy placeholder percentage when the units
      cannot be compared
    - otherwise 'full' or 'partial' depending on the quantity on hand
    """
    units = units or DEFAULT_UNIT_TABLE
    policy = policy or DEFAULT_POLICY
    parsed = parse_ingredient(ingredient_line, units)

    item = find_inventory_match(parsed.name, inventory)
    if item is None:
        return IngredientMatch(status='none', parsed=parsed)

    item_unit = item_field(item, 'unit')
    if not units.is_comparable(item_unit, parsed.unit):
        return IngredientMatch(
            status='partial',
            parsed=parsed,
            inventory_item=item,
            has_enough=False,
            percentage=policy.incomparable_percentage,
            comparable=False,
        )

    have = units.convert(float(item_field(item, 'quantity', 0)), item_unit, parsed.unit)
    need = parsed.quantity
    has_enough = have >= need
    percentage = round_half_up(have / need * 100) if need > 0 else 100

    return IngredientMatch(
        status='full' if has_enough else 'partial',
        parsed=parsed,
        inventory_item=item,
        has_enough=has_enough,
        percentage=percentage,
        comparable=True,
    )
