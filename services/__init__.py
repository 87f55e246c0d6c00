"""
Services Package

Business logic modules for the pantry ledger.
"""

from .units import (
    DEFAULT_UNIT_TABLE,
    UnitTable,
    convert_unit,
    normalize_unit,
)

from .parsing import (
    ParsedIngredient,
    PlainText,
    Structured,
    coerce_ingredient,
    float_to_fraction,
    normalize_fractions,
    parse_fraction,
    parse_ingredient,
    parse_ingredients,
    to_ingredient_line,
)

from .matching import (
    DEFAULT_POLICY,
    IngredientMatch,
    MatchPolicy,
    find_inventory_match,
    match_ingredient,
    policy_from_config,
)

from .scoring import (
    PartialMatch,
    RecipeMatchResult,
    rank_recipes,
    score_recipe,
)

from .inventory_store import (
    InventoryConflictError,
    InventoryStore,
    StorageError,
)

from .deduction import (
    MODE_LENIENT,
    MODE_STRICT,
    CookResult,
    DeductionError,
    DeductionRecord,
    InsufficientStockError,
    InvalidQuantityError,
    MissingIngredientError,
    NotOwnerError,
    RecipeNotFoundError,
    UndoJournal,
    UndoResult,
    confirm_recipe_use,
    cook_recipe,
    plan_deductions,
    undo_cook,
)

__all__ = [
    # Units
    'DEFAULT_UNIT_TABLE',
    'UnitTable',
    'convert_unit',
    'normalize_unit',
    # Parsing
    'ParsedIngredient',
    'PlainText',
    'Structured',
    'coerce_ingredient',
    'float_to_fraction',
    'normalize_fractions',
    'parse_fraction',
    'parse_ingredient',
    'parse_ingredients',
    'to_ingredient_line',
    # Matching
    'DEFAULT_POLICY',
    'IngredientMatch',
    'MatchPolicy',
    'find_inventory_match',
    'match_ingredient',
    'policy_from_config',
    # Scoring
    'PartialMatch',
    'RecipeMatchResult',
    'rank_recipes',
    'score_recipe',
    # Storage
    'InventoryConflictError',
    'InventoryStore',
    'StorageError',
    # Deduction
    'MODE_LENIENT',
    'MODE_STRICT',
    'CookResult',
    'DeductionError',
    'DeductionRecord',
    'InsufficientStockError',
    'InvalidQuantityError',
    'MissingIngredientError',
    'NotOwnerError',
    'RecipeNotFoundError',
    'UndoJournal',
    'UndoResult',
    'confirm_recipe_use',
    'cook_recipe',
    'plan_deductions',
    'undo_cook',
]
