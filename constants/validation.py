"""
Validation Constants

Contains limits for validating requests before they reach the
inventory ledger.
"""

# Maximum field lengths
MAX_LENGTHS = {
    'ingredient_text': 500,
    'ingredient_name': 200,
    'unit': 20,
    'user_id': 128,
}

# Maximum number of ingredient lines accepted per request
MAX_INGREDIENTS_PER_RECIPE = 200

# Maximum number of deduction records accepted by an undo request
MAX_UNDO_RECORDS = 200
