"""
Ingredient Constants

Contains the stop words and note keywords stripped from ingredient text
before an ingredient name is matched against the pantry.
"""

# Words removed from ingredient names (whole-word match)
STOP_WORDS = (
    # Unit words
    'tsp', 'teaspoon', 'teaspoons', 'tbsp', 'tablespoon', 'tablespoons',
    'cup', 'cups', 'ounce', 'ounces', 'oz', 'pound', 'pounds', 'lb', 'lbs',
    'gram', 'grams', 'g', 'kg', 'milliliter', 'milliliters', 'ml',
    'liter', 'liters', 'l', 'pinch', 'dash', 'clove', 'cloves', 'slice', 'slices',
    # Descriptors
    'diced', 'minced', 'chopped', 'fresh', 'large', 'small', 'medium',
    'extra', 'virgin', 'boneless', 'skinless', 'optional', 'taste', 'ground',
    'crushed', 'peeled', 'ripe', 'finely', 'roughly', 'softened', 'room',
    'temperature', 'cooked', 'uncooked', 'packaged', 'for', 'serving',
    # Conjunctions and articles
    'and', 'or', 'with', 'of', 'to', 'the', 'a', 'an',
)

# Keywords indicating a comma-separated note to drop from ingredient text
NOTE_KEYWORDS = {
    'optional', 'divided', 'or more', 'or less', 'to taste',
    'for serving', 'for garnish', 'at room temp', 'softened',
    'melted', 'chopped', 'diced', 'minced', 'sliced', 'cubed',
    'sifted', 'packed', 'beaten', 'room temperature', 'thawed',
    'drained', 'rinsed', 'peeled', 'seeded', 'cored', 'trimmed',
    'cut into', 'plus more', 'as needed', 'torn', 'shredded'
}
