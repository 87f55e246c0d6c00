"""
Recipe Scoring Service

Aggregates per-ingredient pantry matches into a recipe-level score.
"""

from dataclasses import dataclass, field
from typing import Any, List

from .matching import DEFAULT_POLICY, match_ingredient, round_half_up
from .parsing import to_ingredient_line


@dataclass(frozen=True)
class PartialMatch:
    ingredient: str
    percentage: int
    inventory_item: Any


@dataclass(frozen=True)
class RecipeMatchResult:
    full_matches: List[str] = field(default_factory=list)
    partial_matches: List[PartialMatch] = field(default_factory=list)
    missing_ingredients: List[str] = field(default_factory=list)
    match_score: int = 0
    total_ingredients: int = 0


def score_recipe(ingredient_lines, inventory, units=None, policy=None):
    """
    Match every ingredient of a recipe against the pantry.

    Full matches weigh 100, partial matches weigh their percentage and
    missing ingredients weigh 0; the score is the rounded average. Scores
    above 100 are possible when partial percentages are large, unless the
    policy caps them.
    """
    policy = policy or DEFAULT_POLICY
    full_matches = []
    partial_matches = []
    missing = []

    lines = [to_ingredient_line(entry) for entry in ingredient_lines]
    for line in lines:
        match = match_ingredient(line, inventory, units=units, policy=policy)
        if match.status == 'full':
            full_matches.append(line)
        elif match.status == 'partial' and match.inventory_item is not None:
            partial_matches.append(PartialMatch(line, match.percentage, match.inventory_item))
        else:
            missing.append(line)

    total = len(lines)
    if total == 0:
        return RecipeMatchResult()

    weighted = len(full_matches) * 100 + sum(pm.percentage for pm in partial_matches)
    score = round_half_up(weighted / total)
    if policy.cap_match_score:
        score = min(score, 100)

    return RecipeMatchResult(
        full_matches=full_matches,
        partial_matches=partial_matches,
        missing_ingredients=missing,
        match_score=score,
        total_ingredients=total,
    )


def rank_recipes(recipes, inventory, units=None, policy=None):
    """
    Score several recipes and order them best match first.

    ``recipes`` is an iterable of (key, ingredient_lines) pairs; returns a
    list of (key, RecipeMatchResult), ties kept in input order.
    """
    scored = [
        (key, score_recipe(lines, inventory, units=units, policy=policy))
        for key, lines in recipes
    ]
    scored.sort(key=lambda pair: pair[1].match_score, reverse=True)
    return scored
