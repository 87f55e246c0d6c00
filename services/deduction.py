"""
Inventory Deduction Service

Deducts recipe ingredients from a user's pantry.

Two entry points share one planner:
- cook_recipe: lenient. Ingredient names match by containment, units are
  converted when possible, unmatched ingredients are skipped. Writes go
  through one all-or-nothing batch based on a snapshot read beforehand, so
  two concurrent cooks may both deduct from the same starting quantity.
- confirm_recipe_use: strict. Only the recipe owner may confirm, names must
  match exactly, every ingredient must be in stock, and the read and write
  happen inside one serializable transaction.

undo_cook restores the quantities recorded by the most recent cook.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .matching import DEFAULT_POLICY, find_inventory_match, item_field, normalize_name
from .parsing import PlainText, coerce_ingredient, parse_ingredients
from .units import DEFAULT_UNIT_TABLE

logger = logging.getLogger(__name__)

MODE_LENIENT = 'lenient'
MODE_STRICT = 'strict'


class DeductionError(Exception):
    """Base class for deductions refused before anything was written."""
    retryable = False


class RecipeNotFoundError(DeductionError):
    def __init__(self, recipe_id):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe {recipe_id} not found")


class NotOwnerError(DeductionError):
    def __init__(self, recipe_id, user_id):
        self.recipe_id = recipe_id
        self.user_id = user_id
        super().__init__(f"User {user_id} is not the owner of recipe {recipe_id}")


class MissingIngredientError(DeductionError):
    def __init__(self, ingredient):
        self.ingredient = ingredient
        super().__init__(f"Missing {ingredient}")


class InsufficientStockError(DeductionError):
    def __init__(self, ingredient, required, available):
        self.ingredient = ingredient
        self.required = required
        self.available = available
        super().__init__(f"Not enough {ingredient} (need {required:g}, have {available:g})")


class InvalidQuantityError(DeductionError):
    def __init__(self, ingredient, quantity):
        self.ingredient = ingredient
        self.quantity = quantity
        super().__init__(f"Invalid quantity {quantity!r} for {ingredient}")


@dataclass(frozen=True)
class Requirement:
    """One ingredient a recipe needs, ready for planning."""
    label: str
    name: str
    quantity: float
    unit: Optional[str] = None


@dataclass(frozen=True)
class DeductionRecord:
    inventory_item_id: object
    previous_quantity: float
    new_quantity: float

    def to_dict(self):
        return {
            'inventory_item_id': self.inventory_item_id,
            'previous_quantity': self.previous_quantity,
            'new_quantity': self.new_quantity,
        }

    @classmethod
    def from_dict(cls, data):
        """Rebuild a record sent back by a client. Raises ValueError on bad quantities."""
        previous = float(data['previous_quantity'])
        new = float(data['new_quantity'])
        for value in (previous, new):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Invalid quantity {value!r}")
        return cls(
            inventory_item_id=data['inventory_item_id'],
            previous_quantity=previous,
            new_quantity=new,
        )


@dataclass(frozen=True)
class CookResult:
    deductions: List[DeductionRecord] = field(default_factory=list)
    deducted_count: int = 0


@dataclass(frozen=True)
class UndoResult:
    restored_count: int = 0
    nothing_to_undo: bool = False


class UndoJournal:
    """
    Deductions of the most recent cook, kept by the caller.

    Holds one action only: recording a new cook replaces the previous one,
    and a successful undo empties it.
    """

    def __init__(self, deductions=()):
        self._records = tuple(deductions)

    def record(self, deductions):
        self._records = tuple(deductions)

    def peek(self):
        return list(self._records)

    def clear(self):
        self._records = ()

    def __len__(self):
        return len(self._records)


def _quantity_of(item):
    return float(item_field(item, 'quantity', 0))


def _find_exact(name, inventory):
    wanted = normalize_name(name)
    if not wanted:
        return None
    for item in inventory:
        if normalize_name(item_field(item, 'name', '')) == wanted:
            return item
    return None


def _lenient_quantity(requirement, item, units, policy):
    """Quantity to deduct in the item's unit, or None to skip the ingredient."""
    item_unit = item_field(item, 'unit')
    if not requirement.unit or not item_unit:
        return requirement.quantity
    if units.is_comparable(requirement.unit, item_unit):
        return units.convert(requirement.quantity, requirement.unit, item_unit)
    if policy.deduct_unconvertible_raw:
        return requirement.quantity
    return None


def plan_deductions(requirements, inventory, mode=MODE_LENIENT, units=None, policy=None):
    """
    Work out the new quantity of every pantry item a recipe touches.

    Pure: nothing is written. Several requirements hitting the same item
    deduct in turn from the running quantity and produce a single record.
    Items whose quantity would not change get no record.

    In strict mode raises MissingIngredientError, InsufficientStockError or
    InvalidQuantityError instead of skipping.
    """
    units = units or DEFAULT_UNIT_TABLE
    policy = policy or DEFAULT_POLICY
    staged = {}

    for requirement in requirements:
        if mode == MODE_STRICT:
            item = _find_exact(requirement.name, inventory)
            if item is None:
                raise MissingIngredientError(requirement.label)
            amount = requirement.quantity
        else:
            item = find_inventory_match(requirement.name, inventory)
            if item is None:
                continue
            amount = _lenient_quantity(requirement, item, units, policy)
            if amount is None:
                continue

        if not math.isfinite(amount) or amount < 0:
            if mode == MODE_STRICT:
                raise InvalidQuantityError(requirement.label, amount)
            continue

        item_id = item_field(item, 'id')
        previous, current = staged.get(item_id, (_quantity_of(item), _quantity_of(item)))

        if mode == MODE_STRICT and current < amount:
            raise InsufficientStockError(requirement.label, amount, current)

        staged[item_id] = (previous, max(0.0, current - amount))

    return [
        DeductionRecord(item_id, previous, new)
        for item_id, (previous, new) in staged.items()
        if new != previous
    ]


def cook_recipe(user_id, ingredients, store, inventory=None, journal=None, units=None, policy=None):
    """
    Deduct a cooked recipe's ingredients from the user's pantry.

    ``inventory`` is the snapshot to plan against (read from ``store`` when
    omitted). On success the deductions are recorded in ``journal`` if one
    is given. Nothing is written, and the journal is left alone, when no
    ingredient matched or when the batch write fails (StorageError).
    """
    if inventory is None:
        inventory = store.list_items(user_id)

    requirements = [
        Requirement(p.original, p.name, p.quantity, p.unit)
        for p in parse_ingredients(ingredients, units)
    ]
    deductions = plan_deductions(requirements, inventory, MODE_LENIENT, units=units, policy=policy)

    if not deductions:
        logger.info("Cook for user %s matched no deductible ingredients", user_id)
        return CookResult()

    store.apply_batch(user_id, {d.inventory_item_id: d.new_quantity for d in deductions})

    if journal is not None:
        journal.record(deductions)
    logger.info("Cook for user %s deducted %d items", user_id, len(deductions))
    return CookResult(deductions=deductions, deducted_count=len(deductions))


def undo_cook(user_id, journal, store):
    """
    Restore the quantities recorded by the last cook in one batch.

    ``journal`` is an UndoJournal (emptied on success) or a list of
    DeductionRecord. An empty journal is reported as nothing to undo.
    """
    if isinstance(journal, UndoJournal):
        records = journal.peek()
    else:
        records = list(journal or [])

    if not records:
        logger.info("Nothing to undo for user %s", user_id)
        return UndoResult(restored_count=0, nothing_to_undo=True)

    store.apply_batch(user_id, {r.inventory_item_id: r.previous_quantity for r in records})

    if isinstance(journal, UndoJournal):
        journal.clear()
    logger.info("Undo for user %s restored %d items", user_id, len(records))
    return UndoResult(restored_count=len(records))


def strict_requirement(entry):
    """Requirement for confirmed use: exact name, quantity defaults to 1, no unit conversion."""
    entry = coerce_ingredient(entry)
    if isinstance(entry, PlainText):
        name = entry.text.strip()
        return Requirement(label=name, name=name, quantity=1.0)
    return Requirement(label=entry.name, name=entry.name, quantity=entry.qty or 1.0, unit=entry.unit)


def confirm_recipe_use(recipe_id, user_id, store, now=None):
    """
    Deduct a recipe's ingredients after checking ownership and stock.

    Everything happens inside one transaction: if the recipe is missing,
    the user does not own it, or any ingredient is missing or short,
    nothing is written. On success every matched item is decremented and
    stamped with ``now``.
    """
    stamp = now or datetime.now(timezone.utc)
    try:
        with store.transaction():
            recipe = store.get_recipe(recipe_id)
            if recipe is None:
                raise RecipeNotFoundError(recipe_id)
            if recipe.owner_id != user_id:
                raise NotOwnerError(recipe_id, user_id)

            inventory = store.list_items(user_id, for_update=True)
            requirements = [strict_requirement(entry) for entry in (recipe.ingredients or [])]
            deductions = plan_deductions(requirements, inventory, MODE_STRICT)
            store.stage(
                inventory,
                {d.inventory_item_id: d.new_quantity for d in deductions},
                stamp=stamp,
            )
    except DeductionError as exc:
        logger.warning("Confirm use of recipe %s by user %s aborted: %s", recipe_id, user_id, exc)
        raise

    logger.info("Confirmed use of recipe %s by user %s, %d items updated",
                recipe_id, user_id, len(deductions))
    return deductions
