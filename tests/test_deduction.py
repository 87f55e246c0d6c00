import pytest
from sqlalchemy.exc import OperationalError

from models import db
from services.deduction import (
    MODE_STRICT,
    DeductionRecord,
    InsufficientStockError,
    InvalidQuantityError,
    MissingIngredientError,
    Requirement,
    UndoJournal,
    cook_recipe,
    plan_deductions,
    strict_requirement,
    undo_cook,
)
from services.inventory_store import InventoryConflictError, StorageError
from services.matching import MatchPolicy
from services.parsing import parse_ingredients


def lenient(lines):
    return [Requirement(p.original, p.name, p.quantity, p.unit) for p in parse_ingredients(lines)]


@pytest.fixture
def inventory():
    return [
        {'id': 1, 'name': 'Flour', 'quantity': 500, 'unit': 'g'},
        {'id': 2, 'name': 'Milk', 'quantity': 1, 'unit': 'l'},
        {'id': 3, 'name': 'Eggs', 'quantity': 6, 'unit': None},
        {'id': 4, 'name': 'Garlic', 'quantity': 2, 'unit': 'head'},
        {'id': 5, 'name': 'Sugar', 'quantity': 0, 'unit': 'cup'},
        {'id': 6, 'name': 'Parsley', 'quantity': 2, 'unit': 'bunch'},
    ]


def failing_commit(*args, **kwargs):
    raise OperationalError('COMMIT', {}, Exception('disk I/O error'))


# ============================================
# PLANNING
# ============================================

def test_plan_converts_into_item_unit(inventory):
    [record] = plan_deductions(lenient(['500 ml milk']), inventory)
    assert record.inventory_item_id == 2
    assert record.previous_quantity == 1
    assert record.new_quantity == pytest.approx(0.5)


def test_plan_unitless_and_unmatched(inventory):
    records = plan_deductions(lenient(['2 eggs', '1 tsp saffron']), inventory)
    assert [(r.inventory_item_id, r.new_quantity) for r in records] == [(3, 4)]


def test_plan_never_goes_below_zero(inventory):
    [record] = plan_deductions(lenient(['2 kg flour']), inventory)
    assert record.new_quantity == 0


def test_count_units_deduct_one_to_one(inventory):
    policy = MatchPolicy(deduct_unconvertible_raw=False)
    [record] = plan_deductions(lenient(['1 clove garlic']), inventory, policy=policy)
    assert (record.inventory_item_id, record.previous_quantity, record.new_quantity) == (4, 2, 1)


def test_unconvertible_units_deduct_raw_amount(inventory):
    [record] = plan_deductions(lenient(['3 sprigs parsley']), inventory)
    assert (record.inventory_item_id, record.previous_quantity, record.new_quantity) == (6, 2, 0)


def test_unconvertible_units_skipped_when_policy_says_so(inventory):
    policy = MatchPolicy(deduct_unconvertible_raw=False)
    assert plan_deductions(lenient(['3 sprigs parsley']), inventory, policy=policy) == []


def test_repeated_ingredient_chains_on_one_item(inventory):
    records = plan_deductions(lenient(['100 g flour', '200 g flour']), inventory)
    assert len(records) == 1
    assert records[0].previous_quantity == 500
    assert records[0].new_quantity == 200


def test_unchanged_items_get_no_record(inventory):
    assert plan_deductions(lenient(['1 cup sugar']), inventory) == []


def test_plan_does_not_touch_inventory(inventory):
    plan_deductions(lenient(['200 g flour']), inventory)
    assert inventory[0]['quantity'] == 500


def test_strict_requires_exact_name(inventory):
    with pytest.raises(MissingIngredientError) as excinfo:
        plan_deductions([strict_requirement('Bread Flour')], inventory, MODE_STRICT)
    assert excinfo.value.ingredient == 'Bread Flour'


def test_strict_rejects_short_stock(inventory):
    requirement = strict_requirement({'name': 'eggs', 'qty': 12})
    with pytest.raises(InsufficientStockError) as excinfo:
        plan_deductions([requirement], inventory, MODE_STRICT)
    assert excinfo.value.required == 12
    assert excinfo.value.available == 6


def test_strict_counts_repeated_ingredients_together(inventory):
    requirements = [strict_requirement({'name': 'Eggs', 'qty': 4})] * 2
    with pytest.raises(InsufficientStockError):
        plan_deductions(requirements, inventory, MODE_STRICT)


def test_strict_requirement_shapes():
    assert strict_requirement('Salt') == Requirement('Salt', 'Salt', 1.0)
    assert strict_requirement({'name': 'Milk', 'qty': '1/2', 'unit': 'Cup'}) == \
        Requirement('Milk', 'Milk', 0.5, 'cup')
    assert strict_requirement({'name': 'Milk'}).quantity == 1.0


def test_non_finite_amounts_never_reach_stock(inventory):
    requirement = Requirement('Flour', 'Flour', float('nan'))
    with pytest.raises(InvalidQuantityError):
        plan_deductions([requirement], inventory, MODE_STRICT)
    assert plan_deductions([requirement], inventory) == []
    assert plan_deductions([Requirement('Flour', 'Flour', float('inf'), 'g')], inventory) == []


def test_stored_nan_quantity_counts_as_one():
    assert strict_requirement({'name': 'Flour', 'qty': 'nan'}).quantity == 1.0


def test_deduction_record_from_client_data():
    record = DeductionRecord.from_dict({'inventory_item_id': 1, 'previous_quantity': '2.5', 'new_quantity': 1})
    assert record == DeductionRecord(1, 2.5, 1.0)
    for bad in ['nan', 'inf', -1]:
        with pytest.raises(ValueError):
            DeductionRecord.from_dict({'inventory_item_id': 1, 'previous_quantity': bad, 'new_quantity': 0})


# ============================================
# COOK AND UNDO
# ============================================

def test_cook_then_undo(store, pantry, quantities):
    journal = UndoJournal()
    result = cook_recipe('u1', ['200 g flour', '2 eggs', '1 cup sugar'], store, journal=journal)

    assert result.deducted_count == 2
    assert len(journal) == 2
    assert quantities(pantry['flour'], pantry['eggs'], pantry['other_flour']) == [300, 4, 1000]

    undone = undo_cook('u1', journal, store)
    assert undone.restored_count == 2
    assert not undone.nothing_to_undo
    assert len(journal) == 0
    assert quantities(pantry['flour'], pantry['eggs']) == [500, 6]


def test_undo_with_empty_journal(store, pantry):
    result = undo_cook('u1', UndoJournal(), store)
    assert result.nothing_to_undo
    assert result.restored_count == 0


def test_cook_with_nothing_to_deduct_leaves_journal(store, pantry):
    journal = UndoJournal()
    cook_recipe('u1', ['200 g flour'], store, journal=journal)
    previous = journal.peek()

    result = cook_recipe('u1', ['1 cup saffron'], store, journal=journal)
    assert result.deducted_count == 0
    assert journal.peek() == previous


def test_new_cook_replaces_undo_entry(store, pantry, quantities):
    journal = UndoJournal()
    cook_recipe('u1', ['200 g flour'], store, journal=journal)
    cook_recipe('u1', ['2 eggs'], store, journal=journal)

    undo_cook('u1', journal, store)
    # Only the second cook is undone
    assert quantities(pantry['flour'], pantry['eggs']) == [300, 6]


def test_cook_uses_given_snapshot(store, pantry, quantities):
    snapshot = [{'id': pantry['flour'].id, 'name': 'Flour', 'quantity': 400, 'unit': 'g'}]
    cook_recipe('u1', ['100 g flour'], store, inventory=snapshot)
    assert quantities(pantry['flour']) == [300]


def test_failed_cook_writes_nothing(store, pantry, quantities, monkeypatch):
    journal = UndoJournal()
    monkeypatch.setattr(db.session, 'commit', failing_commit)

    with pytest.raises(StorageError) as excinfo:
        cook_recipe('u1', ['200 g flour', '2 eggs', '500 ml milk'], store, journal=journal)

    assert excinfo.value.retryable
    monkeypatch.undo()
    assert quantities(pantry['flour'], pantry['eggs'], pantry['milk']) == [500, 6, 1]
    assert len(journal) == 0


def test_failed_undo_keeps_journal(store, pantry, quantities, monkeypatch):
    journal = UndoJournal()
    cook_recipe('u1', ['200 g flour', '2 eggs'], store, journal=journal)
    monkeypatch.setattr(db.session, 'commit', failing_commit)

    with pytest.raises(StorageError):
        undo_cook('u1', journal, store)

    monkeypatch.undo()
    assert len(journal) == 2
    assert quantities(pantry['flour'], pantry['eggs']) == [300, 4]


def test_batch_rejects_items_of_another_user(store, pantry, quantities):
    with pytest.raises(InventoryConflictError) as excinfo:
        store.apply_batch('u1', {pantry['flour'].id: 0, pantry['other_flour'].id: 0})

    assert excinfo.value.item_ids == [pantry['other_flour'].id]
    assert isinstance(excinfo.value, StorageError)
    assert not excinfo.value.retryable
    assert quantities(pantry['flour'], pantry['other_flour']) == [500, 1000]


def test_list_items_only_returns_own_items(store, pantry):
    names = [item.name for item in store.list_items('u1')]
    assert names == ['Flour', 'Milk', 'Eggs', 'Garlic']
    assert [item.quantity for item in store.list_items('u2')] == [1000]
    assert store.list_items('nobody') == []
