import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db, InventoryItem, Recipe


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'pantry.db'}",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions['inventory_store']


@pytest.fixture
def pantry(app):
    """Pantry of user u1 (plus one item of user u2), keyed by name."""
    items = {
        'flour': InventoryItem(user_id='u1', name='Flour', quantity=500, unit='g', type='Pantry'),
        'milk': InventoryItem(user_id='u1', name='Milk', quantity=1, unit='l', type='Dairy'),
        'eggs': InventoryItem(user_id='u1', name='Eggs', quantity=6, unit=None, type='Dairy'),
        'garlic': InventoryItem(user_id='u1', name='Garlic', quantity=2, unit='head', type='Produce'),
        'other_flour': InventoryItem(user_id='u2', name='Flour', quantity=1000, unit='g'),
    }
    db.session.add_all(items.values())
    db.session.commit()
    return items


@pytest.fixture
def make_recipe(app):
    def _make(ingredients, owner_id='u1', name='Test Recipe'):
        recipe = Recipe(owner_id=owner_id, name=name, ingredients=ingredients)
        db.session.add(recipe)
        db.session.commit()
        return recipe
    return _make


@pytest.fixture
def quantities(app):
    """Reload items from the database and return their quantities."""
    def _quantities(*items):
        db.session.expire_all()
        return [db.session.get(InventoryItem, item.id).quantity for item in items]
    return _quantities
