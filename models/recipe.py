"""
Recipe Model

Contains the Recipe model consumed by confirmed recipe use.
"""

from .base import db


class Recipe(db.Model):
    """
    Recipe owned by one user.

    ``ingredients`` holds the recipe source entries as stored: plain strings
    ("2 cups flour") or objects ({"name": "flour", "qty": 2, "unit": "cup"}).
    """
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.String(128), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    ingredients = db.Column(db.JSON, nullable=False, default=list)
