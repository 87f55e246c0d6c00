"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .inventory import InventoryItem
from .recipe import Recipe

__all__ = [
    'db',
    'InventoryItem',
    'Recipe',
]
