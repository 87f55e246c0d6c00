"""
Inventory Model

Contains the InventoryItem model: one pantry entry owned by one user.
"""

from .base import db


class InventoryItem(db.Model):
    """Pantry item with the quantity currently on hand."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Float, nullable=False, default=0.0)
    unit = db.Column(db.String(20), nullable=True)
    type = db.Column(db.String(50), nullable=True)  # e.g. 'Produce', 'Dairy'
    # Stamped by confirmed recipe use
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'quantity': self.quantity,
            'unit': self.unit,
            'type': self.type,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
