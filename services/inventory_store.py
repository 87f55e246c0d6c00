"""
Inventory Storage Service

Database access for pantry items: reading a user's items, all-or-nothing
batch updates, and a serializable transaction for read-then-write work.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a database read or write fails. Nothing was written."""
    retryable = True


class InventoryConflictError(StorageError):
    """Raised when a batch names items that do not exist for the user."""
    retryable = False

    def __init__(self, user_id, item_ids):
        self.user_id = user_id
        self.item_ids = list(item_ids)
        super().__init__(f"Inventory items {self.item_ids} not found for user {user_id}")


class InventoryStore:
    """
    Storage collaborator for the deduction engine.

    Takes the Flask-SQLAlchemy ``db`` and the model classes so the services
    never import the app.
    """

    def __init__(self, db, InventoryItem, Recipe=None, isolation_level='SERIALIZABLE'):
        self.db = db
        self.InventoryItem = InventoryItem
        self.Recipe = Recipe
        self.isolation_level = isolation_level

    @property
    def session(self):
        return self.db.session

    def list_items(self, user_id, for_update=False):
        """Return every pantry item of a user, oldest first."""
        query = self.InventoryItem.query.filter_by(user_id=user_id).order_by(self.InventoryItem.id)
        if for_update:
            query = query.with_for_update()
        try:
            return query.all()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Failed to read inventory for user %s", user_id, exc_info=True)
            raise StorageError(f"Failed to read inventory: {exc}") from exc

    def get_recipe(self, recipe_id):
        if self.Recipe is None:
            return None
        try:
            return self.session.get(self.Recipe, recipe_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Failed to read recipe {recipe_id}: {exc}") from exc

    def stage(self, items, quantities, stamp=None):
        """
        Set new quantities on already loaded items without committing.

        ``quantities`` maps item id to the new quantity; ``stamp`` (a
        datetime) is written to ``updated_at`` of every changed item.
        """
        by_id = {item.id: item for item in items}
        for item_id, quantity in quantities.items():
            item = by_id[item_id]
            item.quantity = quantity
            if stamp is not None:
                item.updated_at = stamp

    def apply_batch(self, user_id, quantities, stamp=None):
        """
        Write new quantities for several items of one user in a single commit.

        Either every item is updated or none is. Raises InventoryConflictError
        if an item id does not belong to the user, StorageError if the
        commit fails.
        """
        if not quantities:
            return 0

        session = self.session
        try:
            items = self.InventoryItem.query.filter(
                self.InventoryItem.user_id == user_id,
                self.InventoryItem.id.in_(list(quantities)),
            ).all()
            found = {item.id for item in items}
            missing = [item_id for item_id in quantities if item_id not in found]
            if missing:
                session.rollback()
                raise InventoryConflictError(user_id, missing)

            self.stage(items, quantities, stamp=stamp)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Inventory batch update failed for user %s", user_id, exc_info=True)
            raise StorageError(f"Failed to update inventory: {exc}") from exc

        return len(quantities)

    @contextmanager
    def transaction(self):
        """
        Run a block in one transaction, committed on success.

        Any exception rolls everything back; database errors surface as
        StorageError, anything else propagates unchanged.
        """
        session = self.session
        # in_transaction is not proxied by scoped_session
        if self.isolation_level and not session().in_transaction():
            session.connection(execution_options={'isolation_level': self.isolation_level})
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Inventory transaction failed", exc_info=True)
            raise StorageError(f"Inventory transaction failed: {exc}") from exc
        except Exception:
            session.rollback()
            raise
