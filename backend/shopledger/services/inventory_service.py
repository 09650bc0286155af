# Overview: Service-layer operations for inventory items; encapsulates business logic and database work.

# backend/shopledger/services/inventory_service.py
"""
Inventory Store

- Items are listed alphabetically; there is no filtering or pagination.
- Stock is an absolute value set by the caller (not an increment).
- Every mutation reports a missing row as ItemNotFoundError instead of
  silently updating zero rows.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Item
from ..validation import NotFoundError
from .concurrency import lock_for_update, read_only, run_in_transaction

ITEM_MUTABLE_FIELDS = {"name", "buying_price", "selling_price", "stock", "barcode", "category"}


class ItemNotFoundError(NotFoundError):
    """Raised when an item is not found."""
    pass


def list_items() -> list[Item]:
    return read_only(
        lambda: db.session.query(Item).order_by(Item.name.asc(), Item.id.asc()).all()
    )


def create_item(*, patch: dict) -> Item:
    """
    Create an item from a validated patch dict.

    stock defaults to 0 when omitted.
    """
    def _op():
        item = Item(**{k: v for k, v in patch.items() if k in ITEM_MUTABLE_FIELDS})
        if item.stock is None:
            item.stock = 0
        db.session.add(item)
        db.session.commit()
        return item

    return run_in_transaction(_op)


def set_stock(*, item_id: int, stock: int) -> Item:
    """
    Overwrite the stock count of an item.

    Raises:
        ItemNotFoundError: If the item does not exist
    """
    def _op():
        item = lock_for_update(db.session.query(Item).filter_by(id=item_id)).first()
        if item is None:
            raise ItemNotFoundError(f"Item {item_id} not found")
        item.stock = stock
        db.session.commit()
        return item

    return run_in_transaction(_op)
