from __future__ import annotations

from ..extensions import db
from shopledger.time_utils import to_utc_z, utcnow
from ._serialize import money


class Item(db.Model):
    """
    Inventory item with its remembered buying/selling price.

    Stock is a plain mutable count set by the shopkeeper after a physical
    count; it is never derived from sales. Items are never deleted.
    """
    __tablename__ = "items"
    __table_args__ = (
        db.Index("ix_items_name", "name"),
        db.Index("ix_items_barcode", "barcode"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)

    buying_price = db.Column(db.Numeric(10, 2), nullable=True)
    selling_price = db.Column(db.Numeric(10, 2), nullable=True)
    stock = db.Column(db.Integer, nullable=False, default=0, server_default=db.text("0"))

    barcode = db.Column(db.String(50), nullable=True)
    category = db.Column(db.String(50), nullable=True)

    last_updated = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Item id={self.id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "buying_price": money(self.buying_price),
            "selling_price": money(self.selling_price),
            "stock": self.stock,
            "barcode": self.barcode,
            "category": self.category,
            "last_updated": to_utc_z(self.last_updated),
            "created_at": to_utc_z(self.created_at),
        }
