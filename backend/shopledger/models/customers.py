from __future__ import annotations

from ..extensions import db
from shopledger.time_utils import to_utc_z, utcnow
from ._serialize import money


class Customer(db.Model):
    """
    Customer identity plus the running store-credit balance.

    Denormalized aggregate:
    total_credit == SUM(amount) over this customer's unpaid credit
    transactions. Only the credit ledger service writes it, and always in
    the same DB transaction as the credit row it accounts for.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.Index("ix_customers_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(20), nullable=True)
    address = db.Column(db.Text, nullable=True)
    customer_type = db.Column(db.String(20), nullable=False, default="regular", server_default="regular")

    total_credit = db.Column(db.Numeric(10, 2), nullable=False, default=0, server_default=db.text("0"))

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r} total_credit={self.total_credit}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "customer_type": self.customer_type,
            "total_credit": money(self.total_credit),
            "created_at": to_utc_z(self.created_at),
        }
