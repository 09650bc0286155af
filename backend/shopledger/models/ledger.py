from __future__ import annotations

from ..extensions import db
from shopledger.time_utils import to_iso_date, to_utc_z, today, utcnow
from ._serialize import money


class CreditTransaction(db.Model):
    """
    Goods handed over on store credit.

    LIFECYCLE: paid=False -> paid=True (terminal). amount is never changed
    after creation; settling subtracts exactly this amount from the
    customer's total_credit.
    """
    __tablename__ = "credit_transactions"
    __table_args__ = (
        db.Index("ix_credit_transactions_customer_paid", "customer_id", "paid"),
        db.Index("ix_credit_transactions_date", "transaction_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=True, index=True)

    item_name = db.Column(db.String(100), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1, server_default=db.text("1"))
    amount = db.Column(db.Numeric(10, 2), nullable=False)

    transaction_date = db.Column(db.Date, nullable=False, default=today)
    due_date = db.Column(db.Date, nullable=True)
    paid = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    customer = db.relationship("Customer", backref=db.backref("credit_transactions", lazy=True))

    def __repr__(self) -> str:
        return f"<CreditTransaction id={self.id} customer_id={self.customer_id} amount={self.amount} paid={self.paid}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "item_name": self.item_name,
            "quantity": self.quantity,
            "amount": money(self.amount),
            "transaction_date": to_iso_date(self.transaction_date),
            "due_date": to_iso_date(self.due_date),
            "paid": self.paid,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
        }


class BottleRecord(db.Model):
    """
    Returnable containers (crates, gas cylinders, glass bottles) lent out.

    No aggregate column on the customer: the outstanding count is the set of
    rows with returned=False. returned_date is set iff returned is True.
    """
    __tablename__ = "bottles"
    __table_args__ = (
        db.Index("ix_bottles_returned_taken", "returned", "taken_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=True, index=True)

    bottle_type = db.Column(db.String(50), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1, server_default=db.text("1"))
    taken_date = db.Column(db.Date, nullable=False, default=today)

    returned = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    returned_date = db.Column(db.Date, nullable=True)

    deposit_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0, server_default=db.text("0"))
    notes = db.Column(db.Text, nullable=True)

    customer = db.relationship("Customer", backref=db.backref("bottles", lazy=True))

    def __repr__(self) -> str:
        return f"<BottleRecord id={self.id} customer_id={self.customer_id} type={self.bottle_type!r} returned={self.returned}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "bottle_type": self.bottle_type,
            "quantity": self.quantity,
            "taken_date": to_iso_date(self.taken_date),
            "returned": self.returned,
            "returned_date": to_iso_date(self.returned_date),
            "deposit_amount": money(self.deposit_amount),
            "notes": self.notes,
        }
