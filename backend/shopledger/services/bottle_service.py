# Overview: Service-layer operations for returnable bottles; encapsulates business logic and database work.

"""
Bottle Ledger

Each record is its own balance: a bottle is outstanding while
returned = false. There is no aggregate column on the customer.
returned_date is set iff returned is true.
"""
from __future__ import annotations

from decimal import Decimal

from flask import current_app

from ..extensions import db
from ..models import BottleRecord, Customer
from ..validation import NotFoundError, ValidationError
from .concurrency import lock_for_update, read_only, run_in_transaction
from shopledger.time_utils import today

UNKNOWN_CUSTOMER_NAME = "Unknown"


class BottleNotFoundError(NotFoundError):
    """Raised when a bottle record is not found."""
    pass


def list_bottles(*, pending_only: bool = False) -> list[dict]:
    """
    Bottle records joined with the customer's name and phone.

    Args:
        pending_only: Restrict to bottles not yet returned
    """
    def _query():
        q = (
            db.session.query(BottleRecord, Customer.name, Customer.phone)
            .outerjoin(Customer, BottleRecord.customer_id == Customer.id)
        )
        if pending_only:
            q = q.filter(BottleRecord.returned.is_(False))
        return q.order_by(BottleRecord.taken_date.desc(), BottleRecord.id.desc()).all()

    out = []
    for bottle, customer_name, phone in read_only(_query):
        d = bottle.to_dict()
        d["customer_name"] = customer_name or UNKNOWN_CUSTOMER_NAME
        d["phone"] = phone
        out.append(d)
    return out


def create_bottle_record(
    *,
    customer_id: int,
    bottle_type: str,
    quantity: int | None = 1,
    deposit_amount: Decimal | None = None,
    notes: str | None = "",
) -> BottleRecord:
    """
    Record bottles handed to a customer.

    Raises:
        ValidationError: If customer_id or bottle_type is missing, or the
            customer does not exist. Nothing is written in that case.
    """
    if customer_id is None:
        raise ValidationError("customer_id is required")
    if not bottle_type or not str(bottle_type).strip():
        raise ValidationError("bottle_type is required")

    def _op():
        exists = db.session.query(Customer.id).filter_by(id=customer_id).first()
        if exists is None:
            raise ValidationError(f"Customer {customer_id} does not exist")

        bottle = BottleRecord(
            customer_id=customer_id,
            bottle_type=str(bottle_type).strip(),
            quantity=quantity or 1,
            deposit_amount=deposit_amount if deposit_amount is not None else 0,
            notes=notes if notes is not None else "",
            returned=False,
        )
        db.session.add(bottle)
        db.session.commit()
        return bottle

    bottle = run_in_transaction(_op)
    current_app.logger.info(
        "Bottle record %s created: customer=%s type=%s qty=%s",
        bottle.id, customer_id, bottle.bottle_type, bottle.quantity,
    )
    return bottle


def return_bottle(*, bottle_id: int) -> BottleRecord:
    """
    Mark a bottle record returned today.

    Returning an already-returned record keeps the first returned_date.

    Raises:
        BottleNotFoundError: If the record does not exist
    """
    def _op():
        bottle = lock_for_update(db.session.query(BottleRecord).filter_by(id=bottle_id)).first()
        if bottle is None:
            raise BottleNotFoundError(f"Bottle record {bottle_id} not found")
        if bottle.returned:
            return bottle

        bottle.returned = True
        bottle.returned_date = today()
        db.session.commit()
        return bottle

    return run_in_transaction(_op)
