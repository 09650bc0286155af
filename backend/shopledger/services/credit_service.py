# Overview: Service-layer operations for the credit ledger; encapsulates business logic and database work.

"""
Credit Ledger Invariants (authoritative)

- customers.total_credit == SUM(amount) of that customer's credit
  transactions with paid = false, between any two operations.
- grant: INSERT credit row + total_credit += amount, one DB transaction.
- settle: paid false -> true + total_credit -= amount, one DB transaction.
- The balance is adjusted with a single SQL expression
  (total_credit = total_credit + :delta), never read-modify-write in Python,
  so concurrent grants cannot lose updates.
- Settling claims the row with a compare-and-set
  (UPDATE ... WHERE id = :id AND paid = false). Only the caller whose
  update matched decrements the balance; repeated or concurrent settles of
  the same transaction are no-ops.
- amount is immutable after creation; paid = true is terminal.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import CreditTransaction, Customer
from ..validation import NotFoundError, ValidationError
from .concurrency import lock_for_update, read_only, run_in_transaction

CREDIT_STATUSES = ("pending", "paid")


class CreditNotFoundError(NotFoundError):
    """Raised when a credit transaction is not found."""
    pass


def _adjust_balance(customer_id: int, delta: Decimal) -> int:
    return (
        db.session.query(Customer)
        .filter(Customer.id == customer_id)
        .update(
            {Customer.total_credit: Customer.total_credit + delta},
            synchronize_session=False,
        )
    )


def grant_credit(
    *,
    customer_id: int,
    amount: Decimal,
    item_name: str | None = None,
    quantity: int | None = None,
    due_date: date | None = None,
    notes: str | None = None,
) -> CreditTransaction:
    """
    Record goods lent on credit and raise the customer's balance.

    Both writes commit together or not at all.

    Raises:
        ValidationError: If customer_id is missing or unknown, or amount is missing
        StorageError: If the storage layer rejects either write
    """
    if customer_id is None:
        raise ValidationError("customer_id is required")
    if amount is None:
        raise ValidationError("amount is required")

    def _op():
        customer = lock_for_update(db.session.query(Customer).filter_by(id=customer_id)).first()
        if customer is None:
            raise ValidationError(f"Customer {customer_id} does not exist")

        txn = CreditTransaction(
            customer_id=customer_id,
            item_name=item_name,
            quantity=quantity or 1,
            amount=amount,
            due_date=due_date,
            notes=notes,
            paid=False,
        )
        db.session.add(txn)
        db.session.flush()

        if _adjust_balance(customer_id, amount) != 1:
            raise ValidationError(f"Customer {customer_id} does not exist")

        db.session.commit()
        return txn

    txn = run_in_transaction(_op)
    current_app.logger.info(
        "Credit %s granted: customer=%s amount=%s", txn.id, customer_id, amount
    )
    return txn


def settle_credit(*, transaction_id: int) -> CreditTransaction:
    """
    Mark a credit transaction paid and lower the customer's balance.

    Idempotent: settling an already-paid transaction returns it unchanged
    and leaves the balance alone.

    Raises:
        CreditNotFoundError: If the transaction does not exist
        StorageError: If the storage layer rejects either write
    """
    def _op():
        txn = lock_for_update(
            db.session.query(CreditTransaction).filter_by(id=transaction_id)
        ).first()
        if txn is None:
            raise CreditNotFoundError(f"Credit transaction {transaction_id} not found")

        claimed = (
            db.session.query(CreditTransaction)
            .filter(CreditTransaction.id == transaction_id, CreditTransaction.paid.is_(False))
            .update({CreditTransaction.paid: True}, synchronize_session=False)
        )
        if claimed == 0:
            # Already settled (possibly by a concurrent request)
            db.session.rollback()
            return txn, False

        if txn.customer_id is not None:
            _adjust_balance(txn.customer_id, -txn.amount)

        db.session.commit()
        return txn, True

    txn, settled = run_in_transaction(_op)
    if settled:
        current_app.logger.info(
            "Credit %s settled: customer=%s amount=%s", txn.id, txn.customer_id, txn.amount
        )
    else:
        current_app.logger.info("Credit %s already settled; balance unchanged", txn.id)
    return txn


def list_credits(*, status: str | None = None) -> list[dict]:
    """
    Credit transactions joined with the customer's name and phone.

    Unmatched customer_id yields null customer_name/phone.

    Args:
        status: None for all, "pending" (unpaid) or "paid"
    """
    if status is not None and status not in CREDIT_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(CREDIT_STATUSES)}")

    def _query():
        q = (
            db.session.query(CreditTransaction, Customer.name, Customer.phone)
            .outerjoin(Customer, CreditTransaction.customer_id == Customer.id)
        )
        if status == "pending":
            q = q.filter(CreditTransaction.paid.is_(False))
        elif status == "paid":
            q = q.filter(CreditTransaction.paid.is_(True))
        return q.order_by(
            CreditTransaction.transaction_date.desc(), CreditTransaction.id.desc()
        ).all()

    rows = read_only(_query)
    out = []
    for txn, customer_name, phone in rows:
        d = txn.to_dict()
        d["customer_name"] = customer_name
        d["phone"] = phone
        out.append(d)
    return out


def outstanding_by_customer() -> dict[int, Decimal]:
    """SUM(amount) of unpaid transactions per customer_id."""
    rows = read_only(
        lambda: db.session.query(
            CreditTransaction.customer_id,
            func.coalesce(func.sum(CreditTransaction.amount), 0),
        )
        .filter(CreditTransaction.paid.is_(False), CreditTransaction.customer_id.isnot(None))
        .group_by(CreditTransaction.customer_id)
        .all()
    )
    return {customer_id: Decimal(str(total)) for customer_id, total in rows}


def reconcile_customer_balances(*, fix: bool = False) -> list[dict]:
    """
    Compare every customer's total_credit with the sum of unpaid credit rows.

    Returns one entry per drifted customer:
        {customer_id, name, recorded, expected}

    With fix=True the drifted balances are rewritten in a single transaction
    from the unpaid sum as it stands at write time, so grants or settles that
    commit after the report was taken are kept.
    """
    expected_by_customer = outstanding_by_customer()
    customers = read_only(lambda: db.session.query(Customer).order_by(Customer.id.asc()).all())

    drift = []
    for customer in customers:
        recorded = Decimal(str(customer.total_credit or 0))
        expected = expected_by_customer.get(customer.id, Decimal("0"))
        if recorded != expected:
            drift.append({
                "customer_id": customer.id,
                "name": customer.name,
                "recorded": recorded,
                "expected": expected,
            })

    for entry in drift:
        current_app.logger.warning(
            "Customer %s balance drift: recorded=%s expected=%s",
            entry["customer_id"], entry["recorded"], entry["expected"],
        )

    if fix and drift:
        drifted_ids = [entry["customer_id"] for entry in drift]

        def _op():
            # Same row locks grant/settle take; waits out in-flight ledger writes
            lock_for_update(
                db.session.query(Customer.id).filter(Customer.id.in_(drifted_ids))
            ).all()

            live_outstanding = (
                db.session.query(func.coalesce(func.sum(CreditTransaction.amount), 0))
                .filter(
                    CreditTransaction.customer_id == Customer.id,
                    CreditTransaction.paid.is_(False),
                )
                .correlate(Customer)
                .scalar_subquery()
            )
            db.session.query(Customer).filter(Customer.id.in_(drifted_ids)).update(
                {Customer.total_credit: live_outstanding},
                synchronize_session=False,
            )
            db.session.commit()

        run_in_transaction(_op)

    return drift
