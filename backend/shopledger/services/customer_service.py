# Overview: Service-layer operations for customers; encapsulates business logic and database work.

"""
Customer Registry

Customers are created with a zero running balance. total_credit is owned
by the credit ledger (credit_service) and is never client-writable.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Customer
from .concurrency import read_only, run_in_transaction

CUSTOMER_MUTABLE_FIELDS = {"name", "phone", "address", "customer_type"}


def list_customers() -> list[Customer]:
    return read_only(
        lambda: db.session.query(Customer).order_by(Customer.name.asc(), Customer.id.asc()).all()
    )


def create_customer(*, patch: dict) -> Customer:
    """
    Register a customer.

    Args:
        patch: Validated customer data (name, phone, address, customer_type)

    Returns:
        Created Customer with total_credit = 0
    """
    def _op():
        customer = Customer(**{k: v for k, v in patch.items() if k in CUSTOMER_MUTABLE_FIELDS})
        customer.total_credit = 0
        if not customer.customer_type:
            customer.customer_type = "regular"
        db.session.add(customer)
        db.session.commit()
        return customer

    return run_in_transaction(_op)
