"""
Concurrency tests for the credit ledger.

Each worker thread pushes its own app context, so it gets its own session
and pooled connection against a shared SQLite file.
"""

import threading
from decimal import Decimal

import pytest

from shopledger import create_app
from shopledger.extensions import db
from shopledger.models import CreditTransaction, Customer
from shopledger.services import credit_service


@pytest.fixture
def file_app(tmp_path):
    db_path = tmp_path / "concurrency.db"
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
        "SQLALCHEMY_ENGINE_OPTIONS": {"connect_args": {"timeout": 30}},
    })
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def _run_workers(app, targets):
    errors = []
    lock = threading.Lock()

    def worker(fn):
        with app.app_context():
            try:
                fn()
            except Exception as exc:
                with lock:
                    errors.append(exc)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=worker, args=(fn,)) for fn in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


def test_concurrent_grants_lose_no_updates(file_app):
    with file_app.app_context():
        customer = Customer(name="Busy Customer", total_credit=0)
        db.session.add(customer)
        db.session.commit()
        customer_id = customer.id

    amounts = [Decimal(n) for n in (5, 10, 15, 20, 25, 30, 35, 40)]
    errors = _run_workers(
        file_app,
        [lambda a=a: credit_service.grant_credit(customer_id=customer_id, amount=a) for a in amounts],
    )

    assert errors == []
    with file_app.app_context():
        assert db.session.get(Customer, customer_id).total_credit == sum(amounts)
        assert db.session.query(CreditTransaction).count() == len(amounts)


def test_concurrent_settles_decrement_once(file_app):
    with file_app.app_context():
        customer = Customer(name="Payer", total_credit=0)
        db.session.add(customer)
        db.session.commit()
        customer_id = customer.id
        txn = credit_service.grant_credit(customer_id=customer_id, amount=Decimal("500"))
        credit_service.grant_credit(customer_id=customer_id, amount=Decimal("300"))
        txn_id = txn.id

    errors = _run_workers(
        file_app,
        [lambda: credit_service.settle_credit(transaction_id=txn_id) for _ in range(6)],
    )

    assert errors == []
    with file_app.app_context():
        assert db.session.get(Customer, customer_id).total_credit == Decimal("300")
        assert db.session.get(CreditTransaction, txn_id).paid is True
