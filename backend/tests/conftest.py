"""
Pytest fixtures for the shop ledger backend tests.

Provides the application on an in-memory SQLite database, a per-test clean
database, the Flask test client, and small factories for customers/items.
"""

from decimal import Decimal

import pytest

from shopledger import create_app
from shopledger.extensions import db
from shopledger.models import Customer, Item


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'CORS_ORIGINS': '*',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Clear all data but keep schema."""
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client on a clean database."""
    return app.test_client()


@pytest.fixture(scope='function')
def make_customer(db_session):
    def _make(name="Ramesh", phone="9800000001", address="Ward 4"):
        customer = Customer(name=name, phone=phone, address=address, total_credit=0)
        db_session.add(customer)
        db_session.commit()
        return customer
    return _make


@pytest.fixture(scope='function')
def customer(make_customer):
    return make_customer()


@pytest.fixture(scope='function')
def item(db_session):
    item = Item(
        name="Coca-Cola 500ml",
        buying_price=Decimal("80"),
        selling_price=Decimal("100"),
        stock=24,
        category="Beverages",
    )
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def balance_of(db_session):
    """Fresh read of a customer's running balance."""
    def _balance(customer_id: int) -> Decimal:
        db_session.expire_all()
        return db_session.get(Customer, customer_id).total_credit
    return _balance
