"""
Flask CLI command tests.
"""

from decimal import Decimal

from shopledger.models import Item
from shopledger.services import credit_service


def test_seed_items_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "items"])
    second = runner.invoke(args=["seed", "items"])

    assert first.exit_code == 0
    assert "PASS" in first.output
    assert "SKIP" in second.output
    assert db_session.query(Item).count() == 3


def test_reconcile_reports_then_fixes(app, db_session, customer, balance_of):
    credit_service.grant_credit(customer_id=customer.id, amount=Decimal("40"))
    customer.total_credit = Decimal("15")
    db_session.commit()
    runner = app.test_cli_runner()

    report = runner.invoke(args=["ledger", "reconcile"])
    assert report.exit_code == 1
    assert "DRIFT" in report.output

    fixed = runner.invoke(args=["ledger", "reconcile", "--fix"])
    assert fixed.exit_code == 0
    assert balance_of(customer.id) == Decimal("40")

    clean = runner.invoke(args=["ledger", "reconcile"])
    assert clean.exit_code == 0
    assert "PASS" in clean.output


def test_schema_drop_requires_confirmation(app, db_session):
    result = app.test_cli_runner().invoke(args=["schema", "drop"])

    assert result.exit_code == 1
    assert "Refusing" in result.output
