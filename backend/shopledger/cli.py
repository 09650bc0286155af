# Overview: Flask CLI command groups for schema bootstrap, sample data, and ledger maintenance.

# backend/shopledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Schema (production schemas go through `flask db upgrade`):
# - python -m flask schema create
#   Create any missing tables from the models (idempotent).
# - python -m flask schema drop --yes
#   DEV/TEST only: drop all tables (deletes all data).
#
# Sample data:
# - python -m flask seed items
#   Insert the starter items if the items table is empty.
#
# Ledger maintenance:
# - python -m flask ledger reconcile
#   Report customers whose total_credit differs from their unpaid credits.
# - python -m flask ledger reconcile --fix
#   Rewrite drifted balances to the sum of unpaid credits.

import click
from decimal import Decimal
from flask.cli import with_appcontext

from .extensions import db
from .models import Item
from .services import credit_service


SAMPLE_ITEMS = (
    {"name": "Coca-Cola 500ml", "buying_price": Decimal("80"), "selling_price": Decimal("100"), "stock": 24, "category": "Beverages"},
    {"name": "Lays Chips", "buying_price": Decimal("15"), "selling_price": Decimal("20"), "stock": 50, "category": "Snacks"},
    {"name": "Dairy Milk Chocolate", "buying_price": Decimal("45"), "selling_price": Decimal("60"), "stock": 30, "category": "Chocolates"},
)


@click.group('schema')
def schema_group():
    """Table bootstrap commands."""


@schema_group.command('create')
@with_appcontext
def create_schema():
    """Create missing tables (items, customers, credit_transactions, bottles)."""
    db.create_all()
    click.echo("PASS Tables created/verified")


@schema_group.command('drop')
@click.option('--yes', is_flag=True, help='Confirm destructive drop')
@with_appcontext
def drop_schema(yes):
    """DEV/TEST only: drop every table."""
    if not yes:
        click.echo("FAIL Refusing to drop tables without --yes")
        raise SystemExit(1)
    db.drop_all()
    click.echo("PASS All tables dropped")


@click.group('seed')
def seed_group():
    """Sample data commands."""


@seed_group.command('items')
@with_appcontext
def seed_items():
    """Insert starter items when the items table is empty."""
    if db.session.query(Item).first() is not None:
        click.echo("SKIP Items already present")
        return
    for row in SAMPLE_ITEMS:
        db.session.add(Item(**row))
    db.session.commit()
    click.echo(f"PASS Added {len(SAMPLE_ITEMS)} sample items")


@click.group('ledger')
def ledger_group():
    """Credit ledger maintenance commands."""


@ledger_group.command('reconcile')
@click.option('--fix', is_flag=True, help='Rewrite drifted balances')
@with_appcontext
def reconcile(fix):
    """Check total_credit against the sum of unpaid credit transactions."""
    drift = credit_service.reconcile_customer_balances(fix=fix)
    if not drift:
        click.echo("PASS All customer balances match their unpaid credits")
        return

    for entry in drift:
        click.echo(
            f"DRIFT customer {entry['customer_id']} ({entry['name']}): "
            f"recorded={entry['recorded']} expected={entry['expected']}"
        )
    if fix:
        click.echo(f"PASS Repaired {len(drift)} customer balance(s)")
    else:
        click.echo(f"FAIL {len(drift)} customer balance(s) drifted; rerun with --fix to repair")
        raise SystemExit(1)


def register_commands(app):
    app.cli.add_command(schema_group)
    app.cli.add_command(seed_group)
    app.cli.add_command(ledger_group)
