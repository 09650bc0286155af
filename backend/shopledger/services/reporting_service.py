# Overview: Dashboard counters over items, customers, credits and bottles.

from __future__ import annotations

from sqlalchemy import func, select

from ..extensions import db
from ..models import BottleRecord, CreditTransaction, Customer, Item
from .concurrency import read_only


def _count(model, *criteria):
    q = select(func.count()).select_from(model)
    if criteria:
        q = q.where(*criteria)
    return q.scalar_subquery()


def get_stats() -> dict:
    """
    Four COUNT queries, no joins.

    They are issued as scalar subqueries of one SELECT so every count is
    taken from the same statement snapshot.
    """
    stmt = select(
        _count(Item).label("total_items"),
        _count(Customer).label("total_customers"),
        _count(CreditTransaction, CreditTransaction.paid.is_(False)).label("pending_credits"),
        _count(BottleRecord, BottleRecord.returned.is_(False)).label("pending_bottles"),
    )
    row = read_only(lambda: db.session.execute(stmt).one())
    return {
        "total_items": int(row.total_items),
        "total_customers": int(row.total_customers),
        "pending_credits": int(row.pending_credits),
        "pending_bottles": int(row.pending_bottles),
    }
