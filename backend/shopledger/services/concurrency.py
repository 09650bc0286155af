# Overview: Transaction boundary and retry helpers shared by the ledger services.

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from ..extensions import db
from ..validation import StorageError


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, "database is locked").
    """
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))


def run_in_transaction(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Run func as one unit of work on the request's session.

    func is responsible for its own commit; any exception rolls back every
    statement it issued. Storage faults surface as StorageError, domain
    errors (ValidationError, NotFoundError) propagate unchanged.
    """
    try:
        return run_with_retry(func, attempts=attempts, backoff_base=backoff_base)
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning("Transaction rolled back: %s", exc)
        raise StorageError(_storage_message(exc)) from exc
    except Exception:
        db.session.rollback()
        raise


def read_only(func):
    """Run a read query, mapping storage faults to StorageError."""
    try:
        return func()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(_storage_message(exc)) from exc


def _storage_message(exc: SQLAlchemyError) -> str:
    # DBAPIError wraps the driver exception; its text is what clients expect
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)
