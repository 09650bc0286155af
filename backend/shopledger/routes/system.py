# backend/shopledger/routes/system.py
"""
Service metadata and health endpoints.
"""

import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from shopledger.time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity with a trivial round trip.

    Returns dict with status and latency.
    """
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/")
def index():
    """Service metadata and endpoint index."""
    return {
        "message": "Family Shop Management API",
        "version": current_app.config["API_VERSION"],
        "endpoints": {
            "items": "GET /api/items",
            "add_item": "POST /api/items",
            "set_stock": "PUT /api/items/<id>/stock",
            "customers": "GET /api/customers",
            "add_customer": "POST /api/customers",
            "credits": "GET /api/credits",
            "grant_credit": "POST /api/credits",
            "pay_credit": "PUT /api/credits/<id>/pay",
            "bottles": "GET /api/bottles",
            "add_bottle": "POST /api/bottles",
            "return_bottle": "PUT /api/bottles/<id>/return",
            "stats": "GET /api/stats",
            "health": "GET /health",
        },
        "database": db.engine.dialect.name,
        "status": "active",
    }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: database reachable
    - 503: database unreachable
    """
    database_health = check_database_health()
    ok = database_health["status"] == "healthy"

    response = {
        "status": "OK" if ok else "unhealthy",
        "timestamp": to_utc_z(utcnow()),
        "service": current_app.config["SERVICE_NAME"],
        "checks": {"database": database_health},
    }
    return response, 200 if ok else 503
