# Overview: Flask API route for dashboard statistics.

from flask import Blueprint, jsonify

from ..services import reporting_service
from ..validation import StorageError

reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.get("/stats")
def stats_route():
    """
    Dashboard counters.

    Returns:
        {total_items, total_customers, pending_credits, pending_bottles}
    """
    try:
        return jsonify(reporting_service.get_stats())
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
