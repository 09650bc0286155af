# Overview: Flask API routes for returnable bottles; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..models import BottleRecord
from ..services import bottle_service
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    StorageError,
    ValidationError,
    enforce_rules_bottle,
    validate_payload,
)

BOTTLE_POLICY = ModelValidationPolicy(
    writable_fields={"customer_id", "bottle_type", "quantity", "deposit_amount", "notes"},
    required_on_create={"customer_id", "bottle_type"},
)

bottles_bp = Blueprint("bottles", __name__, url_prefix="/api/bottles")


@bottles_bp.get("")
def list_bottles_route():
    """
    Bottle records, most recently taken first.

    Query parameters:
    - status: "pending" for bottles not yet returned, "all" (default)
    """
    status = request.args.get("status", "all").lower()
    if status not in ("all", "pending"):
        return jsonify({"error": "status must be one of: all, pending"}), 400

    try:
        return jsonify(bottle_service.list_bottles(pending_only=status == "pending"))
    except StorageError as e:
        return jsonify({"error": str(e)}), 500


@bottles_bp.post("")
def create_bottle_route():
    """
    Record bottles handed to a customer.

    Request body:
    {
        "customer_id": 1,          // required
        "bottle_type": "Crate",    // required
        "quantity": 1,
        "deposit_amount": 0,
        "notes": ""
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=BottleRecord, payload=payload, policy=BOTTLE_POLICY, partial=False)
        enforce_rules_bottle(patch)
        bottle = bottle_service.create_bottle_record(
            customer_id=patch["customer_id"],
            bottle_type=patch["bottle_type"],
            quantity=patch.get("quantity", 1),
            deposit_amount=patch.get("deposit_amount"),
            notes=patch.get("notes", ""),
        )
        return jsonify(bottle.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to create bottle record")
        return jsonify({"error": "Internal server error"}), 500


@bottles_bp.put("/<int:bottle_id>/return")
def return_bottle_route(bottle_id: int):
    try:
        bottle = bottle_service.return_bottle(bottle_id=bottle_id)
        return jsonify(bottle.to_dict())
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to return bottle")
        return jsonify({"error": "Internal server error"}), 500
