# Overview: Flask API routes for the credit ledger; parses input and returns JSON responses.

"""
Credit Routes

POST /api/credits and PUT /api/credits/<id>/pay each run as one DB
transaction in credit_service; the customer's total_credit moves with
the credit row or not at all.
"""

from flask import Blueprint, current_app, jsonify, request

from ..models import CreditTransaction
from ..services import credit_service
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    StorageError,
    ValidationError,
    enforce_rules_credit,
    validate_payload,
)

CREDIT_POLICY = ModelValidationPolicy(
    writable_fields={"customer_id", "item_name", "quantity", "amount", "due_date", "notes"},
    required_on_create={"customer_id", "amount"},
)

credits_bp = Blueprint("credits", __name__, url_prefix="/api/credits")


@credits_bp.get("")
def list_credits_route():
    """
    Credit transactions, newest first, with customer_name and phone.

    Query parameters:
    - status: "pending" or "paid" (default: all)
    """
    status = request.args.get("status") or None
    if status == "all":
        status = None

    try:
        return jsonify(credit_service.list_credits(status=status))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError as e:
        return jsonify({"error": str(e)}), 500


@credits_bp.post("")
def grant_credit_route():
    """
    Lend goods on credit.

    Request body:
    {
        "customer_id": 1,         // required, must exist
        "amount": 500,            // required
        "item_name": "Rice 5kg",
        "quantity": 1,
        "due_date": "2026-11-01",
        "notes": "..."
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=CreditTransaction, payload=payload, policy=CREDIT_POLICY, partial=False)
        enforce_rules_credit(patch)
        txn = credit_service.grant_credit(
            customer_id=patch["customer_id"],
            amount=patch["amount"],
            item_name=patch.get("item_name"),
            quantity=patch.get("quantity"),
            due_date=patch.get("due_date"),
            notes=patch.get("notes"),
        )
        return jsonify(txn.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to grant credit")
        return jsonify({"error": "Internal server error"}), 500


@credits_bp.put("/<int:transaction_id>/pay")
def settle_credit_route(transaction_id: int):
    """Mark a credit transaction paid. Repeating the call is a no-op."""
    try:
        txn = credit_service.settle_credit(transaction_id=transaction_id)
        return jsonify(txn.to_dict())
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to settle credit")
        return jsonify({"error": "Internal server error"}), 500
