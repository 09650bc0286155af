# Overview: Flask API routes for customers; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..models import Customer
from ..services import customer_service
from ..validation import ModelValidationPolicy, StorageError, ValidationError, validate_payload

# total_credit is written only by the credit ledger
CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone", "address", "customer_type"},
    required_on_create={"name"},
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers_route():
    try:
        customers = customer_service.list_customers()
        return jsonify([c.to_dict() for c in customers])
    except StorageError as e:
        return jsonify({"error": str(e)}), 500


@customers_bp.post("")
def create_customer_route():
    """
    Register a customer.

    Request body:
    {
        "name": "Ramesh",             // required
        "phone": "9800000000",
        "address": "Ward 4",
        "customer_type": "regular"    // optional
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
        customer = customer_service.create_customer(patch=patch)
        return jsonify(customer.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return jsonify({"error": "Internal server error"}), 500
