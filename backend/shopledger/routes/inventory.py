# Overview: Flask API routes for inventory items; parses input and returns JSON responses.

# backend/shopledger/routes/inventory.py
from flask import Blueprint, current_app, jsonify, request

from ..models import Item
from ..services import inventory_service
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    StorageError,
    ValidationError,
    enforce_rules_item,
    enforce_rules_stock,
    validate_payload,
)

ITEM_POLICY = ModelValidationPolicy(
    writable_fields={"name", "buying_price", "selling_price", "stock", "barcode", "category"},
    required_on_create={"name"},
)

STOCK_POLICY = ModelValidationPolicy(writable_fields={"stock"})

items_bp = Blueprint("items", __name__, url_prefix="/api/items")


@items_bp.get("")
def list_items_route():
    """All items ordered by name."""
    try:
        items = inventory_service.list_items()
        return jsonify([i.to_dict() for i in items])
    except StorageError as e:
        return jsonify({"error": str(e)}), 500


@items_bp.post("")
def create_item_route():
    """
    Add an item.

    Request body:
    {
        "name": "Coca-Cola 500ml",   // required
        "buying_price": 80,
        "selling_price": 100,
        "stock": 24,                 // optional, default 0
        "barcode": "...",
        "category": "Beverages"
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=False)
        enforce_rules_item(patch)
        item = inventory_service.create_item(patch=patch)
        return jsonify(item.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to create item")
        return jsonify({"error": "Internal server error"}), 500


@items_bp.put("/<int:item_id>/stock")
def set_stock_route(item_id: int):
    """
    Overwrite the stock count (absolute, not an increment).

    Request body: {"stock": 12}
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Item, payload=payload, policy=STOCK_POLICY, partial=True)
        enforce_rules_stock(patch)
        item = inventory_service.set_stock(item_id=item_id, stock=patch["stock"])
        return jsonify(item.to_dict())
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except Exception:
        current_app.logger.exception("Failed to set stock")
        return jsonify({"error": "Internal server error"}), 500
