"""
Inventory HTTP tests: item creation, listing and absolute stock updates.
"""

import pytest

from shopledger.models import Item


class TestItems:

    def test_create_item_defaults_stock_to_zero(self, client):
        resp = client.post("/api/items", json={
            "name": "Lays Chips",
            "buying_price": 15,
            "selling_price": "20.00",
            "barcode": "8901491101837",
            "category": "Snacks",
        })

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["id"] is not None
        assert body["stock"] == 0
        assert body["buying_price"] == 15.0
        assert body["selling_price"] == 20.0

    @pytest.mark.parametrize("payload", [
        {},
        {"buying_price": 10},
        {"name": ""},
        {"name": None},
        {"name": "x" * 101},
        {"name": "Soap", "stock": -1},
        {"name": "Soap", "selling_price": -3},
        {"name": "Soap", "buying_price": "1e30"},
        {"name": "Soap", "colour": "blue"},
    ])
    def test_create_item_rejects_invalid_payload(self, client, db_session, payload):
        resp = client.post("/api/items", json=payload)

        assert resp.status_code == 400
        assert db_session.query(Item).count() == 0

    def test_list_is_ordered_by_name(self, client):
        for name in ("Sugar", "Biscuits", "Milk"):
            client.post("/api/items", json={"name": name})

        names = [i["name"] for i in client.get("/api/items").get_json()]

        assert names == ["Biscuits", "Milk", "Sugar"]


class TestStock:

    def test_stock_is_set_not_incremented(self, client, item):
        resp = client.put(f"/api/items/{item.id}/stock", json={"stock": 5})

        assert resp.status_code == 200
        assert resp.get_json()["stock"] == 5

        resp = client.put(f"/api/items/{item.id}/stock", json={"stock": 5})
        assert resp.get_json()["stock"] == 5

    def test_unknown_item_returns_404(self, client):
        resp = client.put("/api/items/31337/stock", json={"stock": 3})

        assert resp.status_code == 404

    @pytest.mark.parametrize("payload", [{}, {"stock": None}, {"stock": "a lot"}, {"stock": 2.5}, {"stock": -4}])
    def test_invalid_stock_returns_400(self, client, item, payload):
        resp = client.put(f"/api/items/{item.id}/stock", json=payload)

        assert resp.status_code == 400
