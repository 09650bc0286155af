"""
Bottle ledger tests (service and HTTP).

Verifies:
- Missing customer_id / bottle_type is rejected with 400 and nothing is stored
- Returning an unknown record is a 404
- Pending-only listing excludes returned bottles
"""

from datetime import date

import pytest

from shopledger.models import BottleRecord
from shopledger.services import bottle_service
from shopledger.services.bottle_service import BottleNotFoundError
from shopledger.time_utils import today
from shopledger.validation import ValidationError


class TestCreateBottle:

    def test_create_defaults(self, client, customer):
        resp = client.post("/api/bottles", json={"customer_id": customer.id, "bottle_type": "Beer crate"})

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["quantity"] == 1
        assert body["deposit_amount"] == 0.0
        assert body["notes"] == ""
        assert body["returned"] is False
        assert body["returned_date"] is None
        assert body["taken_date"] == today().isoformat()

    @pytest.mark.parametrize("payload", [
        {"bottle_type": "Gas cylinder"},
        {"customer_id": None, "bottle_type": "Gas cylinder"},
        {"customer_id": 1},
        {"customer_id": 1, "bottle_type": "   "},
    ])
    def test_missing_fields_return_400_and_store_nothing(self, client, db_session, payload):
        resp = client.post("/api/bottles", json=payload)

        assert resp.status_code == 400
        assert db_session.query(BottleRecord).count() == 0

    def test_unknown_customer_is_rejected(self, db_session, customer):
        with pytest.raises(ValidationError):
            bottle_service.create_bottle_record(customer_id=customer.id + 77, bottle_type="Crate")

        assert db_session.query(BottleRecord).count() == 0


class TestReturnBottle:

    def test_return_sets_flag_and_date(self, client, customer):
        bottle = client.post("/api/bottles", json={
            "customer_id": customer.id,
            "bottle_type": "Milk can",
            "quantity": 2,
            "deposit_amount": 150,
        }).get_json()

        resp = client.put(f"/api/bottles/{bottle['id']}/return")

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["returned"] is True
        assert body["returned_date"] == today().isoformat()

    def test_unknown_bottle_returns_404(self, client):
        resp = client.put("/api/bottles/55555/return")

        assert resp.status_code == 404

    def test_service_raises_not_found(self, db_session):
        with pytest.raises(BottleNotFoundError):
            bottle_service.return_bottle(bottle_id=55555)

    def test_second_return_keeps_first_date(self, db_session, customer):
        bottle = BottleRecord(
            customer_id=customer.id,
            bottle_type="Crate",
            returned=True,
            returned_date=date(2026, 1, 5),
        )
        db_session.add(bottle)
        db_session.commit()

        again = bottle_service.return_bottle(bottle_id=bottle.id)

        assert again.returned_date == date(2026, 1, 5)


class TestListBottles:

    def test_all_and_pending_views(self, client, customer):
        kept = client.post("/api/bottles", json={"customer_id": customer.id, "bottle_type": "Crate"}).get_json()
        back = client.post("/api/bottles", json={"customer_id": customer.id, "bottle_type": "Cylinder"}).get_json()
        client.put(f"/api/bottles/{back['id']}/return")

        all_rows = client.get("/api/bottles").get_json()
        pending = client.get("/api/bottles?status=pending").get_json()

        assert {r["id"] for r in all_rows} == {kept["id"], back["id"]}
        assert [r["id"] for r in pending] == [kept["id"]]
        assert pending[0]["customer_name"] == "Ramesh"
        assert pending[0]["phone"] == "9800000001"
        assert client.get("/api/bottles?status=lost").status_code == 400

    def test_missing_customer_gets_placeholder_name(self, db_session):
        db_session.add(BottleRecord(customer_id=None, bottle_type="Crate"))
        db_session.commit()

        rows = bottle_service.list_bottles()

        assert rows[0]["customer_name"] == bottle_service.UNKNOWN_CUSTOMER_NAME
        assert rows[0]["phone"] is None

    def test_ordered_by_taken_date_desc(self, db_session, customer):
        old = BottleRecord(customer_id=customer.id, bottle_type="Crate", taken_date=date(2025, 6, 1))
        new = BottleRecord(customer_id=customer.id, bottle_type="Crate", taken_date=date(2026, 6, 1))
        db_session.add_all([old, new])
        db_session.commit()

        assert [r["id"] for r in bottle_service.list_bottles()] == [new.id, old.id]
