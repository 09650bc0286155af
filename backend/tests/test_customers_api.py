"""
Customer registry HTTP tests.
"""


class TestCustomers:

    def test_create_customer_starts_with_zero_credit(self, client):
        resp = client.post("/api/customers", json={
            "name": "Sita",
            "phone": "9811111111",
            "address": "Main Road",
        })

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["total_credit"] == 0.0
        assert body["customer_type"] == "regular"

    def test_customer_type_is_kept(self, client):
        resp = client.post("/api/customers", json={"name": "Hotel Everest", "customer_type": "wholesale"})

        assert resp.status_code == 201
        assert resp.get_json()["customer_type"] == "wholesale"

    def test_total_credit_is_not_client_writable(self, client):
        resp = client.post("/api/customers", json={"name": "Sita", "total_credit": 1000})

        assert resp.status_code == 400
        assert client.get("/api/customers").get_json() == []

    def test_name_is_required(self, client):
        resp = client.post("/api/customers", json={"phone": "9800000000"})

        assert resp.status_code == 400
        assert "name" in resp.get_json()["error"]

    def test_list_is_ordered_by_name(self, client):
        for name in ("Zara", "Anil", "Maya"):
            client.post("/api/customers", json={"name": name})

        names = [c["name"] for c in client.get("/api/customers").get_json()]

        assert names == ["Anil", "Maya", "Zara"]
