from decimal import Decimal

import pytest


def test_create_order_returns_201_with_items(client, order_payload):
    resp = client.post("/api/orders", json=order_payload)

    assert resp.status_code == 201
    data = resp.json()
    assert Decimal(data["totalAmount"]) == Decimal("25.00")
    assert data["status"] == "received"
    assert data["paymentStatus"] == "pending"
    assert data["paymentMethod"] == "cash"
    assert data["estimatedTime"] == 20
    assert data["specialInstructions"] == "no onions"
    assert [(i["name"], i["quantity"]) for i in data["orderItems"]] == [("Burger", 2), ("Lemonade", 1)]
    assert Decimal(data["orderItems"][0]["totalPrice"]) == Decimal("20.00")


def test_create_order_with_trailing_slash(client, order_payload):
    assert client.post("/api/orders/", json=order_payload).status_code == 201


@pytest.mark.parametrize("table_number", [0, 101])
def test_create_order_table_out_of_range(client, order_payload, table_number):
    order_payload["tableNumber"] = table_number

    resp = client.post("/api/orders", json=order_payload)

    assert resp.status_code == 400
    assert "Table number" in resp.json()["message"]


@pytest.mark.parametrize("table_number", [1, 100])
def test_create_order_table_bounds(client, order_payload, table_number):
    order_payload["tableNumber"] = table_number

    assert client.post("/api/orders", json=order_payload).status_code == 201


def test_create_order_empty_items(client, order_payload):
    order_payload["items"] = []

    resp = client.post("/api/orders", json=order_payload)

    assert resp.status_code == 400


def test_create_order_malformed_body(client, order_payload):
    order_payload["tableNumber"] = "seven"

    resp = client.post("/api/orders", json=order_payload)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request data"
    assert resp.json()["errors"]


def test_get_order_by_id_and_number(client, order_payload):
    created = client.post("/api/orders", json=order_payload).json()

    by_id = client.get(f"/api/orders/{created['id']}")
    by_number = client.get(f"/api/orders/by-number/{created['orderNumber']}")

    assert by_id.status_code == 200
    assert by_number.status_code == 200
    for fetched in (by_id.json(), by_number.json()):
        assert fetched["totalAmount"] == created["totalAmount"]
        assert fetched["orderItems"] == created["orderItems"]


def test_unknown_order_returns_404(client):
    assert client.get("/api/orders/999").status_code == 404
    resp = client.get("/api/orders/by-number/ORD000")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Order not found"}


def test_list_orders_and_by_table(client, order_payload):
    client.post("/api/orders", json=order_payload)
    order_payload["tableNumber"] = 8
    client.post("/api/orders", json=order_payload)

    assert len(client.get("/api/orders").json()) == 2
    table_orders = client.get("/api/orders/table/8").json()
    assert [o["tableNumber"] for o in table_orders] == [8]
    assert client.get("/api/orders/table/55").json() == []


def test_orders_by_table_rejects_non_numeric(client):
    resp = client.get("/api/orders/table/abc")

    assert resp.status_code == 400


def test_last_updated_tracks_changes(client, order_payload):
    assert client.get("/api/orders/last-updated").json()["lastUpdated"] is None

    created = client.post("/api/orders", json=order_payload).json()
    first = client.get("/api/orders/last-updated").json()["lastUpdated"]
    client.patch(f"/api/orders/{created['id']}/status", json={"status": "preparing"})
    second = client.get("/api/orders/last-updated").json()["lastUpdated"]

    assert first is not None
    assert second >= first


def test_status_updates_walk_the_flow(client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).json()["id"]

    for status in ["received", "preparing", "ready", "served"]:
        resp = client.patch(f"/api/orders/{order_id}/status", json={"status": status})
        assert resp.status_code == 200
        assert resp.json()["status"] == status


def test_status_update_rejects_unknown_value(client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).json()["id"]

    resp = client.patch(f"/api/orders/{order_id}/status", json={"status": "burnt"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid status"


def test_status_update_rejects_skipping(client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).json()["id"]

    resp = client.patch(f"/api/orders/{order_id}/status", json={"status": "served"})

    assert resp.status_code == 400


def test_status_update_unknown_order(client):
    resp = client.patch("/api/orders/12345/status", json={"status": "ready"})

    assert resp.status_code == 404


def test_payment_update_requires_admin(client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).json()["id"]

    resp = client.patch(f"/api/orders/{order_id}/payment", json={"paymentStatus": "paid"})

    assert resp.status_code == 401


def test_payment_update_as_admin(admin_client, order_payload):
    order_id = admin_client.post("/api/orders", json=order_payload).json()["id"]

    ok = admin_client.patch(f"/api/orders/{order_id}/payment", json={"paymentStatus": "paid"})
    bad = admin_client.patch(f"/api/orders/{order_id}/payment", json={"paymentStatus": "maybe"})

    assert ok.status_code == 200
    assert ok.json()["paymentStatus"] == "paid"
    assert bad.status_code == 400
