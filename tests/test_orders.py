from __future__ import annotations

from fastapi.testclient import TestClient


def place_order(client: TestClient, **overrides) -> int:
    payload = {
        "items": [{"id": 1, "qty": 2}, {"id": 4, "qty": 1}],
        "customer": {"name": "Asha Rao", "email": "asha@example.com", "phone": "+919812345678"},
        "total": 580,
    }
    payload.update(overrides)
    response = client.post("/api/orders", json=payload)
    assert response.status_code == 200
    return response.json()["orderId"]


def test_order_lines_use_current_menu_price(client: TestClient, senders, run_sql) -> None:
    order_id = place_order(
        client,
        items=[{"id": 1, "qty": 2, "price": 1}, {"id": 2, "qty": 1, "price": 1}, {"id": 5, "qty": 3}],
    )

    rows = run_sql(
        "SELECT menu_id, quantity, price FROM order_items WHERE order_id = :order_id ORDER BY id",
        order_id=order_id,
    )
    assert rows == [
        {"menu_id": 1, "quantity": 2, "price": 250},
        {"menu_id": 2, "quantity": 1, "price": 220},
        {"menu_id": 5, "quantity": 3, "price": 120},
    ]


def test_price_snapshot_survives_menu_price_change(client: TestClient, senders, run_sql) -> None:
    order_id = place_order(client, items=[{"id": 3, "qty": 1}])
    run_sql("UPDATE menu SET price = 999 WHERE id = 3")

    orders = client.get("/api/orders").json()
    order = next(o for o in orders if o["id"] == order_id)
    assert order["items"][0]["price"] == 180


def test_unknown_menu_id_is_skipped(client: TestClient, senders, run_sql) -> None:
    order_id = place_order(client, items=[{"id": 1, "qty": 1}, {"id": 404, "qty": 5}, {"qty": 1}])

    count = run_sql(
        "SELECT COUNT(*) AS c FROM order_items WHERE order_id = :order_id", order_id=order_id
    )[0]["c"]
    assert count == 1


def test_total_is_stored_as_sent(client: TestClient, senders) -> None:
    place_order(client, items=[{"id": 1, "qty": 1}], total=1)

    order = client.get("/api/orders").json()[0]
    assert order["total"] == 1
    assert order["status"] == "pending"


def test_orders_listed_newest_first_with_item_names(client: TestClient, senders) -> None:
    first = place_order(client, items=[{"id": 2, "qty": 1}])
    second = place_order(client, items=[{"id": 3, "qty": 2}, {"id": 4, "qty": 1}])

    orders = client.get("/api/orders").json()

    assert [o["id"] for o in orders] == [second, first]
    assert [(i["name"], i["quantity"]) for i in orders[0]["items"]] == [
        ("Veg Biryani", 2),
        ("Garlic Bread", 1),
    ]
    assert orders[0]["customer_email"] == "asha@example.com"


def test_deleted_menu_item_shows_null_name(client: TestClient, senders, run_sql) -> None:
    place_order(client, items=[{"id": 5, "qty": 1}])
    run_sql("DELETE FROM menu WHERE id = 5")

    response = client.get("/api/orders")

    assert response.status_code == 200
    item = response.json()[0]["items"][0]
    assert item["menu_id"] == 5
    assert item["name"] is None


def test_missing_fields_default_to_empty(client: TestClient, senders) -> None:
    sms, email = senders

    response = client.post("/api/orders", json={})

    assert response.status_code == 200
    order = client.get("/api/orders").json()[0]
    assert order["customer_name"] == ""
    assert order["total"] == 0
    assert order["items"] == []
    assert sms.sent == []
    assert email.sent == []


def test_order_confirmations_sent_to_phone_and_email(client: TestClient, senders) -> None:
    sms, email = senders

    order_id = place_order(client)

    assert sms.sent == [
        ("+919812345678", f"Order Confirmed!\nOrder ID: {order_id}\nTotal: ₹580\nThank you for your order!")
    ]
    to_email, subject, html = email.sent[0]
    assert to_email == "asha@example.com"
    assert subject == f"Order Confirmation #{order_id}"
    assert "Margherita Pizza" in html
    assert "Garlic Bread" in html
    assert "₹580.00" in html


def test_no_email_sent_without_address(client: TestClient, senders) -> None:
    sms, email = senders

    place_order(client, customer={"name": "Walk-in", "phone": "+911234"})

    assert len(sms.sent) == 1
    assert email.sent == []


def test_sms_failure_does_not_change_response(client: TestClient, senders, monkeypatch) -> None:
    from app.services import notifications
    from tests.fakes import RecordingSmsSender

    _, email = senders
    monkeypatch.setattr(notifications, "_sms_sender", RecordingSmsSender(fail_with=RuntimeError("boom")))

    response = client.post(
        "/api/orders",
        json={"items": [{"id": 1, "qty": 1}], "customer": {"phone": "+911234", "email": "a@example.com"}, "total": 250},
    )

    assert response.status_code == 200
    assert set(response.json()) == {"orderId"}
    assert len(email.sent) == 1


def test_null_and_blank_fields_fall_back_to_defaults(client: TestClient, senders) -> None:
    sms, email = senders

    response = client.post(
        "/api/orders",
        json={
            "items": [{"id": 2, "qty": None}, {"id": "", "qty": 1}, {"id": 4, "qty": ""}],
            "customer": {"name": "A", "email": None, "phone": "+91"},
            "total": None,
        },
    )

    assert response.status_code == 200
    order = client.get("/api/orders").json()[0]
    assert order["customer_email"] == ""
    assert order["customer_phone"] == "+91"
    assert order["total"] == 0
    assert [(i["menu_id"], i["quantity"]) for i in order["items"]] == [(2, 1), (4, 1)]
    assert len(sms.sent) == 1
    assert email.sent == []


def test_null_customer_is_anonymous(client: TestClient, senders) -> None:
    response = client.post("/api/orders", json={"items": None, "customer": None, "total": 0})

    assert response.status_code == 200
    order = client.get("/api/orders").json()[0]
    assert order["customer_name"] == ""
    assert order["items"] == []
