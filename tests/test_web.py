import importlib

import pytest
from fastapi.testclient import TestClient

from table_order.adapters.inbound.web.fastapi_app import create_app
from table_order.bootstrap import build_usecases


@pytest.fixture
def client():
    uc = build_usecases()
    app = create_app(uc.browse_menu, uc.cart, uc.place_order, uc.order_board, uc.set_status)
    return TestClient(app)


def _open_cart(client) -> str:
    res = client.post("/carts")
    assert res.status_code == 201
    return res.json()["cart_id"]


def _place(client, table=4, name="Asha", items=(("veg-paneer-tikka", None),)):
    cart_id = _open_cart(client)
    for item_id, temperature in items:
        body = {"item_id": item_id}
        if temperature is not None:
            body["temperature"] = temperature
        assert client.post(f"/carts/{cart_id}/items", json=body).status_code == 200
    res = client.post(
        f"/carts/{cart_id}/orders",
        json={"customer_name": name, "table_number": table},
    )
    assert res.status_code == 201
    return res.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_menu_is_grouped_by_category(client):
    body = client.get("/menu").json()

    assert [s["category"] for s in body["sections"]] == ["veg", "nonVeg", "water"]
    water = body["sections"][2]
    assert water["count"] == len(water["items"]) == 3
    assert water["items"][0]["currency"] == "INR"


def test_tables(client):
    assert client.get("/tables").json() == {"tables": list(range(1, 11))}


def test_cart_flow(client):
    cart_id = _open_cart(client)

    client.post(f"/carts/{cart_id}/items", json={"item_id": "water-500-cold"})
    client.post(f"/carts/{cart_id}/items", json={"item_id": "water-500-cold"})
    client.post(f"/carts/{cart_id}/items", json={"item_id": "water-500-cold", "temperature": None})
    body = client.get(f"/carts/{cart_id}").json()

    # omitted temperature falls back to the item's own, explicit null is its own line
    assert [(ln["temperature"], ln["quantity"]) for ln in body["lines"]] == [
        ("cold", 2),
        (None, 1),
    ]
    assert body["total"] == "60.00"
    assert body["item_count"] == 3

    body = client.post(
        f"/carts/{cart_id}/items/remove", json={"item_id": "water-500-cold"}
    ).json()
    assert body["lines"][0]["quantity"] == 1
    assert body["total"] == "40.00"

    body = client.delete(f"/carts/{cart_id}/items").json()
    assert body["lines"] == []
    assert body["total"] == "0.00"

    assert client.delete(f"/carts/{cart_id}").status_code == 204
    assert client.get(f"/carts/{cart_id}").status_code == 404


def test_cart_errors(client):
    cart_id = _open_cart(client)

    res = client.post(f"/carts/{cart_id}/items", json={"item_id": "nope"})
    assert res.status_code == 404
    assert res.json()["type"] == "MenuItemNotFound"

    res = client.get("/carts/not-a-uuid")
    assert res.status_code == 400

    res = client.post(f"/carts/{cart_id}/items", json={})
    assert res.status_code == 400
    assert res.json()["type"] == "RequestValidationError"


def test_submit_order(client):
    receipt = _place(
        client,
        items=(("veg-paneer-tikka", None), ("veg-paneer-tikka", None), ("water-1l-cold", None)),
    )

    assert receipt["total"] == "475.00"
    assert receipt["status"] == "pending"
    assert receipt["message"] == "Order submitted successfully!"


def test_submit_requires_fields_and_items(client):
    cart_id = _open_cart(client)

    res = client.post(f"/carts/{cart_id}/orders", json={"customer_name": "Asha", "table_number": 2})
    assert res.status_code == 400
    assert res.json()["message"] == "Please fill all required fields and add items to your order"

    client.post(f"/carts/{cart_id}/items", json={"item_id": "veg-dal-makhani"})
    res = client.post(f"/carts/{cart_id}/orders", json={"table_number": 2})
    assert res.status_code == 400

    res = client.post(f"/carts/{cart_id}/orders", json={"customer_name": "Asha", "table_number": 12})
    assert res.status_code == 400

    # nothing was lost from the cart
    assert client.get(f"/carts/{cart_id}").json()["item_count"] == 1


def test_submitted_order_clears_cart_and_reaches_the_board(client):
    cart_id = _open_cart(client)
    client.post(f"/carts/{cart_id}/items", json={"item_id": "veg-dal-makhani"})
    res = client.post(
        f"/carts/{cart_id}/orders",
        json={"customer_name": "Ravi", "table_number": 7, "message": "extra napkins"},
    )
    assert res.status_code == 201

    assert client.get(f"/carts/{cart_id}").json()["lines"] == []

    board = client.get("/orders").json()
    assert board["count"] == 1
    (order,) = board["orders"]
    assert order["customer_name"] == "Ravi"
    assert order["message"] == "extra napkins"
    assert order["items"][0]["name"] == "Dal Makhani"
    assert order["bucket"] == "pending"


def test_board_views(client):
    first = _place(client, table=3)
    second = _place(client, table=1)
    third = _place(client, table=1)

    res = client.put(f"/orders/{second['order_id']}/status", json={"status": "slow"})
    assert res.status_code == 200
    assert res.json()["message"] == "Order status updated to slow"

    by_status = client.get("/orders/by-status").json()
    assert [o["order_id"] for o in by_status["pending"]["orders"]] == [
        third["order_id"],
        first["order_id"],
    ]
    assert by_status["in_progress"]["count"] == 1
    assert by_status["in_progress"]["orders"][0]["status"] == "slow"
    assert by_status["complete"]["count"] == 0

    by_table = client.get("/orders/by-table").json()
    assert [(g["table_number"], g["count"]) for g in by_table["tables"]] == [(1, 2), (3, 1)]


def test_status_can_move_backwards_and_repeat(client):
    order_id = _place(client)["order_id"]

    for status in ("complete", "pending", "pending", "delay"):
        res = client.put(f"/orders/{order_id}/status", json={"status": status})
        assert res.status_code == 200
        assert res.json()["order"]["status"] == status


def test_status_errors(client):
    order_id = _place(client)["order_id"]

    res = client.put(f"/orders/{order_id}/status", json={"status": "cancelled"})
    assert res.status_code == 400

    res = client.put(
        "/orders/00000000-0000-0000-0000-000000000000/status", json={"status": "slow"}
    )
    assert res.status_code == 404
    assert res.json()["type"] == "OrderNotFound"


def test_shutdown_runs_closers():
    uc = build_usecases()
    closed = []
    app = create_app(
        uc.browse_menu,
        uc.cart,
        uc.place_order,
        uc.order_board,
        uc.set_status,
        on_shutdown=(lambda: closed.append("store"),),
    )

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert closed == []

    assert closed == ["store"]


def test_closing_a_cart_has_no_body(client):
    cart_id = _open_cart(client)

    res = client.delete(f"/carts/{cart_id}")

    assert res.status_code == 204
    assert res.content == b""
    assert client.delete(f"/carts/{cart_id}").status_code == 404


def test_asgi_module_builds_the_app(monkeypatch):
    monkeypatch.setenv("TABLE_ORDER_BACKEND", "memory")

    asgi = importlib.import_module("table_order.asgi")

    paths = {getattr(route, "path", None) for route in asgi.app.routes}
    assert {"/carts/{cart_id}", "/orders/{order_id}/status"} <= paths
