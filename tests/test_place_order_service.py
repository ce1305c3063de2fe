from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from returns.result import Failure, Success

from table_order.core.domain.model.errors import CartNotFound, ValidationError
from table_order.core.domain.model.line_items import MAX_QUANTITY
from table_order.core.domain.model.menu import MenuItemId
from table_order.core.domain.model.order import OrderStatus
from table_order.core.domain.service.place_order_service import (
    MISSING_FIELDS,
    PlaceOrderDeps,
    PlaceOrderService,
)
from table_order.core.ports.inbound.place_order import PlaceOrderCommand


@pytest.fixture
def filled_cart(sessions, catalog):
    cart = sessions.open().unwrap()
    a = catalog.get(MenuItemId("A")).unwrap()
    b = catalog.get(MenuItemId("B")).unwrap()
    cart.add_item(a, "cold")
    cart.add_item(a, "cold")
    cart.add_item(b, None)
    return cart


def _command(cart, **overrides):
    fields = dict(
        cart_id=str(cart.cart_id.value),
        customer_name="Asha",
        table_number=4,
        message="no onions",
    )
    fields.update(overrides)
    return PlaceOrderCommand(**fields)


def test_places_pending_order_with_cart_total(sessions, order_store, feed, filled_cart):
    events = []
    feed.subscribe(events.append)
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    result = svc.place_order(_command(filled_cart))

    assert isinstance(result, Success)
    receipt = result.unwrap()
    assert receipt.total.amount == Decimal("250.00")
    assert receipt.status is OrderStatus.PENDING
    assert receipt.table_number == 4

    (stored,) = order_store.list_all().unwrap()
    assert stored.order_id == receipt.order_id
    assert stored.message == "no onions"
    assert sum(ln.subtotal().amount for ln in stored.lines()) == stored.total_amount.amount
    assert [(ln.item_id, ln.temperature, ln.quantity) for ln in stored.lines()] == [
        ("A", "cold", 2),
        ("B", None, 1),
    ]
    assert filled_cart.is_empty()
    assert [e.order_id for e in events] == [receipt.order_id]


def test_blank_message_is_stored_as_none(sessions, order_store, feed, filled_cart):
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    svc.place_order(_command(filled_cart, message="   "))

    assert order_store.list_all().unwrap()[0].message is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"customer_name": ""},
        {"customer_name": "   "},
        {"table_number": None},
        {"table_number": 0},
        {"table_number": 11},
    ],
)
def test_missing_fields_are_rejected_before_the_store(
    sessions, broken_store, feed, filled_cart, overrides
):
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=broken_store, events=feed))

    result = svc.place_order(_command(filled_cart, **overrides))

    assert isinstance(result.failure(), ValidationError)
    assert result.failure().message == MISSING_FIELDS
    assert not filled_cart.is_empty()


def test_empty_cart_is_rejected(sessions, order_store, feed):
    cart = sessions.open().unwrap()
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    result = svc.place_order(_command(cart))

    assert result.failure().message == MISSING_FIELDS
    assert order_store.list_all().unwrap() == ()


def test_unknown_cart(sessions, order_store, feed):
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    result = svc.place_order(
        PlaceOrderCommand(
            cart_id="00000000-0000-0000-0000-000000000000",
            customer_name="Asha",
            table_number=1,
        )
    )

    assert isinstance(result.failure(), CartNotFound)


def test_store_failure_keeps_the_cart(sessions, broken_store, feed, filled_cart):
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=broken_store, events=feed))

    result = svc.place_order(_command(filled_cart))

    assert isinstance(result, Failure)
    assert result.failure().message == "Failed to submit order"
    assert filled_cart.total().amount == Decimal("250.00")


def test_feed_outage_does_not_fail_a_stored_order(sessions, order_store, feed, filled_cart):
    feed.fail = True
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    result = svc.place_order(_command(filled_cart))

    assert isinstance(result, Success)
    assert len(order_store.list_all().unwrap()) == 1


def test_quantity_past_the_limit_is_rejected(sessions, order_store, feed, catalog):
    cart = sessions.open().unwrap()
    b = catalog.get(MenuItemId("B")).unwrap()
    for _ in range(MAX_QUANTITY + 1):
        cart.add_item(b, None)
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    result = svc.place_order(_command(cart))

    assert isinstance(result.failure(), ValidationError)
    assert order_store.list_all().unwrap() == ()
    assert not cart.is_empty()


def test_concurrent_submits_store_each_unit_once(sessions, order_store, feed, catalog):
    cart = sessions.open().unwrap()
    b = catalog.get(MenuItemId("B")).unwrap()
    svc = PlaceOrderService(PlaceOrderDeps(sessions=sessions, orders=order_store, events=feed))

    def add_then_submit(_):
        cart.add_item(b, None)
        svc.place_order(_command(cart))

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(add_then_submit, range(40)))
    svc.place_order(_command(cart))

    stored = order_store.list_all().unwrap()
    assert sum(ln.quantity for o in stored for ln in o.lines()) == 40
    assert cart.is_empty()
