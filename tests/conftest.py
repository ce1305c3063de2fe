from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from returns.result import Failure

from table_order.adapters.outbound.in_memory_carts import InMemoryCartSessions
from table_order.adapters.outbound.in_memory_menu import InMemoryMenuCatalog
from table_order.adapters.outbound.in_memory_orders import InMemoryOrderStore
from table_order.adapters.outbound.in_process_feed import InProcessChangeFeed
from table_order.core.domain.model.errors import PersistenceError
from table_order.core.domain.model.line_items import SerializedItems
from table_order.core.domain.model.menu import Category, MenuItem, MenuItemId
from table_order.core.domain.model.money import Money
from table_order.core.domain.model.order import Order, OrderId, OrderStatus

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class BrokenOrderStore:
    """Order store whose every call fails like an unreachable backend."""

    def insert(self, draft):
        return Failure(PersistenceError("connection refused"))

    def list_all(self):
        return Failure(PersistenceError("connection refused"))

    def update_status(self, order_id, status, updated_at):
        return Failure(PersistenceError("connection refused"))


@pytest.fixture
def menu_item():
    def make(
        item_id: str = "A",
        price: int | str = 100,
        temperature: str | None = None,
        size: str | None = None,
        category: Category = Category.VEG,
        name: str | None = None,
    ) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(item_id),
            category=category,
            name=name or f"Item {item_id}",
            price=Money.of(price),
            size=size,
            temperature=temperature,
        )

    return make


@pytest.fixture
def make_order():
    def make(
        table: int = 1,
        status: OrderStatus = OrderStatus.PENDING,
        minutes: int = 0,
        items: str = "[]",
    ) -> Order:
        at = T0 + timedelta(minutes=minutes)
        return Order(
            order_id=OrderId.new(),
            customer_name="Asha",
            table_number=table,
            items=SerializedItems(items),
            total_amount=Money.of(0),
            status=status,
            created_at=at,
            updated_at=at,
        )

    return make


@pytest.fixture
def catalog(menu_item) -> InMemoryMenuCatalog:
    return InMemoryMenuCatalog.seeded(
        [
            menu_item("A", 100, temperature="cold", size="small"),
            menu_item("B", 50),
            menu_item("W", 20, temperature="cold", category=Category.WATER, name="Water"),
        ]
    )


@pytest.fixture
def sessions() -> InMemoryCartSessions:
    return InMemoryCartSessions()


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def feed() -> InProcessChangeFeed:
    return InProcessChangeFeed()


@pytest.fixture
def broken_store() -> BrokenOrderStore:
    return BrokenOrderStore()
