from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.money import Money
from table_order.core.domain.model.order import OrderId, OrderStatus


@dataclass(frozen=True)
class PlaceOrderCommand:
    cart_id: str  # UUID string
    customer_name: str
    table_number: int | None
    message: str | None = None


@dataclass(frozen=True)
class OrderReceipt:
    order_id: OrderId
    customer_name: str
    table_number: int
    total: Money
    status: OrderStatus


class PlaceOrderUseCase(Protocol):
    def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, OrderError]: ...
