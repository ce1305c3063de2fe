from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from table_order.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    PersistenceError,
)
from table_order.core.domain.model.money import now_utc
from table_order.core.domain.model.order import (
    Order,
    OrderDraft,
    OrderId,
    OrderStatus,
    set_status,
)
from table_order.core.ports.outbound.orders import OrderStore


@dataclass
class InMemoryOrderStore(OrderStore):
    _store: Dict[str, Order] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def insert(self, draft: OrderDraft) -> Result[Order, OrderError]:
        order_id = OrderId.new()
        now = now_utc()
        order = Order(
            order_id=order_id,
            customer_name=draft.customer_name,
            table_number=draft.table_number,
            items=draft.items,
            total_amount=draft.total_amount,
            status=draft.status,
            created_at=now,
            updated_at=now,
            message=draft.message,
        )
        key = str(order_id.value)
        with self._lock:
            if key in self._store:
                return Failure(PersistenceError(message="order_id already exists"))
            self._store[key] = order
        return Success(order)

    def list_all(self) -> Result[Sequence[Order], OrderError]:
        # reversed first so equal timestamps still come out newest first
        with self._lock:
            orders = list(reversed(self._store.values()))
        return Success(
            tuple(sorted(orders, key=lambda o: o.created_at, reverse=True))
        )

    def update_status(
        self, order_id: OrderId, status: OrderStatus, updated_at: datetime
    ) -> Result[Order, OrderError]:
        key = str(order_id.value)
        with self._lock:
            if key not in self._store:
                return Failure(OrderNotFound(message="order not found", order_id=key))
            order = set_status(self._store[key], status, updated_at)
            self._store[key] = order
        return Success(order)
