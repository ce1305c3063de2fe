from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.order import Order, OrderDraft, OrderId, OrderStatus


class OrderStore(Protocol):
    def insert(self, draft: OrderDraft) -> Result[Order, OrderError]: ...

    def list_all(self) -> Result[Sequence[Order], OrderError]:
        """Every order, newest first."""
        ...

    def update_status(
        self, order_id: OrderId, status: OrderStatus, updated_at: datetime
    ) -> Result[Order, OrderError]: ...
