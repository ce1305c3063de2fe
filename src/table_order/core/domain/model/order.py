from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from table_order.core.domain.model.line_items import (
    OrderLine,
    StoredItems,
    parse_items,
)
from table_order.core.domain.model.money import Money

TABLE_NUMBERS: tuple[int, ...] = tuple(range(1, 11))


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "inprogress"
    SLOW = "slow"
    DELAY = "delay"
    COMPLETE = "complete"


class StatusBucket(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


_BUCKET_BY_STATUS = {
    OrderStatus.PENDING: StatusBucket.PENDING,
    OrderStatus.IN_PROGRESS: StatusBucket.IN_PROGRESS,
    OrderStatus.SLOW: StatusBucket.IN_PROGRESS,
    OrderStatus.DELAY: StatusBucket.IN_PROGRESS,
    OrderStatus.COMPLETE: StatusBucket.COMPLETE,
}


def bucket_of(status: OrderStatus) -> StatusBucket:
    return _BUCKET_BY_STATUS[status]


@dataclass(frozen=True)
class OrderId:
    value: UUID

    @staticmethod
    def new() -> "OrderId":
        return OrderId(uuid4())


@dataclass(frozen=True)
class OrderDraft:
    """What the customer side writes; id and timestamps come from the store."""

    customer_name: str
    table_number: int
    items: StoredItems
    total_amount: Money
    message: str | None = None
    status: OrderStatus = OrderStatus.PENDING


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    customer_name: str
    table_number: int
    items: StoredItems
    total_amount: Money
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    message: str | None = None

    def lines(self) -> tuple[OrderLine, ...]:
        return parse_items(self.items)

    @property
    def bucket(self) -> StatusBucket:
        return bucket_of(self.status)


def set_status(order: Order, new_status: OrderStatus, at: datetime) -> Order:
    # any state may move to any state, the current one included
    return replace(order, status=new_status, updated_at=at)
