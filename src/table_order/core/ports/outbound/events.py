from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.order import OrderId


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class OrderChanged:
    change: ChangeType
    order_id: OrderId


Listener = Callable[[OrderChanged], None]


class EventPublisher(Protocol):
    def publish(self, event: OrderChanged) -> Result[None, OrderError]: ...


class Subscription(Protocol):
    def close(self) -> None: ...


class ChangeFeed(Protocol):
    def subscribe(self, listener: Listener) -> Subscription: ...
