from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.order import Order


@dataclass(frozen=True)
class SetStatusCommand:
    order_id: str  # UUID string
    status: str


class SetStatusUseCase(Protocol):
    def set_status(self, command: SetStatusCommand) -> Result[Order, OrderError]: ...
