from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from table_order.core.domain.model.errors import OrderError, ValidationError
from table_order.core.domain.model.money import now_utc
from table_order.core.domain.model.order import Order, OrderId, OrderStatus
from table_order.core.domain.service.store_errors import reported_as
from table_order.core.ports.inbound.set_status import SetStatusCommand, SetStatusUseCase
from table_order.core.ports.outbound.events import (
    ChangeType,
    EventPublisher,
    OrderChanged,
)
from table_order.core.ports.outbound.orders import OrderStore

logger = logging.getLogger(__name__)

_STATUS_CHOICES = ", ".join(s.value for s in OrderStatus)


@dataclass(frozen=True)
class SetStatusDeps:
    orders: OrderStore
    events: EventPublisher


@dataclass(frozen=True)
class SetStatusService(SetStatusUseCase):
    """Operator-driven status changes.

    There is no transition table: any status may follow any other,
    including itself. Nothing here moves an order on a timer.
    """

    deps: SetStatusDeps

    def set_status(self, command: SetStatusCommand) -> Result[Order, OrderError]:
        return flow(
            command,
            _validate_command,
            bind(self._update),
            map_(self._publish),
        )

    def _update(
        self, target: tuple[OrderId, OrderStatus]
    ) -> Result[Order, OrderError]:
        order_id, status = target
        return self.deps.orders.update_status(order_id, status, now_utc()).alt(
            reported_as("Failed to update order status")
        )

    def _publish(self, order: Order) -> Order:
        logger.info("order %s -> %s", order.order_id.value, order.status.value)
        published = self.deps.events.publish(
            OrderChanged(ChangeType.UPDATE, order.order_id)
        )
        if isinstance(published, Failure):
            logger.warning("change notification failed: %s", published.failure())
        return order


def _validate_command(
    cmd: SetStatusCommand,
) -> Result[tuple[OrderId, OrderStatus], OrderError]:
    try:
        order_id = OrderId(UUID(cmd.order_id))
    except (TypeError, ValueError):
        return Failure(ValidationError(message="order_id must be a valid UUID"))

    try:
        status = OrderStatus(cmd.status)
    except ValueError:
        return Failure(
            ValidationError(message=f"status must be one of: {_STATUS_CHOICES}")
        )

    return Success((order_id, status))
