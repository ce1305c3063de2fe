from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from table_order.core.domain.model.cart import Cart, CartId
from table_order.core.domain.model.errors import OrderError, ValidationError
from table_order.core.domain.model.line_items import MAX_QUANTITY, serialize_items
from table_order.core.domain.model.order import (
    TABLE_NUMBERS,
    Order,
    OrderDraft,
    OrderStatus,
)
from table_order.core.domain.service.cart_service import parse_cart_id
from table_order.core.domain.service.store_errors import reported_as
from table_order.core.ports.inbound.place_order import (
    OrderReceipt,
    PlaceOrderCommand,
    PlaceOrderUseCase,
)
from table_order.core.ports.outbound.carts import CartSessions
from table_order.core.ports.outbound.events import (
    ChangeType,
    EventPublisher,
    OrderChanged,
)
from table_order.core.ports.outbound.orders import OrderStore

logger = logging.getLogger(__name__)

MISSING_FIELDS = "Please fill all required fields and add items to your order"


@dataclass(frozen=True)
class PlaceOrderDeps:
    sessions: CartSessions
    orders: OrderStore
    events: EventPublisher


@dataclass(frozen=True)
class PlaceOrderContext:
    command: PlaceOrderCommand
    cart_id: CartId
    cart: Cart | None = None
    draft: OrderDraft | None = None
    order: Order | None = None


@dataclass(frozen=True)
class PlaceOrderService(PlaceOrderUseCase):
    deps: PlaceOrderDeps

    def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, OrderError]:
        return flow(
            command,
            _validate_command,
            bind(self._load_cart),
            bind(self._submit),
            map_(self._publish),
            map_(_to_receipt),
        )

    def _load_cart(
        self, ctx: PlaceOrderContext
    ) -> Result[PlaceOrderContext, OrderError]:
        return self.deps.sessions.get(ctx.cart_id).map(
            lambda cart: replace(ctx, cart=cart)
        )

    def _submit(
        self, ctx: PlaceOrderContext
    ) -> Result[PlaceOrderContext, OrderError]:
        # the cart must not change between the snapshot and the reset
        with ctx.cart.lock:
            return flow(
                ctx,
                _build_draft,
                bind(self._persist),
                map_(self._clear_cart),
            )

    def _persist(
        self, ctx: PlaceOrderContext
    ) -> Result[PlaceOrderContext, OrderError]:
        return (
            self.deps.orders.insert(ctx.draft)
            .map(lambda order: replace(ctx, order=order))
            .alt(reported_as("Failed to submit order"))
        )

    def _clear_cart(self, ctx: PlaceOrderContext) -> PlaceOrderContext:
        ctx.cart.reset()
        return ctx

    def _publish(self, ctx: PlaceOrderContext) -> PlaceOrderContext:
        order = ctx.order
        logger.info(
            "order %s placed: table=%d total=%s",
            order.order_id.value,
            order.table_number,
            order.total_amount.amount,
        )
        published = self.deps.events.publish(
            OrderChanged(ChangeType.INSERT, order.order_id)
        )
        if isinstance(published, Failure):
            # the order is stored; watchers catch up on their next refresh
            logger.warning("change notification failed: %s", published.failure())
        return ctx


# ---- pure helpers ----------------------------------------------------------


def _validate_command(
    cmd: PlaceOrderCommand,
) -> Result[PlaceOrderContext, OrderError]:
    if not cmd.customer_name.strip():
        return Failure(ValidationError(MISSING_FIELDS))
    if cmd.table_number is None or cmd.table_number not in TABLE_NUMBERS:
        return Failure(ValidationError(MISSING_FIELDS))

    return parse_cart_id(cmd.cart_id).map(
        lambda cart_id: PlaceOrderContext(command=cmd, cart_id=cart_id)
    )


def _build_draft(ctx: PlaceOrderContext) -> Result[PlaceOrderContext, OrderError]:
    cart = ctx.cart
    if cart.is_empty():
        return Failure(ValidationError(MISSING_FIELDS))
    if any(ln.quantity > MAX_QUANTITY for ln in cart.lines):
        return Failure(
            ValidationError(f"at most {MAX_QUANTITY} of one item per order")
        )

    cmd = ctx.command
    message = (cmd.message or "").strip() or None
    # total is fixed here, from the same lines that get stored
    draft = OrderDraft(
        customer_name=cmd.customer_name.strip(),
        table_number=cmd.table_number,
        items=serialize_items(cart.snapshot()),
        total_amount=cart.total(),
        message=message,
        status=OrderStatus.PENDING,
    )
    return Success(replace(ctx, draft=draft))


def _to_receipt(ctx: PlaceOrderContext) -> OrderReceipt:
    order = ctx.order
    return OrderReceipt(
        order_id=order.order_id,
        customer_name=order.customer_name,
        table_number=order.table_number,
        total=order.total_amount,
        status=order.status,
    )
