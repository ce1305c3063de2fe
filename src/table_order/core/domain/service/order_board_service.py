from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from returns.result import Failure, Result, Success

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.line_items import preview_items
from table_order.core.domain.model.order import Order
from table_order.core.domain.service.store_errors import reported_as
from table_order.core.domain.service.views import group_by_status_bucket, group_by_table
from table_order.core.ports.inbound.order_board import (
    BoardQuery,
    BoardView,
    OrderBoardUseCase,
    OrderCard,
    StatusBucketsView,
    TableGroupView,
)
from table_order.core.ports.outbound.events import ChangeFeed, OrderChanged, Subscription
from table_order.core.ports.outbound.orders import OrderStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderBoardDeps:
    orders: OrderStore


@dataclass
class OrderBoardService(OrderBoardUseCase):
    """Owner dashboard model.

    Keeps the last fetched order list. Every change notification triggers a
    full re-fetch; the newest successful fetch replaces the list, a failed
    one leaves it as it was.
    """

    deps: OrderBoardDeps
    _orders: tuple[Order, ...] = ()
    _loaded: bool = False
    _subscription: Subscription | None = field(default=None, repr=False)

    # ---- feed --------------------------------------------------------------

    def attach(self, feed: ChangeFeed) -> None:
        self.detach()
        self._subscription = feed.subscribe(self.on_change)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def on_change(self, event: OrderChanged) -> None:
        logger.debug("order %s changed (%s)", event.order_id.value, event.change.value)
        refreshed = self.refresh()
        if isinstance(refreshed, Failure):
            logger.warning("board refresh after change failed: %s", refreshed.failure())

    def refresh(self) -> Result[tuple[Order, ...], OrderError]:
        def keep(orders: Sequence[Order]) -> tuple[Order, ...]:
            self._orders = tuple(orders)
            self._loaded = True
            return self._orders

        return (
            self.deps.orders.list_all()
            .map(keep)
            .alt(reported_as("Failed to fetch orders"))
        )

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._orders

    # ---- views -------------------------------------------------------------

    def list_orders(self, query: BoardQuery) -> Result[BoardView, OrderError]:
        return self._current(query).map(_board)

    def by_status(self, query: BoardQuery) -> Result[StatusBucketsView, OrderError]:
        def to_view(orders: tuple[Order, ...]) -> StatusBucketsView:
            buckets = group_by_status_bucket(orders)
            return StatusBucketsView(
                pending=_board(buckets.pending),
                in_progress=_board(buckets.in_progress),
                complete=_board(buckets.complete),
            )

        return self._current(query).map(to_view)

    def by_table(
        self, query: BoardQuery
    ) -> Result[Sequence[TableGroupView], OrderError]:
        def to_view(orders: tuple[Order, ...]) -> Sequence[TableGroupView]:
            return tuple(
                TableGroupView(table_number=table, board=_board(group))
                for table, group in group_by_table(orders).items()
            )

        return self._current(query).map(to_view)

    def _current(self, query: BoardQuery) -> Result[tuple[Order, ...], OrderError]:
        if query.refresh or not self._loaded:
            return self.refresh()
        return Success(self._orders)


def _board(orders: Sequence[Order]) -> BoardView:
    return BoardView(cards=tuple(_card(o) for o in orders))


def _card(order: Order) -> OrderCard:
    lines = order.lines()
    preview, more = preview_items(lines)
    return OrderCard(order=order, lines=lines, preview=preview, more_items=more)
