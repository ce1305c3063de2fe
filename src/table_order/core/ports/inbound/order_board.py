from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.line_items import OrderLine
from table_order.core.domain.model.order import Order


@dataclass(frozen=True)
class BoardQuery:
    refresh: bool = False


@dataclass(frozen=True)
class OrderCard:
    order: Order
    lines: Sequence[OrderLine]
    preview: Sequence[OrderLine]
    more_items: int


@dataclass(frozen=True)
class BoardView:
    cards: Sequence[OrderCard]

    @property
    def count(self) -> int:
        return len(self.cards)


@dataclass(frozen=True)
class StatusBucketsView:
    pending: BoardView
    in_progress: BoardView
    complete: BoardView


@dataclass(frozen=True)
class TableGroupView:
    table_number: int
    board: BoardView


class OrderBoardUseCase(Protocol):
    def list_orders(self, query: BoardQuery) -> Result[BoardView, OrderError]: ...

    def by_status(self, query: BoardQuery) -> Result[StatusBucketsView, OrderError]: ...

    def by_table(
        self, query: BoardQuery
    ) -> Result[Sequence[TableGroupView], OrderError]: ...
