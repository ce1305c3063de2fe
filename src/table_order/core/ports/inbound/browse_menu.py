from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.menu import Category, MenuItem


@dataclass(frozen=True)
class MenuSection:
    category: Category
    items: Sequence[MenuItem]


@dataclass(frozen=True)
class MenuView:
    sections: Sequence[MenuSection]


class BrowseMenuUseCase(Protocol):
    def browse_menu(self) -> Result[MenuView, OrderError]: ...
