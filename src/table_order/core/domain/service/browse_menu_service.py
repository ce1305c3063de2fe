from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.menu import MenuItem
from table_order.core.domain.service.store_errors import reported_as
from table_order.core.domain.service.views import group_menu_by_category
from table_order.core.ports.inbound.browse_menu import (
    BrowseMenuUseCase,
    MenuSection,
    MenuView,
)
from table_order.core.ports.outbound.menu import MenuCatalog


@dataclass(frozen=True)
class BrowseMenuDeps:
    catalog: MenuCatalog


@dataclass(frozen=True)
class BrowseMenuService(BrowseMenuUseCase):
    deps: BrowseMenuDeps

    def browse_menu(self) -> Result[MenuView, OrderError]:
        return (
            self.deps.catalog.list_items()
            .map(_to_view)
            .alt(reported_as("Failed to fetch menu items"))
        )


def _to_view(items: Sequence[MenuItem]) -> MenuView:
    grouped = group_menu_by_category(items)
    return MenuView(
        sections=tuple(
            MenuSection(category=category, items=section)
            for category, section in grouped.items()
        )
    )
