from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from table_order.adapters.outbound.in_memory_carts import InMemoryCartSessions
from table_order.adapters.outbound.in_memory_menu import InMemoryMenuCatalog
from table_order.adapters.outbound.in_memory_orders import InMemoryOrderStore
from table_order.adapters.outbound.in_process_feed import InProcessChangeFeed
from table_order.adapters.outbound.postgrest import (
    PostgrestClient,
    PostgrestMenuCatalog,
    PostgrestOrderStore,
)
from table_order.config import Settings
from table_order.core.domain.service.browse_menu_service import (
    BrowseMenuDeps,
    BrowseMenuService,
)
from table_order.core.domain.service.cart_service import CartDeps, CartService
from table_order.core.domain.service.order_board_service import (
    OrderBoardDeps,
    OrderBoardService,
)
from table_order.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from table_order.core.domain.service.set_status_service import (
    SetStatusDeps,
    SetStatusService,
)
from table_order.core.ports.outbound.menu import MenuCatalog
from table_order.core.ports.outbound.orders import OrderStore


@dataclass(frozen=True)
class UseCases:
    browse_menu: BrowseMenuService
    cart: CartService
    place_order: PlaceOrderService
    order_board: OrderBoardService
    set_status: SetStatusService
    closers: tuple[Callable[[], None], ...] = ()

    def close(self) -> None:
        for close in self.closers:
            close()


def build_stores(
    settings: Settings,
) -> tuple[MenuCatalog, OrderStore, tuple[Callable[[], None], ...]]:
    """Catalog and order store for the configured backend, plus their closers."""
    if settings.backend == "postgrest":
        client = PostgrestClient.connect(
            settings.store_url, settings.store_key, timeout=settings.http_timeout
        )
        return PostgrestMenuCatalog(client), PostgrestOrderStore(client), (client.close,)
    return InMemoryMenuCatalog.seeded(), InMemoryOrderStore(), ()


def build_usecases(settings: Settings | None = None) -> UseCases:
    settings = settings or Settings()
    catalog, orders, closers = build_stores(settings)
    sessions = InMemoryCartSessions(
        idle_timeout=timedelta(minutes=settings.cart_idle_minutes)
    )
    feed = InProcessChangeFeed()

    board = OrderBoardService(OrderBoardDeps(orders=orders))
    # every insert/update notification makes the board re-fetch
    board.attach(feed)

    return UseCases(
        browse_menu=BrowseMenuService(BrowseMenuDeps(catalog=catalog)),
        cart=CartService(CartDeps(catalog=catalog, sessions=sessions)),
        place_order=PlaceOrderService(
            PlaceOrderDeps(sessions=sessions, orders=orders, events=feed)
        ),
        order_board=board,
        set_status=SetStatusService(SetStatusDeps(orders=orders, events=feed)),
        closers=(board.detach, *closers),
    )
