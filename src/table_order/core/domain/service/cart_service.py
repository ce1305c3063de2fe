from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from returns.result import Failure, Result, Success

from table_order.core.domain.model.cart import Cart, CartId
from table_order.core.domain.model.errors import OrderError, ValidationError
from table_order.core.domain.model.menu import MenuItem, MenuItemId
from table_order.core.domain.service.store_errors import reported_as
from table_order.core.ports.inbound.cart import (
    CartItemCommand,
    CartLineView,
    CartUseCase,
    CartView,
)
from table_order.core.ports.outbound.carts import CartSessions
from table_order.core.ports.outbound.menu import MenuCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartDeps:
    catalog: MenuCatalog
    sessions: CartSessions


@dataclass(frozen=True)
class CartService(CartUseCase):
    deps: CartDeps

    def open_cart(self) -> Result[CartView, OrderError]:
        return self.deps.sessions.open().map(to_cart_view)

    def view_cart(self, cart_id: str) -> Result[CartView, OrderError]:
        return parse_cart_id(cart_id).bind(self.deps.sessions.get).map(to_cart_view)

    def add_item(self, command: CartItemCommand) -> Result[CartView, OrderError]:
        def apply(loaded: tuple[Cart, MenuItem]) -> Cart:
            cart, item = loaded
            line = cart.add_item(item, _variant_for(command, item))
            logger.debug(
                "cart %s: %s (%s) x%d",
                cart.cart_id.value,
                item.name,
                line.variant,
                line.quantity,
            )
            return cart

        return self._load(command).map(apply).map(to_cart_view)

    def remove_item(self, command: CartItemCommand) -> Result[CartView, OrderError]:
        def apply(loaded: tuple[Cart, MenuItem]) -> Cart:
            cart, item = loaded
            cart.remove_item(item, _variant_for(command, item))
            return cart

        return self._load(command).map(apply).map(to_cart_view)

    def reset_cart(self, cart_id: str) -> Result[CartView, OrderError]:
        def apply(cart: Cart) -> Cart:
            cart.reset()
            return cart

        return (
            parse_cart_id(cart_id)
            .bind(self.deps.sessions.get)
            .map(apply)
            .map(to_cart_view)
        )

    def close_cart(self, cart_id: str) -> Result[None, OrderError]:
        return parse_cart_id(cart_id).bind(self.deps.sessions.discard)

    def _load(self, command: CartItemCommand) -> Result[tuple[Cart, MenuItem], OrderError]:
        if not command.item_id.strip():
            return Failure(ValidationError("item_id is required"))

        return parse_cart_id(command.cart_id).bind(self.deps.sessions.get).bind(
            lambda cart: self.deps.catalog.get(MenuItemId(command.item_id))
            .alt(reported_as("Failed to fetch menu items"))
            .map(lambda item: (cart, item))
        )


def parse_cart_id(raw: str) -> Result[CartId, OrderError]:
    try:
        return Success(CartId(UUID(raw)))
    except (TypeError, ValueError):
        return Failure(ValidationError(message="cart_id must be a valid UUID"))


def to_cart_view(cart: Cart) -> CartView:
    return CartView(
        cart_id=str(cart.cart_id.value),
        lines=tuple(
            CartLineView(
                item_id=ln.item.item_id.value,
                name=ln.item.name,
                size=ln.item.size,
                variant=ln.variant,
                unit_price=ln.item.price,
                quantity=ln.quantity,
                subtotal=ln.subtotal(),
            )
            for ln in cart.lines
        ),
        total=cart.total(),
    )


def _variant_for(command: CartItemCommand, item: MenuItem) -> str | None:
    if command.use_item_variant:
        return item.temperature
    return command.variant
