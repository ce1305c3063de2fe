from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.money import Money


@dataclass(frozen=True)
class CartItemCommand:
    cart_id: str  # UUID string
    item_id: str
    variant: str | None = None
    # take the variant from the menu item instead of `variant`
    use_item_variant: bool = False


@dataclass(frozen=True)
class CartLineView:
    item_id: str
    name: str
    size: str | None
    variant: str | None
    unit_price: Money
    quantity: int
    subtotal: Money


@dataclass(frozen=True)
class CartView:
    cart_id: str
    lines: Sequence[CartLineView]
    total: Money

    @property
    def item_count(self) -> int:
        return sum(ln.quantity for ln in self.lines)

    def quantity_of(self, item_id: str, variant: str | None) -> int:
        for ln in self.lines:
            if ln.item_id == item_id and ln.variant == variant:
                return ln.quantity
        return 0


class CartUseCase(Protocol):
    def open_cart(self) -> Result[CartView, OrderError]: ...

    def view_cart(self, cart_id: str) -> Result[CartView, OrderError]: ...

    def add_item(self, command: CartItemCommand) -> Result[CartView, OrderError]: ...

    def remove_item(self, command: CartItemCommand) -> Result[CartView, OrderError]: ...

    def reset_cart(self, cart_id: str) -> Result[CartView, OrderError]: ...

    def close_cart(self, cart_id: str) -> Result[None, OrderError]: ...
