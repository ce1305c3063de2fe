from __future__ import annotations

from typing import Protocol

from returns.result import Result

from table_order.core.domain.model.cart import Cart, CartId
from table_order.core.domain.model.errors import OrderError


class CartSessions(Protocol):
    def open(self) -> Result[Cart, OrderError]: ...

    def get(self, cart_id: CartId) -> Result[Cart, OrderError]: ...

    def discard(self, cart_id: CartId) -> Result[None, OrderError]: ...
