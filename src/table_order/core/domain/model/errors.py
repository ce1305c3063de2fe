from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(OrderError):
    pass


@dataclass(frozen=True)
class PersistenceError(OrderError):
    pass


@dataclass(frozen=True)
class OrderNotFound(PersistenceError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class MenuItemNotFound(PersistenceError):
    item_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"menu_item_not_found: {self.item_id} ({self.message})"


@dataclass(frozen=True)
class CartNotFound(PersistenceError):
    cart_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"cart_not_found: {self.cart_id} ({self.message})"


@dataclass(frozen=True)
class PublishError(OrderError):
    pass
