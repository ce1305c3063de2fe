from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

from table_order.core.domain.model.line_items import OrderLine
from table_order.core.domain.model.menu import MenuItem, MenuItemId
from table_order.core.domain.model.money import Money, fold_money


@dataclass(frozen=True)
class CartId:
    value: UUID

    @staticmethod
    def new() -> "CartId":
        return CartId(uuid4())


@dataclass(frozen=True)
class LineKey:
    # size is not part of the key
    item_id: MenuItemId
    variant: str | None


@dataclass(frozen=True)
class CartLine:
    item: MenuItem
    variant: str | None
    quantity: int

    @property
    def key(self) -> LineKey:
        return LineKey(self.item.item_id, self.variant)

    def subtotal(self) -> Money:
        return self.item.price * self.quantity


@dataclass
class Cart:
    """In-progress selection: one line per (item id, variant), in insertion order."""

    cart_id: CartId = field(default_factory=CartId.new)
    _lines: list[CartLine] = field(default_factory=list)
    # requests for one cart may arrive on different worker threads
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def add_item(self, item: MenuItem, variant: str | None) -> CartLine:
        with self.lock:
            key = LineKey(item.item_id, variant)
            idx = self._find(key)
            if idx is None:
                line = CartLine(item=item, variant=variant, quantity=1)
                self._lines.append(line)
                return line
            line = replace(self._lines[idx], quantity=self._lines[idx].quantity + 1)
            self._lines[idx] = line
            return line

    def remove_item(self, item: MenuItem, variant: str | None) -> CartLine | None:
        """Take one unit off the matching line.

        Returns the updated line, or None when the line was deleted or there
        was nothing to remove.
        """
        with self.lock:
            idx = self._find(LineKey(item.item_id, variant))
            if idx is None:
                return None
            current = self._lines[idx]
            if current.quantity == 1:
                del self._lines[idx]
                return None
            line = replace(current, quantity=current.quantity - 1)
            self._lines[idx] = line
            return line

    def quantity_of(self, item_id: MenuItemId, variant: str | None) -> int:
        idx = self._find(LineKey(item_id, variant))
        return 0 if idx is None else self._lines[idx].quantity

    def total(self) -> Money:
        return fold_money(ln.subtotal() for ln in self.lines)

    def reset(self) -> None:
        with self.lock:
            self._lines.clear()

    def snapshot(self) -> tuple[OrderLine, ...]:
        return tuple(
            OrderLine(
                item_id=ln.item.item_id.value,
                name=ln.item.name,
                unit_price=ln.item.price,
                quantity=ln.quantity,
                category=ln.item.category.value,
                size=ln.item.size,
                temperature=ln.variant,
            )
            for ln in self.lines
        )

    def _find(self, key: LineKey) -> int | None:
        for i, ln in enumerate(self._lines):
            if ln.key == key:
                return i
        return None
