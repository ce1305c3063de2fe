"""Order line snapshots and the codec for the stored ``items`` field.

The store keeps an order's items in an untyped column: some rows hold the
JSON text written at submit time, others come back already decoded into a
list. Both shapes are wrapped in :data:`StoredItems` at the boundary and
:func:`parse_items` turns either into line snapshots. Parsing never fails;
anything it cannot read becomes an empty tuple.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer

from table_order.core.domain.model.money import MAX_UNIT_PRICE, Money

MAX_QUANTITY = 1000


@dataclass(frozen=True)
class OrderLine:
    item_id: str
    name: str
    unit_price: Money
    quantity: int
    category: str | None = None
    size: str | None = None
    temperature: str | None = None

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


# ---- tagged union ------------------------------------------------------------


@dataclass(frozen=True)
class SerializedItems:
    text: str


@dataclass(frozen=True)
class StructuredItems:
    entries: tuple[Any, ...] = ()


StoredItems = SerializedItems | StructuredItems


def stored_items_of(raw: Any) -> StoredItems:
    if isinstance(raw, str):
        return SerializedItems(raw)
    if isinstance(raw, (list, tuple)):
        return StructuredItems(tuple(raw))
    return StructuredItems()


def raw_items(stored: StoredItems) -> str | list[Any]:
    if isinstance(stored, SerializedItems):
        return stored.text
    return list(stored.entries)


# ---- wire shape --------------------------------------------------------------


class StoredLineItem(BaseModel):
    # same keys the ordering frontend writes: the menu row plus a quantity
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)
    quantity: int = Field(ge=1, le=MAX_QUANTITY)
    category: str | None = None
    size: str | None = None
    temperature: str | None = None

    @field_serializer("price")
    def _price_as_number(self, price: Decimal) -> float:
        return float(price)


_LINES = TypeAdapter(list[StoredLineItem])


def parse_items(stored: StoredItems) -> tuple[OrderLine, ...]:
    try:
        if isinstance(stored, SerializedItems):
            rows = _LINES.validate_json(stored.text)
        else:
            rows = _LINES.validate_python(list(stored.entries))
        return tuple(_to_line(r) for r in rows)
    except (ValueError, ArithmeticError):  # includes pydantic ValidationError
        return ()


def serialize_items(lines: Iterable[OrderLine]) -> SerializedItems:
    rows = [_to_row(ln) for ln in lines]
    return SerializedItems(_LINES.dump_json(rows).decode("utf-8"))


def preview_items(
    lines: Sequence[OrderLine], limit: int = 3
) -> tuple[tuple[OrderLine, ...], int]:
    """First `limit` lines plus how many were left out."""
    shown = tuple(lines[:limit])
    return shown, max(len(lines) - limit, 0)


def _to_line(row: StoredLineItem) -> OrderLine:
    return OrderLine(
        item_id=row.id,
        name=row.name,
        unit_price=Money.of(row.price),
        quantity=row.quantity,
        category=row.category,
        size=row.size,
        temperature=row.temperature,
    )


def _to_row(line: OrderLine) -> StoredLineItem:
    return StoredLineItem(
        id=line.item_id,
        name=line.name,
        price=line.unit_price.amount,
        quantity=line.quantity,
        category=line.category,
        size=line.size,
        temperature=line.temperature,
    )
