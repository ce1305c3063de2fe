from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from table_order.core.domain.model.money import Money


class Category(str, Enum):
    VEG = "veg"
    NON_VEG = "nonVeg"
    WATER = "water"


@dataclass(frozen=True)
class MenuItemId:
    value: str


@dataclass(frozen=True)
class MenuItem:
    """Catalog entry. `temperature` is the item's own variant (hot/cold/none)."""

    item_id: MenuItemId
    category: Category
    name: str
    price: Money
    size: str | None = None
    temperature: str | None = None


def catalog_sort_key(item: MenuItem) -> tuple[str, str]:
    return (item.category.value, item.name)
