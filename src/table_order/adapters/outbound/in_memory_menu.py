from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Sequence

from returns.result import Failure, Result, Success

from table_order.core.domain.model.errors import MenuItemNotFound, OrderError
from table_order.core.domain.model.menu import (
    Category,
    MenuItem,
    MenuItemId,
    catalog_sort_key,
)
from table_order.core.domain.model.money import Money
from table_order.core.ports.outbound.menu import MenuCatalog


def _item(
    item_id: str,
    category: Category,
    name: str,
    price: int,
    size: str | None = None,
    temperature: str | None = None,
) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        category=category,
        name=name,
        price=Money.of(price),
        size=size,
        temperature=temperature,
    )


DEFAULT_MENU: tuple[MenuItem, ...] = (
    _item("veg-paneer-tikka", Category.VEG, "Paneer Tikka", 220),
    _item("veg-dal-makhani", Category.VEG, "Dal Makhani", 180),
    _item("veg-biryani-half", Category.VEG, "Veg Biryani", 150, size="half"),
    _item("veg-biryani-full", Category.VEG, "Veg Biryani", 260, size="full"),
    _item("nonveg-butter-chicken", Category.NON_VEG, "Butter Chicken", 320),
    _item("nonveg-chicken-biryani-half", Category.NON_VEG, "Chicken Biryani", 200, size="half"),
    _item("nonveg-chicken-biryani-full", Category.NON_VEG, "Chicken Biryani", 350, size="full"),
    _item("water-500-cold", Category.WATER, "Mineral Water", 20, size="500ml", temperature="cold"),
    _item("water-500-normal", Category.WATER, "Mineral Water", 20, size="500ml", temperature="normal"),
    _item("water-1l-cold", Category.WATER, "Mineral Water", 35, size="1L", temperature="cold"),
)


@dataclass
class InMemoryMenuCatalog(MenuCatalog):
    _items: Dict[str, MenuItem] = field(default_factory=dict)

    @staticmethod
    def seeded(items: Iterable[MenuItem] = DEFAULT_MENU) -> "InMemoryMenuCatalog":
        return InMemoryMenuCatalog({it.item_id.value: it for it in items})

    def list_items(self) -> Result[Sequence[MenuItem], OrderError]:
        return Success(tuple(sorted(self._items.values(), key=catalog_sort_key)))

    def get(self, item_id: MenuItemId) -> Result[MenuItem, OrderError]:
        item = self._items.get(item_id.value)
        if item is None:
            return Failure(
                MenuItemNotFound(message="menu item not found", item_id=item_id.value)
            )
        return Success(item)
