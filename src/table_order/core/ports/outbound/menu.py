from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from table_order.core.domain.model.errors import OrderError
from table_order.core.domain.model.menu import MenuItem, MenuItemId


class MenuCatalog(Protocol):
    def list_items(self) -> Result[Sequence[MenuItem], OrderError]:
        """All items, ordered by category then name."""
        ...

    def get(self, item_id: MenuItemId) -> Result[MenuItem, OrderError]: ...
