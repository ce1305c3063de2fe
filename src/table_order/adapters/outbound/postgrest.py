"""Catalog and order store backed by a PostgREST endpoint (e.g. Supabase).

Tables follow the hosted schema: ``menu_items`` and ``customer_orders``.
Filtering and ordering use the PostgREST query syntax
(``order=created_at.desc``, ``id=eq.<id>``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence
from uuid import UUID

import httpx
from pydantic import BaseModel, ConfigDict, Field
from returns.result import Failure, Result, Success

from table_order.core.domain.model.errors import (
    MenuItemNotFound,
    OrderError,
    OrderNotFound,
    PersistenceError,
)
from table_order.core.domain.model.line_items import raw_items, stored_items_of
from table_order.core.domain.model.menu import Category, MenuItem, MenuItemId
from table_order.core.domain.model.money import MAX_AMOUNT, MAX_UNIT_PRICE, Money
from table_order.core.domain.model.order import (
    Order,
    OrderDraft,
    OrderId,
    OrderStatus,
)
from table_order.core.ports.outbound.menu import MenuCatalog
from table_order.core.ports.outbound.orders import OrderStore

logger = logging.getLogger(__name__)

MENU_TABLE = "menu_items"
ORDERS_TABLE = "customer_orders"

_RETURN_ROWS = {"Prefer": "return=representation"}


# ---- row shapes --------------------------------------------------------------


class MenuRow(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    category: Category
    name: str
    price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)
    size: str | None = None
    temperature: str | None = None

    def to_domain(self) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(self.id),
            category=self.category,
            name=self.name,
            price=Money.of(self.price),
            size=self.size,
            temperature=self.temperature,
        )


class OrderRow(BaseModel):
    id: UUID
    customer_name: str
    table_number: int
    items: Any = None
    message: str | None = None
    total_amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    status: OrderStatus
    created_at: datetime
    updated_at: datetime | None = None

    def to_domain(self) -> Order:
        return Order(
            order_id=OrderId(self.id),
            customer_name=self.customer_name,
            table_number=self.table_number,
            items=stored_items_of(self.items),
            total_amount=Money.of(self.total_amount),
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at or self.created_at,
            message=self.message,
        )


# ---- client ------------------------------------------------------------------


@dataclass
class PostgrestClient:
    http: httpx.Client

    @staticmethod
    def connect(base_url: str, api_key: str, timeout: float = 10.0) -> "PostgrestClient":
        http = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
        return PostgrestClient(http)

    def select(
        self, table: str, params: dict[str, str]
    ) -> Result[list[dict[str, Any]], OrderError]:
        return self._send("GET", table, params=params)

    def insert(
        self, table: str, row: dict[str, Any]
    ) -> Result[list[dict[str, Any]], OrderError]:
        return self._send("POST", table, body=[row], headers=_RETURN_ROWS)

    def update(
        self, table: str, filters: dict[str, str], values: dict[str, Any]
    ) -> Result[list[dict[str, Any]], OrderError]:
        return self._send("PATCH", table, params=filters, body=values, headers=_RETURN_ROWS)

    def close(self) -> None:
        self.http.close()

    def _send(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Result[list[dict[str, Any]], OrderError]:
        try:
            resp = self.http.request(
                method, f"/{table}", params=params, json=body, headers=headers
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            return Failure(PersistenceError(message=f"{method} {table}: {e}"))
        except ValueError as e:
            return Failure(PersistenceError(message=f"{method} {table}: bad body ({e})"))

        if not isinstance(payload, list):
            return Failure(PersistenceError(message=f"{method} {table}: expected rows"))
        logger.debug("%s %s -> %d row(s)", method, table, len(payload))
        return Success(payload)


# ---- ports -------------------------------------------------------------------


@dataclass
class PostgrestMenuCatalog(MenuCatalog):
    client: PostgrestClient

    def list_items(self) -> Result[Sequence[MenuItem], OrderError]:
        return self.client.select(
            MENU_TABLE, {"select": "*", "order": "category.asc,name.asc"}
        ).bind(_menu_items)

    def get(self, item_id: MenuItemId) -> Result[MenuItem, OrderError]:
        def first(items: Sequence[MenuItem]) -> Result[MenuItem, OrderError]:
            if not items:
                return Failure(
                    MenuItemNotFound(message="menu item not found", item_id=item_id.value)
                )
            return Success(items[0])

        return (
            self.client.select(MENU_TABLE, {"select": "*", "id": f"eq.{item_id.value}"})
            .bind(_menu_items)
            .bind(first)
        )


@dataclass
class PostgrestOrderStore(OrderStore):
    client: PostgrestClient

    def insert(self, draft: OrderDraft) -> Result[Order, OrderError]:
        row = {
            "customer_name": draft.customer_name,
            "table_number": draft.table_number,
            "items": raw_items(draft.items),
            "message": draft.message,
            "total_amount": float(draft.total_amount.amount),
            "status": draft.status.value,
        }

        def created(orders: Sequence[Order]) -> Result[Order, OrderError]:
            if not orders:
                return Failure(PersistenceError(message="insert returned no row"))
            return Success(orders[0])

        return self.client.insert(ORDERS_TABLE, row).bind(_orders).bind(created)

    def list_all(self) -> Result[Sequence[Order], OrderError]:
        return self.client.select(
            ORDERS_TABLE, {"select": "*", "order": "created_at.desc"}
        ).bind(_orders)

    def update_status(
        self, order_id: OrderId, status: OrderStatus, updated_at: datetime
    ) -> Result[Order, OrderError]:
        key = str(order_id.value)

        def updated(orders: Sequence[Order]) -> Result[Order, OrderError]:
            if not orders:
                return Failure(OrderNotFound(message="order not found", order_id=key))
            return Success(orders[0])

        return (
            self.client.update(
                ORDERS_TABLE,
                {"id": f"eq.{key}"},
                {"status": status.value, "updated_at": updated_at.isoformat()},
            )
            .bind(_orders)
            .bind(updated)
        )


def _menu_items(rows: list[dict[str, Any]]) -> Result[Sequence[MenuItem], OrderError]:
    try:
        return Success(tuple(MenuRow.model_validate(r).to_domain() for r in rows))
    except (ValueError, ArithmeticError) as e:  # includes pydantic ValidationError
        return Failure(PersistenceError(message=f"unreadable menu row: {e}"))


def _orders(rows: list[dict[str, Any]]) -> Result[Sequence[Order], OrderError]:
    try:
        return Success(tuple(OrderRow.model_validate(r).to_domain() for r in rows))
    except (ValueError, ArithmeticError) as e:  # includes pydantic ValidationError
        return Failure(PersistenceError(message=f"unreadable order row: {e}"))
