from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from table_order.core.domain.model.menu import Category, MenuItem
from table_order.core.domain.model.order import Order, StatusBucket


@dataclass(frozen=True)
class StatusBuckets:
    pending: tuple[Order, ...]
    in_progress: tuple[Order, ...]
    complete: tuple[Order, ...]


def filter_by_bucket(orders: Iterable[Order], bucket: StatusBucket) -> tuple[Order, ...]:
    return tuple(o for o in orders if o.bucket is bucket)


def group_by_status_bucket(orders: Sequence[Order]) -> StatusBuckets:
    return StatusBuckets(
        pending=filter_by_bucket(orders, StatusBucket.PENDING),
        in_progress=filter_by_bucket(orders, StatusBucket.IN_PROGRESS),
        complete=filter_by_bucket(orders, StatusBucket.COMPLETE),
    )


def group_by_table(orders: Iterable[Order]) -> dict[int, tuple[Order, ...]]:
    """Orders per table, keys ascending, each group in source order."""
    grouped: dict[int, list[Order]] = {}
    for o in orders:
        grouped.setdefault(o.table_number, []).append(o)
    return {table: tuple(grouped[table]) for table in sorted(grouped)}


def group_menu_by_category(
    items: Iterable[MenuItem],
) -> dict[Category, tuple[MenuItem, ...]]:
    grouped: dict[Category, list[MenuItem]] = {c: [] for c in Category}
    for it in items:
        grouped[it.category].append(it)
    return {c: tuple(v) for c, v in grouped.items()}
