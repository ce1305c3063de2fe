from __future__ import annotations

import logging
from typing import Callable

from table_order.core.domain.model.errors import (
    CartNotFound,
    MenuItemNotFound,
    OrderError,
    OrderNotFound,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_PASS_THROUGH = (ValidationError, OrderNotFound, MenuItemNotFound, CartNotFound)


def reported_as(message: str) -> Callable[[OrderError], OrderError]:
    """Swap a store failure for a generic user-facing one, logging the cause."""

    def _replace(err: OrderError) -> OrderError:
        if isinstance(err, _PASS_THROUGH):
            return err
        logger.warning("%s: %s", message, err)
        return PersistenceError(message)

    return _replace
