from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict

from returns.result import Failure, Result, Success

from table_order.core.domain.model.cart import Cart, CartId
from table_order.core.domain.model.errors import CartNotFound, OrderError
from table_order.core.domain.model.money import now_utc
from table_order.core.ports.outbound.carts import CartSessions

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT = timedelta(hours=2)


@dataclass
class _Session:
    cart: Cart
    touched_at: datetime


@dataclass
class InMemoryCartSessions(CartSessions):
    """Carts kept in process memory.

    A cart nobody has opened or read for `idle_timeout` is dropped; the
    sweep runs on every open and lookup.
    """

    idle_timeout: timedelta = DEFAULT_IDLE_TIMEOUT
    clock: Callable[[], datetime] = now_utc
    _sessions: Dict[str, _Session] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def open(self) -> Result[Cart, OrderError]:
        cart = Cart()
        with self._lock:
            now = self._sweep()
            self._sessions[str(cart.cart_id.value)] = _Session(cart, now)
        return Success(cart)

    def get(self, cart_id: CartId) -> Result[Cart, OrderError]:
        key = str(cart_id.value)
        with self._lock:
            now = self._sweep()
            session = self._sessions.get(key)
            if session is None:
                return Failure(CartNotFound(message="cart not found", cart_id=key))
            session.touched_at = now
            return Success(session.cart)

    def discard(self, cart_id: CartId) -> Result[None, OrderError]:
        key = str(cart_id.value)
        with self._lock:
            if self._sessions.pop(key, None) is None:
                return Failure(CartNotFound(message="cart not found", cart_id=key))
        return Success(None)

    def __len__(self) -> int:
        return len(self._sessions)

    def _sweep(self) -> datetime:
        now = self.clock()
        idle = [
            key
            for key, s in self._sessions.items()
            if now - s.touched_at >= self.idle_timeout
        ]
        for key in idle:
            del self._sessions[key]
        if idle:
            logger.info("dropped %d idle cart(s)", len(idle))
        return now
