from __future__ import annotations

import logging
from dataclasses import dataclass, field

from returns.result import Failure, Result, Success

from table_order.core.domain.model.errors import OrderError, PublishError
from table_order.core.ports.outbound.events import (
    ChangeFeed,
    EventPublisher,
    Listener,
    OrderChanged,
)

logger = logging.getLogger(__name__)


@dataclass
class _Subscription:
    feed: "InProcessChangeFeed"
    listener: Listener

    def close(self) -> None:
        self.feed.unsubscribe(self.listener)


@dataclass
class InProcessChangeFeed(ChangeFeed, EventPublisher):
    """Fan-out of order change notifications to listeners in this process."""

    fail: bool = False
    _listeners: list[Listener] = field(default_factory=list)

    def subscribe(self, listener: Listener) -> _Subscription:
        self._listeners.append(listener)
        return _Subscription(self, listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, event: OrderChanged) -> Result[None, OrderError]:
        if self.fail:
            return Failure(PublishError(message="change feed is down"))
        logger.info("[event] order %s: %s", event.change.value, event.order_id.value)

        failed = 0
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("change listener %r failed", listener)
                failed += 1
        if failed:
            return Failure(PublishError(message=f"{failed} listener(s) failed"))
        return Success(None)
