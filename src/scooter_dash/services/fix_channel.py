"""Ordered, push-based delivery of positional fixes to subscribers."""

from __future__ import annotations

import logging
from typing import Callable, List

from PySide6.QtCore import QObject, Slot

from scooter_dash.models.data_records import PositionFix

logger = logging.getLogger(__name__)

FixCallback = Callable[[PositionFix], None]


class FixSubscription:
    """Handle returned by FixChannel.subscribe. Cancel to stop deliveries."""

    def __init__(self, channel: FixChannel, callback: FixCallback):
        self._channel = channel
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop deliveries. Safe to call more than once."""
        if self._active:
            self._active = False
            self._channel._remove(self)

    def _deliver(self, fix: PositionFix) -> None:
        if self._active:
            self._callback(fix)


class FixChannel(QObject):
    """
    Fan-out point between fix sources and consumers.

    Lives on the main thread. Sources running in a worker thread connect their
    fix signal to ``publish``; Qt then queues the calls, so fixes reach
    subscribers one at a time and in arrival order.
    """

    def __init__(self):
        super().__init__()
        self._subscriptions: List[FixSubscription] = []
        self._published = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    @property
    def published_count(self) -> int:
        """Number of fixes published since creation."""
        return self._published

    def subscribe(self, callback: FixCallback) -> FixSubscription:
        """
        Register a consumer.

        Args:
            callback: Called with each PositionFix, in arrival order

        Returns:
            FixSubscription whose cancel() guarantees no further calls
        """
        subscription = FixSubscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    @Slot(object)
    def publish(self, fix: PositionFix) -> None:
        """Deliver a fix to every active subscriber."""
        self._published += 1
        # Copy so a callback may cancel its own subscription
        for subscription in list(self._subscriptions):
            subscription._deliver(fix)

    def close(self) -> None:
        """Cancel every subscription."""
        for subscription in list(self._subscriptions):
            subscription.cancel()
        logger.debug("Fix channel closed after %d fixes", self._published)

    def _remove(self, subscription: FixSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
