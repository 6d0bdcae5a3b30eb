# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Change subscriptions.

Subscribers are registered under an id and called synchronously, in
registration order, after a change is fully committed.
"""

from __future__ import annotations

from typing import Any, Callable

SubscriberCallback = Callable[..., Any]


class SubscriptionMixin:
    """Adds subscribe/unsubscribe and change notification to a class.

    The host class must initialize ``self._subscribers = {}``.

    Example:
        >>> board.subscribe('logger', lambda reason, board: print(reason))
        >>> board.toggle_collapse('wbs-1')
        collapsed
        >>> board.unsubscribe('logger')
    """

    _subscribers: dict[str, SubscriberCallback]

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Register a callback, replacing any previous one with the same id.

        Args:
            subscriber_id: Key used to unsubscribe later.
            callback: Called as ``callback(reason, source)``.
        """
        self._subscribers[subscriber_id] = callback

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscriber. Unknown ids are ignored."""
        self._subscribers.pop(subscriber_id, None)

    def _notify(self, reason: str) -> None:
        for callback in list(self._subscribers.values()):
            callback(reason, self)
