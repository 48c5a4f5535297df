"""Shared broadcast utility for sending event payloads to subscribers."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hideseek.session.protocol import SubscriberProtocol


async def broadcast_to_subscribers(
    subscribers: dict[str, SubscriberProtocol],
    message: dict[str, Any],
    exclude_subscriber_id: str | None = None,
) -> None:
    """Send a message to every subscriber, skipping one if excluded.

    Snapshot the dict values via list() so a subscriber that unsubscribes
    while we yield on send_message does not break the loop.
    """
    for subscriber in list(subscribers.values()):
        if subscriber.subscriber_id != exclude_subscriber_id:
            with contextlib.suppress(RuntimeError, OSError):
                await subscriber.send_message(message)
