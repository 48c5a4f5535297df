"""Abstract subscriber protocol for consumers of published round events."""

from abc import ABC, abstractmethod
from typing import Any


class SubscriberProtocol(ABC):
    """
    Abstract interface for a presentation-layer consumer.

    Round, room and location error events are delivered as plain dicts so
    a subscriber can forward them over any transport.
    """

    @property
    @abstractmethod
    def subscriber_id(self) -> str:
        """Unique identifier for this subscriber."""
        ...

    @abstractmethod
    async def send_message(self, data: dict[str, Any]) -> None:
        """
        Deliver one event payload.
        """
        ...
