from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hideseek.logic.engine import GameSessionEngine
    from hideseek.session.protocol import SubscriberProtocol


@dataclass
class Game:
    """Per-room runtime state held by the session manager.

    The lock serializes every engine call and event publication for the
    room, so subscribers observe events in the order the engine made them.
    """

    room_id: str
    engine: GameSessionEngine
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    subscribers: dict[str, SubscriberProtocol] = field(default_factory=dict)  # subscriber_id -> subscriber
    feed_task: asyncio.Task[None] | None = None

    @property
    def round_id(self) -> int:
        return self.engine.round_id
