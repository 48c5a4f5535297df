"""Domain event models published by the round engine and room directory.

Engine operations return the events they produced; ticks hand theirs to
the engine's timer-events callback. All layers import event types from
this module.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from hideseek.logic.enums import LocationFeedError, RoundResult
from hideseek.logic.types import Coordinate, Player, RoomSnapshot


class EventType(StrEnum):
    """Types of game events."""

    ROUND_STARTED = "round_started"
    LOCATION_UPDATED = "location_updated"
    PLAYER_CAUGHT = "player_caught"
    TIMER_TICK = "timer_tick"
    ROUND_PAUSED = "round_paused"
    ROUND_RESUMED = "round_resumed"
    ROUND_RESET = "round_reset"
    ROUND_ENDED = "round_ended"
    ROOM_UPDATED = "room_updated"
    LOCATION_ERROR = "location_error"


class GameEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    type: EventType


class RoundEvent(GameEvent):
    """Event scoped to one round of one engine."""

    round_id: int


class RoundStartedEvent(RoundEvent):
    type: Literal[EventType.ROUND_STARTED] = EventType.ROUND_STARTED
    duration_seconds: float
    roster: list[Player]


class LocationUpdatedEvent(RoundEvent):
    type: Literal[EventType.LOCATION_UPDATED] = EventType.LOCATION_UPDATED
    player_id: str
    coordinate: Coordinate


class PlayerCaughtEvent(RoundEvent):
    """A seeker came within catch distance of an uncaught runner."""

    type: Literal[EventType.PLAYER_CAUGHT] = EventType.PLAYER_CAUGHT
    seeker_id: str
    runner_id: str
    distance_meters: float
    caught_count: int
    runner_count: int


class TimerTickEvent(RoundEvent):
    type: Literal[EventType.TIMER_TICK] = EventType.TIMER_TICK
    remaining_seconds: float


class RoundPausedEvent(RoundEvent):
    type: Literal[EventType.ROUND_PAUSED] = EventType.ROUND_PAUSED
    remaining_seconds: float


class RoundResumedEvent(RoundEvent):
    type: Literal[EventType.ROUND_RESUMED] = EventType.ROUND_RESUMED
    remaining_seconds: float


class RoundResetEvent(RoundEvent):
    type: Literal[EventType.ROUND_RESET] = EventType.ROUND_RESET


class RoundEndedEvent(RoundEvent):
    """Round resolved; carries the data the result screen shows."""

    type: Literal[EventType.ROUND_ENDED] = EventType.ROUND_ENDED
    result: RoundResult
    elapsed_seconds: float
    remaining_seconds: float
    caught_ids: list[str]


class RoomUpdatedEvent(GameEvent):
    type: Literal[EventType.ROOM_UPDATED] = EventType.ROOM_UPDATED
    room_id: str
    room: RoomSnapshot | None = None  # None once the room is removed


class LocationErrorEvent(GameEvent):
    """A player's device failed to provide a location."""

    type: Literal[EventType.LOCATION_ERROR] = EventType.LOCATION_ERROR
    player_id: str
    error: LocationFeedError
    description: str


def has_round_ended(events: list[GameEvent]) -> bool:
    return any(isinstance(e, RoundEndedEvent) for e in events)
