"""
Pydantic models for game logic data structures.

Contains the coordinate and player models that flow in from the room and
location feed collaborators, and the read-only snapshots the engine and
room directory publish back out.
"""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from hideseek.logic.enums import PlayerRole, RoundResult, RoundStatus


class Coordinate(BaseModel):
    """A (latitude, longitude) point in degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Player(BaseModel):
    """A participant in a room or round.

    Role only changes between rounds: the engine keeps its own copy of the
    roster for the active round and hands out new instances via with_role().
    """

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    role: PlayerRole = PlayerRole.RUNNER
    is_host: bool = False

    def with_role(self, role: PlayerRole) -> Player:
        if role == self.role:
            return self
        return self.model_copy(update={"role": role})

    @property
    def is_seeker(self) -> bool:
        return self.role == PlayerRole.SEEKER

    @property
    def is_runner(self) -> bool:
        return self.role == PlayerRole.RUNNER


class RoundSnapshot(BaseModel):
    """Published, immutable view of the engine's round state."""

    model_config = ConfigDict(frozen=True)

    round_id: int
    status: RoundStatus
    positions: dict[str, Coordinate]
    caught_ids: frozenset[str]
    remaining_seconds: float
    result: RoundResult | None = None
    roster: tuple[Player, ...] = ()
    elapsed_seconds: float | None = None
    paused: bool = False
    show_result: bool = False

    @property
    def runner_count(self) -> int:
        return sum(1 for p in self.roster if p.is_runner)


class RoomSnapshot(BaseModel):
    """Room information published with room update events."""

    model_config = ConfigDict(frozen=True)

    room_id: str
    host_id: str
    players: tuple[Player, ...]
    max_players: int
    game_duration: float
    status: RoundStatus

    @property
    def player_count(self) -> int:
        return len(self.players)
