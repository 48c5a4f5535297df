"""In-memory room directory: create, join, leave and verify rooms."""

import secrets

import structlog

from hideseek.logic.enums import RoomAvailability, RoundStatus
from hideseek.logic.events import RoomUpdatedEvent
from hideseek.logic.exceptions import (
    RoomFullError,
    RoomInProgressError,
    RoomLimitReachedError,
    RoomNotFoundError,
    UnauthorizedRoomActionError,
)
from hideseek.logic.settings import GameSettings
from hideseek.logic.types import Player
from hideseek.session.room import Room

logger = structlog.get_logger()

ROOM_ID_DIGITS = 6


class RoomManager:
    """Own the set of open rooms and their membership.

    Every mutating method returns the RoomUpdatedEvent describing the new
    room state; the caller decides who hears about it.
    """

    def __init__(self, settings: GameSettings | None = None, max_rooms: int | None = None) -> None:
        self._settings = settings or GameSettings()
        self._max_rooms = max_rooms
        self._rooms: dict[str, Room] = {}

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    def get_room(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def require_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def verify_room(self, room_id: str) -> RoomAvailability:
        """Report whether a new player could join the room right now."""
        room = self._rooms.get(room_id)
        if room is None:
            return RoomAvailability.NOT_FOUND
        if room.status == RoundStatus.PLAYING:
            return RoomAvailability.IN_PROGRESS
        if room.is_full:
            return RoomAvailability.FULL
        return RoomAvailability.AVAILABLE

    def create_room(
        self,
        host: Player,
        *,
        room_id: str | None = None,
        max_players: int | None = None,
        game_duration: float | None = None,
    ) -> tuple[Room, RoomUpdatedEvent]:
        if self._max_rooms is not None and len(self._rooms) >= self._max_rooms:
            raise RoomLimitReachedError(self._max_rooms)
        if room_id is None:
            room_id = self._generate_room_id()
        elif room_id in self._rooms:
            raise ValueError(f"room {room_id} already exists")

        host = host.model_copy(update={"is_host": True})
        room = Room(
            room_id=room_id,
            host_id=host.player_id,
            players={host.player_id: host},
            max_players=max_players if max_players is not None else self._settings.max_players,
            game_duration=game_duration if game_duration is not None else self._settings.default_round_seconds,
        )
        self._rooms[room_id] = room
        logger.info("room created", room_id=room_id, host_id=host.player_id)
        return room, self._updated(room)

    def join_room(self, room_id: str, player: Player) -> tuple[Room, RoomUpdatedEvent]:
        room = self.require_room(room_id)
        if player.player_id in room.players:
            return room, self._updated(room)

        availability = self.verify_room(room_id)
        if availability == RoomAvailability.IN_PROGRESS:
            raise RoomInProgressError(room_id)
        if availability == RoomAvailability.FULL:
            raise RoomFullError(room_id)

        room.players[player.player_id] = player.model_copy(update={"is_host": False})
        logger.info("player joined room", room_id=room_id, player_id=player.player_id)
        return room, self._updated(room)

    def leave_room(self, room_id: str, player_id: str) -> RoomUpdatedEvent | None:
        """Remove a player. Hosting passes to the next member; an emptied room is removed.

        Returns None when the player was not in the room.
        """
        room = self.require_room(room_id)
        if room.players.pop(player_id, None) is None:
            return None
        logger.info("player left room", room_id=room_id, player_id=player_id)

        if room.is_empty:
            return self.remove_room(room_id)
        if room.is_host(player_id):
            new_host = next(iter(room.players.values()))
            room.host_id = new_host.player_id
            room.players[new_host.player_id] = new_host.model_copy(update={"is_host": True})
            logger.info("room host changed", room_id=room_id, host_id=new_host.player_id)
        return self._updated(room)

    def remove_room(self, room_id: str) -> RoomUpdatedEvent | None:
        if self._rooms.pop(room_id, None) is None:
            return None
        logger.info("room removed", room_id=room_id)
        return RoomUpdatedEvent(room_id=room_id, room=None)

    def set_status(self, room_id: str, status: RoundStatus) -> RoomUpdatedEvent | None:
        room = self._rooms.get(room_id)
        if room is None or room.status == status:
            return None
        room.status = status
        return self._updated(room)

    def require_host(self, room_id: str, player_id: str, action: str) -> Room:
        room = self.require_room(room_id)
        if not room.is_host(player_id):
            raise UnauthorizedRoomActionError(room_id, player_id, action)
        return room

    def _generate_room_id(self) -> str:
        while True:
            room_id = f"{secrets.randbelow(10**ROOM_ID_DIGITS):0{ROOM_ID_DIGITS}d}"
            if room_id not in self._rooms:
                return room_id

    @staticmethod
    def _updated(room: Room) -> RoomUpdatedEvent:
        return RoomUpdatedEvent(room_id=room.room_id, room=room.snapshot())
