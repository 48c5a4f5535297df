"""Typed domain exceptions for room and roster violations.

The round engine itself never raises for gameplay conditions (unknown
players, late updates, double finishes); those are absorbed locally.
Exceptions here cover the room layer, where a caller asked for something
that cannot be done and needs to be told.
"""


class HideSeekError(Exception):
    """Base exception for hide and seek domain errors."""


class RoomError(HideSeekError):
    """Base exception for room directory errors.

    Attributes:
        room_id: The room the failed operation targeted.

    """

    def __init__(self, room_id: str, message: str) -> None:
        self.room_id = room_id
        super().__init__(message)


class RoomNotFoundError(RoomError):
    """No room exists with the requested id."""

    def __init__(self, room_id: str) -> None:
        super().__init__(room_id, f"room {room_id} not found")


class RoomFullError(RoomError):
    """The room already holds its maximum number of players."""

    def __init__(self, room_id: str) -> None:
        super().__init__(room_id, f"room {room_id} is full")


class RoomInProgressError(RoomError):
    """The room has a round in progress and cannot accept the change."""

    def __init__(self, room_id: str) -> None:
        super().__init__(room_id, f"room {room_id} has a round in progress")


class UnauthorizedRoomActionError(RoomError):
    """A non-host player attempted a host-only action."""

    def __init__(self, room_id: str, player_id: str, action: str) -> None:
        self.player_id = player_id
        self.action = action
        super().__init__(room_id, f"player {player_id} may not {action} in room {room_id}")


class RoomLimitReachedError(HideSeekError):
    """The directory already holds its maximum number of rooms."""

    def __init__(self, max_rooms: int) -> None:
        self.max_rooms = max_rooms
        super().__init__(f"room limit of {max_rooms} reached")
