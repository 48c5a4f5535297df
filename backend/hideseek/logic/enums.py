"""
String enum definitions for hide and seek game concepts.
"""

from enum import StrEnum


class PlayerRole(StrEnum):
    """Role a player holds for the current round."""

    SEEKER = "seeker"
    RUNNER = "runner"


class RoundStatus(StrEnum):
    """Lifecycle phase of a round."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class RoundResult(StrEnum):
    """Outcome of a finished round."""

    SEEKER_WIN = "seeker_win"
    RUNNER_WIN = "runner_win"


class RoomAvailability(StrEnum):
    """Whether a room can accept a joining player."""

    AVAILABLE = "available"
    NOT_FOUND = "not_found"
    FULL = "full"
    IN_PROGRESS = "in_progress"


class LocationFeedError(StrEnum):
    """Failures reported by a device location provider."""

    ACCESS_DENIED = "access_denied"
    LOCATION_DISABLED = "location_disabled"
    UPDATE_FAILED = "update_failed"

    @property
    def description(self) -> str:
        return _LOCATION_ERROR_DESCRIPTIONS[self]


_LOCATION_ERROR_DESCRIPTIONS: dict[LocationFeedError, str] = {
    LocationFeedError.ACCESS_DENIED: "Location access was denied",
    LocationFeedError.LOCATION_DISABLED: "Location services are disabled",
    LocationFeedError.UPDATE_FAILED: "Location update failed",
}
