"""Centralized gameplay settings for a hide and seek round."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CATCH_DISTANCE_METERS = 5.0
DEFAULT_ROUND_SECONDS = 300
MAX_PLAYERS = 8


class GameSettings(BaseModel):
    """
    Gameplay rules shared by the engine and the room directory.

    All fields default to the values the mobile client shipped with.
    """

    model_config = ConfigDict(frozen=True)

    catch_distance_meters: float = Field(default=DEFAULT_CATCH_DISTANCE_METERS, gt=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    default_round_seconds: float = Field(default=DEFAULT_ROUND_SECONDS, gt=0)
    max_players: int = Field(default=MAX_PLAYERS, ge=2)
