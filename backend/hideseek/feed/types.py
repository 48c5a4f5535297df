"""Typed messages carried from a location source into the session manager."""

from pydantic import BaseModel, ConfigDict

from hideseek.logic.types import Coordinate


class LocationUpdate(BaseModel):
    """One position sample for one player.

    round_id is the round the sample was produced for; None means "whatever
    round is current when the sample is applied".
    """

    model_config = ConfigDict(frozen=True)

    player_id: str
    coordinate: Coordinate
    round_id: int | None = None
