"""Game server configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from hideseek.logic.settings import DEFAULT_CATCH_DISTANCE_METERS, DEFAULT_ROUND_SECONDS, MAX_PLAYERS, GameSettings


class GameServerSettings(BaseSettings):
    model_config = {"env_prefix": "HIDESEEK_"}

    max_rooms: int = Field(default=100, ge=1)
    log_dir: str = Field(default="backend/logs/hideseek", min_length=1)
    round_seconds: float = Field(default=DEFAULT_ROUND_SECONDS, gt=0)
    catch_distance_meters: float = Field(default=DEFAULT_CATCH_DISTANCE_METERS, gt=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    max_players: int = Field(default=MAX_PLAYERS, ge=2)

    def to_game_settings(self) -> GameSettings:
        return GameSettings(
            catch_distance_meters=self.catch_distance_meters,
            tick_interval_seconds=self.tick_interval_seconds,
            default_round_seconds=self.round_seconds,
            max_players=self.max_players,
        )
