"""Room model for the pre-round lobby and between rounds."""

from dataclasses import dataclass, field

from hideseek.logic.enums import RoundStatus
from hideseek.logic.settings import DEFAULT_ROUND_SECONDS, MAX_PLAYERS
from hideseek.logic.types import Player, RoomSnapshot


@dataclass
class Room:
    """A group of players that play rounds together.

    The host is the only member allowed to start or reset rounds. Players
    keep their join order, which becomes the roster order of each round.
    """

    room_id: str
    host_id: str
    players: dict[str, Player] = field(default_factory=dict)  # player_id -> Player
    max_players: int = MAX_PLAYERS
    game_duration: float = DEFAULT_ROUND_SECONDS
    status: RoundStatus = RoundStatus.WAITING

    @property
    def player_ids(self) -> list[str]:
        return list(self.players)

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_empty(self) -> bool:
        return self.player_count == 0

    @property
    def is_full(self) -> bool:
        return self.player_count >= self.max_players

    def is_host(self, player_id: str) -> bool:
        return player_id == self.host_id

    def snapshot(self) -> RoomSnapshot:
        return RoomSnapshot(
            room_id=self.room_id,
            host_id=self.host_id,
            players=tuple(self.players.values()),
            max_players=self.max_players,
            game_duration=self.game_duration,
            status=self.status,
        )
