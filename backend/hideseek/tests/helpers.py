from hideseek.logic.enums import PlayerRole
from hideseek.logic.geo import offset_coordinate
from hideseek.logic.types import Coordinate, Player

# Tokyo Station, where the mobile client centred its simulated players
ORIGIN = Coordinate(latitude=35.681236, longitude=139.767125)


def create_player(
    player_id: str,
    role: PlayerRole = PlayerRole.RUNNER,
    *,
    name: str | None = None,
    is_host: bool = False,
) -> Player:
    """Create a Player with sensible defaults for testing."""
    return Player(player_id=player_id, name=name if name is not None else player_id, role=role, is_host=is_host)


def seeker(player_id: str = "S") -> Player:
    return create_player(player_id, PlayerRole.SEEKER)


def runner(player_id: str) -> Player:
    return create_player(player_id, PlayerRole.RUNNER)


def north_of(origin: Coordinate, meters: float) -> Coordinate:
    """Point the given distance due north of origin."""
    return offset_coordinate(origin, meters, 0.0)
