"""Run one round end to end against simulated location sources."""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

import structlog

from hideseek.feed.location_feed import LocationFeed
from hideseek.feed.simulated import SimulatedLocationFeed
from hideseek.logic.events import EventType
from hideseek.logic.scheduler import AsyncioScheduler
from hideseek.logic.types import Player
from hideseek.session.manager import SessionManager
from hideseek.session.protocol import SubscriberProtocol

if TYPE_CHECKING:
    from hideseek.logic.types import RoundSnapshot
    from hideseek.server.settings import GameServerSettings

logger = structlog.get_logger()


class RoundEndWaiter(SubscriberProtocol):
    """Subscriber that resolves once a round_ended event is delivered."""

    def __init__(self) -> None:
        self.ended = asyncio.Event()
        self.caught: list[str] = []

    @property
    def subscriber_id(self) -> str:
        return "round-end-waiter"

    async def send_message(self, data: dict[str, Any]) -> None:
        if data["type"] == EventType.PLAYER_CAUGHT:
            self.caught.append(data["runner_id"])
        elif data["type"] == EventType.ROUND_ENDED:
            self.ended.set()


async def run_simulation(
    settings: GameServerSettings,
    *,
    num_players: int,
    num_seekers: int = 1,
    duration: float | None = None,
    seed: int | None = None,
) -> RoundSnapshot:
    """Fill a room with simulated players, play one round and return the final snapshot."""
    if not 1 <= num_seekers < num_players:
        raise ValueError(f"need at least one seeker and one runner, got {num_seekers} of {num_players}")

    manager = SessionManager(AsyncioScheduler(), settings.to_game_settings(), max_rooms=settings.max_rooms)
    host = Player(name="Host")
    room = await manager.create_room(host, max_players=max(num_players, 2))
    for i in range(1, num_players):
        await manager.join_room(room.room_id, Player(name=f"Player{i}"))

    waiter = RoundEndWaiter()
    manager.subscribe(room.room_id, waiter)

    feed = LocationFeed()
    simulator = SimulatedLocationFeed(feed, rng=random.Random(seed))  # noqa: S311
    manager.attach_feed(room.room_id, feed)

    seeker_ids = room.player_ids[:num_seekers]
    await manager.start_round(room.room_id, host.player_id, seeker_ids, duration=duration)
    simulator.add_host(host.player_id)
    for player_id in room.player_ids[1:]:
        simulator.add_player(player_id)

    try:
        await waiter.ended.wait()
        await manager.drain()
    finally:
        await simulator.aclose()

    snapshot = manager.get_snapshot(room.room_id)
    await manager.remove_room(room.room_id)
    if snapshot is None:
        raise RuntimeError("round state disappeared before the round ended")
    logger.info(
        "simulation finished",
        result=snapshot.result,
        caught=waiter.caught,
        elapsed_seconds=snapshot.elapsed_seconds,
    )
    return snapshot
