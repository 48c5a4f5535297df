"""
Simulated location source for local play and demos.

Each simulated player publishes an initial sample at its base point, then
a new sample every 1-3 seconds (interval picked once per player). Every
later sample lands 5-100 m from the player's own base at a random bearing.
The host's base defaults to Tokyo Station; other players start at a random
point near the host.
"""

from __future__ import annotations

import asyncio
import contextlib
import math
import random
from typing import TYPE_CHECKING

import structlog

from hideseek.logic.geo import offset_coordinate
from hideseek.logic.types import Coordinate

if TYPE_CHECKING:
    from hideseek.feed.location_feed import LocationFeed

logger = structlog.get_logger()

DEFAULT_BASE = Coordinate(latitude=35.681236, longitude=139.767125)


class SimulatedLocationFeed:
    def __init__(
        self,
        feed: LocationFeed,
        *,
        rng: random.Random | None = None,
        min_interval_seconds: float = 1.0,
        max_interval_seconds: float = 3.0,
        min_offset_meters: float = 5.0,
        max_offset_meters: float = 100.0,
    ) -> None:
        self._feed = feed
        self._rng = rng or random.Random()  # noqa: S311
        self._min_interval = min_interval_seconds
        self._max_interval = max_interval_seconds
        self._min_offset = min_offset_meters
        self._max_offset = max_offset_meters
        self._host_id: str | None = None
        self._bases: dict[str, Coordinate] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def simulated_player_ids(self) -> list[str]:
        return list(self._tasks)

    def base_of(self, player_id: str) -> Coordinate | None:
        return self._bases.get(player_id)

    def random_location_near(self, base: Coordinate) -> Coordinate:
        distance = self._rng.uniform(self._min_offset, self._max_offset)
        bearing = self._rng.uniform(0, 2 * math.pi)
        return offset_coordinate(base, distance, bearing)

    def add_host(self, player_id: str, base: Coordinate | None = None) -> None:
        """Publish the host at base (or the default point) and start walking around it."""
        self._host_id = player_id
        base = base or DEFAULT_BASE
        self._feed.publish(player_id, base)
        self.start(player_id, base)

    def add_player(self, player_id: str) -> Coordinate:
        """Place a player near the host, publish the first sample at once and start walking.

        Returns the player's base point.
        """
        host_base = self._bases.get(self._host_id) if self._host_id is not None else None
        if host_base is None:
            host_base = DEFAULT_BASE
        base = self.random_location_near(host_base)
        self._feed.publish(player_id, base)
        self.start(player_id, base)
        return base

    def start(self, player_id: str, base: Coordinate) -> None:
        """(Re)start the random walk for a player around base."""
        self.stop(player_id)
        self._bases[player_id] = base
        interval = self._rng.uniform(self._min_interval, self._max_interval)
        self._tasks[player_id] = asyncio.create_task(self._walk(player_id, base, interval))
        logger.debug("location simulation started", player_id=player_id, interval_seconds=round(interval, 2))

    def stop(self, player_id: str) -> None:
        task = self._tasks.pop(player_id, None)
        if task is not None and not task.done():
            task.cancel()
        self._bases.pop(player_id, None)

    def stop_all(self) -> None:
        for player_id in list(self._tasks):
            self.stop(player_id)

    async def aclose(self) -> None:
        """Stop every walk and wait for the tasks to finish cancelling."""
        tasks = list(self._tasks.values())
        self.stop_all()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _walk(self, player_id: str, base: Coordinate, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self._feed.publish(player_id, self.random_location_near(base))
