"""
Queue-backed channel from a location source into the session manager.

Producers call publish() without waiting for acknowledgement; a single
consumer task drains the queue in arrival order. When a round id provider
is attached, each sample is stamped with the round current at publish time
so samples that sit in the queue across a round reset are recognised as
stale when they are finally applied.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from hideseek.feed.types import LocationUpdate
from hideseek.logic.types import Coordinate

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()


class LocationFeed:
    def __init__(
        self,
        round_id_provider: Callable[[], int | None] | None = None,
        maxsize: int = 0,
    ) -> None:
        self._queue: asyncio.Queue[LocationUpdate] = asyncio.Queue(maxsize)
        self._round_id_provider = round_id_provider

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def bind_round_id_provider(self, provider: Callable[[], int | None]) -> None:
        self._round_id_provider = provider

    def publish(self, player_id: str, coordinate: Coordinate) -> bool:
        """Queue a sample. Returns False if the queue is full and the sample was dropped."""
        round_id = self._round_id_provider() if self._round_id_provider is not None else None
        update = LocationUpdate(player_id=player_id, coordinate=coordinate, round_id=round_id)
        try:
            self._queue.put_nowait(update)
        except asyncio.QueueFull:
            logger.warning("location feed full, dropping sample", player_id=player_id)
            return False
        return True

    def publish_raw(self, player_id: str, latitude: float, longitude: float) -> bool:
        """Queue a sample from raw degrees, dropping out-of-range values."""
        try:
            coordinate = Coordinate(latitude=latitude, longitude=longitude)
        except ValidationError:
            logger.warning(
                "invalid coordinate from location source",
                player_id=player_id,
                latitude=latitude,
                longitude=longitude,
            )
            return False
        return self.publish(player_id, coordinate)

    async def run(self, consumer: Callable[[LocationUpdate], Awaitable[None]]) -> None:
        """Deliver queued samples to consumer until cancelled."""
        while True:
            update = await self._queue.get()
            try:
                await consumer(update)
            except (RuntimeError, ValueError):
                logger.exception("location consumer failed", player_id=update.player_id)
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued sample has been consumed."""
        await self._queue.join()
