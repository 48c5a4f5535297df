from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

import structlog

from hideseek.logic.engine import GameSessionEngine
from hideseek.logic.enums import PlayerRole, RoundStatus
from hideseek.logic.events import LocationErrorEvent, RoomUpdatedEvent, has_round_ended
from hideseek.logic.scheduler import AsyncioScheduler
from hideseek.logic.settings import GameSettings
from hideseek.session.broadcast import broadcast_to_subscribers
from hideseek.session.models import Game
from hideseek.session.room_manager import RoomManager

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hideseek.feed.location_feed import LocationFeed
    from hideseek.feed.types import LocationUpdate
    from hideseek.logic.enums import LocationFeedError, RoomAvailability
    from hideseek.logic.events import GameEvent
    from hideseek.logic.scheduler import Scheduler
    from hideseek.logic.types import Player, RoundSnapshot
    from hideseek.session.protocol import SubscriberProtocol
    from hideseek.session.room import Room

logger = structlog.get_logger()


class SessionManager:
    """Single owner of every room's engine.

    Lifecycle commands, location samples and countdown ticks for a room all
    go through that room's Game.lock before touching the engine or
    publishing, so subscribers see one consistent ordering of events.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        settings: GameSettings | None = None,
        max_rooms: int | None = None,
    ) -> None:
        self._settings = settings or GameSettings()
        self._scheduler = scheduler or AsyncioScheduler()
        self._room_manager = RoomManager(self._settings, max_rooms=max_rooms)
        self._games: dict[str, Game] = {}  # room_id -> Game
        self._pending_ticks: set[asyncio.Task[None]] = set()

    @property
    def room_manager(self) -> RoomManager:
        return self._room_manager

    @property
    def game_count(self) -> int:
        return len(self._games)

    def get_game(self, room_id: str) -> Game | None:
        return self._games.get(room_id)

    def get_room(self, room_id: str) -> Room | None:
        return self._room_manager.get_room(room_id)

    def get_snapshot(self, room_id: str) -> RoundSnapshot | None:
        game = self._games.get(room_id)
        return game.engine.snapshot() if game is not None else None

    def current_round_id(self, room_id: str) -> int | None:
        game = self._games.get(room_id)
        return game.round_id if game is not None else None

    def verify_room(self, room_id: str) -> RoomAvailability:
        return self._room_manager.verify_room(room_id)

    def consume_show_result(self, room_id: str) -> bool:
        """Return True once per finished round so the result screen is shown only once."""
        game = self._games.get(room_id)
        return game.engine.consume_show_result() if game is not None else False

    # --- Subscribers ---

    def subscribe(self, room_id: str, subscriber: SubscriberProtocol) -> None:
        game = self._require_game(room_id)
        game.subscribers[subscriber.subscriber_id] = subscriber

    def unsubscribe(self, room_id: str, subscriber_id: str) -> None:
        game = self._games.get(room_id)
        if game is not None:
            game.subscribers.pop(subscriber_id, None)

    # --- Rooms ---

    async def create_room(
        self,
        host: Player,
        *,
        room_id: str | None = None,
        max_players: int | None = None,
        game_duration: float | None = None,
    ) -> Room:
        room, event = self._room_manager.create_room(
            host,
            room_id=room_id,
            max_players=max_players,
            game_duration=game_duration,
        )
        game = Game(
            room_id=room.room_id,
            engine=GameSessionEngine(
                self._scheduler,
                self._settings,
                on_tick=lambda round_id, rid=room.room_id: self._schedule_tick(rid, round_id),
            ),
        )
        self._games[room.room_id] = game
        async with game.lock:
            await self._publish(game, [event])
        return room

    async def join_room(self, room_id: str, player: Player) -> Room:
        room, event = self._room_manager.join_room(room_id, player)
        game = self._require_game(room_id)
        async with game.lock:
            await self._publish(game, [event])
        return room

    async def leave_room(self, room_id: str, player_id: str) -> None:
        game = self._require_game(room_id)
        async with game.lock:
            event = self._room_manager.leave_room(room_id, player_id)
            if event is not None:
                await self._publish(game, [event])
        if event is not None and event.room is None:
            await self._discard_game(room_id)

    async def remove_room(self, room_id: str) -> None:
        game = self._games.get(room_id)
        event = self._room_manager.remove_room(room_id)
        if game is None:
            return
        if event is not None:
            async with game.lock:
                await self._publish(game, [event])
        await self._discard_game(room_id)

    async def _discard_game(self, room_id: str) -> None:
        game = self._games.pop(room_id, None)
        if game is None:
            return
        with _log_context(game):
            game.engine.reset()
        if game.feed_task is not None:
            game.feed_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await game.feed_task
        logger.info("game discarded", room_id=room_id)

    # --- Rounds ---

    async def start_round(
        self,
        room_id: str,
        requested_by: str,
        seeker_ids: Iterable[str],
        duration: float | None = None,
    ) -> RoundSnapshot:
        """Start a round for every room member, with the given members as seekers.

        Host-only. Seeker ids that are not room members are ignored.
        """
        room = self._room_manager.require_host(room_id, requested_by, "start a round")
        game = self._require_game(room_id)
        seekers = set(seeker_ids)
        roster = [
            player.with_role(PlayerRole.SEEKER if player_id in seekers else PlayerRole.RUNNER)
            for player_id, player in room.players.items()
        ]
        round_duration = duration if duration is not None else room.game_duration

        async with game.lock:
            with _log_context(game):
                events: list[GameEvent] = game.engine.start_round(round_duration, roster)
                structlog.contextvars.bind_contextvars(round_id=game.round_id)
                room_event = self._room_manager.set_status(room_id, RoundStatus.PLAYING)
                if room_event is not None:
                    events.append(room_event)
                await self._publish(game, events)
                return game.engine.snapshot()

    async def reset_round(self, room_id: str, requested_by: str) -> RoundSnapshot:
        self._room_manager.require_host(room_id, requested_by, "reset the round")
        game = self._require_game(room_id)
        async with game.lock:
            with _log_context(game):
                events: list[GameEvent] = game.engine.reset()
                structlog.contextvars.bind_contextvars(round_id=game.round_id)
                room_event = self._room_manager.set_status(room_id, RoundStatus.WAITING)
                if room_event is not None:
                    events.append(room_event)
                await self._publish(game, events)
                return game.engine.snapshot()

    async def pause_round(self, room_id: str) -> RoundSnapshot:
        game = self._require_game(room_id)
        async with game.lock:
            with _log_context(game):
                await self._publish(game, game.engine.pause())
                return game.engine.snapshot()

    async def resume_round(self, room_id: str) -> RoundSnapshot:
        game = self._require_game(room_id)
        async with game.lock:
            with _log_context(game):
                await self._publish(game, game.engine.resume())
                return game.engine.snapshot()

    # --- Location feed ---

    def attach_feed(self, room_id: str, feed: LocationFeed) -> asyncio.Task[None]:
        """Start draining a location feed into the room's engine.

        The feed is bound to the room's round id so samples queued before a
        reset are dropped when they are applied.
        """
        game = self._require_game(room_id)
        if game.feed_task is not None:
            game.feed_task.cancel()
        feed.bind_round_id_provider(lambda: self.current_round_id(room_id))
        game.feed_task = asyncio.create_task(feed.run(lambda update: self.submit_location(room_id, update)))
        return game.feed_task

    async def submit_location(self, room_id: str, update: LocationUpdate) -> None:
        """Apply one location sample. Fire-and-forget: unknown rooms drop the sample."""
        game = self._games.get(room_id)
        if game is None:
            logger.debug("location for unknown room dropped", room_id=room_id, player_id=update.player_id)
            return
        async with game.lock:
            with _log_context(game):
                events = game.engine.update_location(update.player_id, update.coordinate, round_id=update.round_id)
                await self._finish_and_publish(game, events)

    async def report_location_error(self, room_id: str, player_id: str, error: LocationFeedError) -> None:
        """Publish a device location failure. Round state is left untouched."""
        game = self._require_game(room_id)
        async with game.lock:
            with _log_context(game):
                logger.warning("location provider failed", player_id=player_id, error=error)
                await self._publish(
                    game,
                    [LocationErrorEvent(player_id=player_id, error=error, description=error.description)],
                )

    # --- Countdown ---

    def _schedule_tick(self, room_id: str, round_id: int) -> None:
        """Runs synchronously inside the timer; the tick is applied under the room lock."""
        task = asyncio.create_task(self._apply_tick(room_id, round_id))
        self._pending_ticks.add(task)
        task.add_done_callback(self._pending_ticks.discard)

    async def _apply_tick(self, room_id: str, round_id: int) -> None:
        game = self._games.get(room_id)
        if game is None:
            return
        async with game.lock:
            # the round may have ended, paused or been reset while this tick waited
            with _log_context(game):
                await self._finish_and_publish(game, game.engine.tick(round_id))

    async def drain(self) -> None:
        """Wait until every due tick has been applied and published."""
        while self._pending_ticks:
            await asyncio.gather(*list(self._pending_ticks))

    # --- Helpers ---

    def _require_game(self, room_id: str) -> Game:
        self._room_manager.require_room(room_id)
        return self._games[room_id]

    async def _finish_and_publish(self, game: Game, events: list[GameEvent]) -> None:
        """Publish engine events, marking the room finished when the round ended. Caller holds game.lock."""
        if has_round_ended(events):
            room_event = self._room_manager.set_status(game.room_id, RoundStatus.FINISHED)
            if room_event is not None:
                events = [*events, room_event]
        await self._publish(game, events)

    @staticmethod
    async def _publish(game: Game, events: list[GameEvent]) -> None:
        for event in events:
            message: dict[str, Any] = event.model_dump(mode="json")
            await broadcast_to_subscribers(game.subscribers, message)
            if isinstance(event, RoomUpdatedEvent) and event.room is None:
                game.subscribers.clear()


def _log_context(game: Game) -> contextlib.AbstractContextManager[None]:
    """Bind the room and its current round to every log line inside the block."""
    return structlog.contextvars.bound_contextvars(room_id=game.room_id, round_id=game.round_id)
