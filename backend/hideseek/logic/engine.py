"""
Round engine for location-based hide and seek.

Owns every piece of round state: player positions, the caught set, the
countdown, the result and the roster snapshot. Location updates and timer
ticks are the two independent producers that mutate it; both funnel into
the same end-of-round check so a round resolves exactly once.

Round lifecycle: waiting -> playing -> finished, back to waiting on reset()
or straight to playing on start_round(). Pause is a sub-state of playing
that only stops the countdown.

Every start or reset bumps round_id. Ticks and tagged location updates
from an older round id are dropped.

The engine is not thread-safe. All calls must come from one event loop
(SessionManager is that single owner).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from hideseek.logic.enums import PlayerRole, RoundResult, RoundStatus
from hideseek.logic.events import (
    LocationUpdatedEvent,
    PlayerCaughtEvent,
    RoundEndedEvent,
    RoundPausedEvent,
    RoundResetEvent,
    RoundResumedEvent,
    RoundStartedEvent,
    TimerTickEvent,
)
from hideseek.logic.geo import haversine_distance
from hideseek.logic.settings import GameSettings
from hideseek.logic.timer import CountdownTimer
from hideseek.logic.types import RoundSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hideseek.logic.events import GameEvent
    from hideseek.logic.scheduler import Scheduler
    from hideseek.logic.types import Coordinate, Player

logger = structlog.get_logger()

# receives the events produced by a countdown tick
TimerEventsCallback = Callable[[list["GameEvent"]], None]
# receives a due tick's round id; the owner applies it later with tick()
TickCallback = Callable[[int], None]


class GameSessionEngine:
    """Round state machine driven by lifecycle calls, location updates and ticks.

    By default a due tick is applied at once and its events go to
    on_timer_events. An owner that serializes engine access passes on_tick
    instead: due ticks are then handed over by round id and only take effect
    when the owner calls tick().
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settings: GameSettings | None = None,
        on_timer_events: TimerEventsCallback | None = None,
        on_tick: TickCallback | None = None,
    ) -> None:
        self._settings = settings or GameSettings()
        self._scheduler = scheduler
        self._timer = CountdownTimer(scheduler, self._settings.tick_interval_seconds)
        self._on_timer_events = on_timer_events
        self._on_tick_due = on_tick

        self._round_id = 0
        self._status = RoundStatus.WAITING
        self._positions: dict[str, Coordinate] = {}
        self._caught: set[str] = set()
        self._remaining_seconds = 0.0
        self._result: RoundResult | None = None
        self._roster: list[Player] = []
        self._paused = False
        self._started_at: float | None = None
        self._elapsed_seconds: float | None = None
        self._show_result = False

    # --- Published state ---

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def round_id(self) -> int:
        return self._round_id

    @property
    def status(self) -> RoundStatus:
        return self._status

    @property
    def positions(self) -> dict[str, Coordinate]:
        return dict(self._positions)

    @property
    def caught_ids(self) -> frozenset[str]:
        return frozenset(self._caught)

    @property
    def remaining_seconds(self) -> float:
        return self._remaining_seconds

    @property
    def result(self) -> RoundResult | None:
        return self._result

    @property
    def roster(self) -> tuple[Player, ...]:
        return tuple(self._roster)

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def elapsed_seconds(self) -> float | None:
        """Wall-clock length of the last finished round, None until it finishes."""
        return self._elapsed_seconds

    @property
    def show_result(self) -> bool:
        return self._show_result

    def consume_show_result(self) -> bool:
        """Return True exactly once after a round finishes."""
        pending = self._show_result
        self._show_result = False
        return pending

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            round_id=self._round_id,
            status=self._status,
            positions=dict(self._positions),
            caught_ids=frozenset(self._caught),
            remaining_seconds=self._remaining_seconds,
            result=self._result,
            roster=tuple(self._roster),
            elapsed_seconds=self._elapsed_seconds,
            paused=self._paused,
            show_result=self._show_result,
        )

    # --- Lifecycle ---

    def start_round(self, duration_seconds: float, players: Iterable[Player]) -> list[GameEvent]:
        """Reset all round state and start a new round with the given roster.

        Roles on the given players are used as-is. A duration <= 0 is clamped
        to zero and the round resolves on its first tick.
        """
        self._clear_round()
        self._roster = _unique_players(players)
        self._remaining_seconds = max(0.0, float(duration_seconds))
        self._status = RoundStatus.PLAYING
        self._started_at = self._scheduler.now()
        self._timer.start(self._round_id, self._on_tick)

        logger.info(
            "round started",
            round_id=self._round_id,
            duration_seconds=self._remaining_seconds,
            seekers=[p.player_id for p in self._roster if p.is_seeker],
            runner_count=len(self._runner_ids()),
        )
        return [
            RoundStartedEvent(
                round_id=self._round_id,
                duration_seconds=self._remaining_seconds,
                roster=list(self._roster),
            ),
        ]

    def reset(self) -> list[GameEvent]:
        """Return to waiting and clear round state. Every roster member becomes a runner."""
        self._clear_round()
        self._roster = [p.with_role(PlayerRole.RUNNER) for p in self._roster]
        logger.info("round reset", round_id=self._round_id)
        return [RoundResetEvent(round_id=self._round_id)]

    def pause(self) -> list[GameEvent]:
        """Stop the countdown. No-op unless playing and not already paused."""
        if self._status != RoundStatus.PLAYING or self._paused:
            return []
        self._timer.cancel()
        self._paused = True
        logger.info("round paused", round_id=self._round_id, remaining_seconds=self._remaining_seconds)
        return [RoundPausedEvent(round_id=self._round_id, remaining_seconds=self._remaining_seconds)]

    def resume(self) -> list[GameEvent]:
        """Restart the countdown. No-op unless playing and paused."""
        if self._status != RoundStatus.PLAYING or not self._paused:
            return []
        self._paused = False
        self._timer.resume()
        logger.info("round resumed", round_id=self._round_id, remaining_seconds=self._remaining_seconds)
        return [RoundResumedEvent(round_id=self._round_id, remaining_seconds=self._remaining_seconds)]

    def _clear_round(self) -> None:
        self._timer.cancel()
        self._round_id += 1
        self._status = RoundStatus.WAITING
        self._positions.clear()
        self._caught.clear()
        self._remaining_seconds = 0.0
        self._result = None
        self._paused = False
        self._started_at = None
        self._elapsed_seconds = None
        self._show_result = False

    # --- Location ingestion ---

    def update_location(
        self,
        player_id: str,
        coordinate: Coordinate,
        round_id: int | None = None,
    ) -> list[GameEvent]:
        """Record a player's latest position and run catch detection.

        Positions are recorded while waiting too, so seed positions that
        arrive before start_round are kept until the round is reset. Unknown
        player ids are stored but take no part in catches. A round_id that
        does not match the current round marks the update as stale and it is
        dropped; after the round has finished updates are ignored.
        """
        if round_id is not None and round_id != self._round_id:
            logger.debug("dropped stale location update", player_id=player_id, update_round_id=round_id)
            return []
        if self._status == RoundStatus.FINISHED:
            return []

        self._positions[player_id] = coordinate
        events: list[GameEvent] = [
            LocationUpdatedEvent(round_id=self._round_id, player_id=player_id, coordinate=coordinate),
        ]
        if self._status != RoundStatus.PLAYING:
            return events

        player = self._find_player(player_id)
        if player is None:
            return events
        if player.is_seeker:
            events.extend(self._catch_near_seeker(player_id))
        elif player_id not in self._caught:
            events.extend(self._catch_runner(player_id))
        return events

    # --- Catch detection ---

    def _catch_near_seeker(self, seeker_id: str) -> list[GameEvent]:
        """Catch every uncaught runner within range of a seeker that just moved."""
        seeker_at = self._positions.get(seeker_id)
        if seeker_at is None:
            return []

        events: list[GameEvent] = []
        for runner in self._uncaught_runners():
            runner_at = self._positions.get(runner.player_id)
            if runner_at is None:
                continue
            distance = haversine_distance(seeker_at, runner_at)
            if distance <= self._settings.catch_distance_meters:
                events.append(self._record_catch(seeker_id, runner.player_id, distance))

        if events:
            events.extend(self._evaluate_end())
        return events

    def _catch_runner(self, runner_id: str) -> list[GameEvent]:
        """Catch a runner that just moved within range of any seeker."""
        runner_at = self._positions.get(runner_id)
        if runner_at is None:
            return []

        for seeker in self._roster:
            if not seeker.is_seeker:
                continue
            seeker_at = self._positions.get(seeker.player_id)
            if seeker_at is None:
                continue
            distance = haversine_distance(seeker_at, runner_at)
            if distance <= self._settings.catch_distance_meters:
                return [self._record_catch(seeker.player_id, runner_id, distance), *self._evaluate_end()]
        return []

    def _record_catch(self, seeker_id: str, runner_id: str, distance: float) -> PlayerCaughtEvent:
        self._caught.add(runner_id)
        runner_count = len(self._runner_ids())
        logger.info(
            "runner caught",
            round_id=self._round_id,
            seeker_id=seeker_id,
            runner_id=runner_id,
            distance_meters=round(distance, 2),
            caught_count=len(self._caught),
            runner_count=runner_count,
        )
        return PlayerCaughtEvent(
            round_id=self._round_id,
            seeker_id=seeker_id,
            runner_id=runner_id,
            distance_meters=distance,
            caught_count=len(self._caught),
            runner_count=runner_count,
        )

    def _find_player(self, player_id: str) -> Player | None:
        return next((p for p in self._roster if p.player_id == player_id), None)

    def _runner_ids(self) -> set[str]:
        return {p.player_id for p in self._roster if p.is_runner}

    def _uncaught_runners(self) -> list[Player]:
        return [p for p in self._roster if p.is_runner and p.player_id not in self._caught]

    # --- Countdown and resolution ---

    def tick(self, round_id: int) -> list[GameEvent]:
        """Apply one countdown step for round_id.

        Ticks for an older round, or arriving while paused or not playing,
        are ignored.
        """
        if round_id != self._round_id or self._status != RoundStatus.PLAYING or self._paused:
            logger.debug("ignored tick", tick_round_id=round_id, round_id=self._round_id)
            return []

        self._remaining_seconds = max(0.0, self._remaining_seconds - self._settings.tick_interval_seconds)
        events: list[GameEvent] = [
            TimerTickEvent(round_id=self._round_id, remaining_seconds=self._remaining_seconds),
        ]
        events.extend(self._evaluate_end())
        return events

    def _on_tick(self, round_id: int) -> None:
        if self._on_tick_due is not None:
            self._on_tick_due(round_id)
            return
        events = self.tick(round_id)
        if events and self._on_timer_events is not None:
            self._on_timer_events(events)

    def _evaluate_end(self) -> list[GameEvent]:
        """Resolve the round if it is over. Safe to call any number of times."""
        if self._status != RoundStatus.PLAYING:
            return []
        # a full catch wins even when the clock hit zero in the same step
        if self._runner_ids() <= self._caught:
            return self._finish(RoundResult.SEEKER_WIN)
        if self._remaining_seconds <= 0:
            return self._finish(RoundResult.RUNNER_WIN)
        return []

    def _finish(self, result: RoundResult) -> list[GameEvent]:
        self._timer.cancel()
        self._status = RoundStatus.FINISHED
        self._result = result
        self._paused = False
        started_at = self._started_at if self._started_at is not None else self._scheduler.now()
        self._elapsed_seconds = self._scheduler.now() - started_at
        self._show_result = True

        logger.info(
            "round ended",
            round_id=self._round_id,
            result=result,
            elapsed_seconds=round(self._elapsed_seconds, 3),
            caught_count=len(self._caught),
        )
        return [
            RoundEndedEvent(
                round_id=self._round_id,
                result=result,
                elapsed_seconds=self._elapsed_seconds,
                remaining_seconds=self._remaining_seconds,
                caught_ids=sorted(self._caught),
            ),
        ]


def _unique_players(players: Iterable[Player]) -> list[Player]:
    """Keep the first occurrence of each player id, preserving order."""
    seen: set[str] = set()
    roster: list[Player] = []
    for player in players:
        if player.player_id in seen:
            continue
        seen.add(player.player_id)
        roster.append(player)
    return roster
