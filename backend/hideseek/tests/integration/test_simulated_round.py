import asyncio

import pytest

from hideseek.logic.enums import RoundResult, RoundStatus
from hideseek.server.settings import GameServerSettings
from hideseek.server.simulate import RoundEndWaiter, run_simulation


class TestSimulatedRound:
    async def test_round_times_out_without_catches(self):
        settings = GameServerSettings(catch_distance_meters=0.001, tick_interval_seconds=0.02)

        snapshot = await run_simulation(settings, num_players=3, duration=0.1, seed=42)

        assert snapshot.status == RoundStatus.FINISHED
        assert snapshot.result == RoundResult.RUNNER_WIN
        assert snapshot.remaining_seconds == 0
        assert snapshot.show_result

    async def test_wide_catch_radius_lets_seeker_win(self):
        settings = GameServerSettings(catch_distance_meters=10_000, tick_interval_seconds=0.05)

        snapshot = await asyncio.wait_for(
            run_simulation(settings, num_players=4, num_seekers=1, duration=30, seed=7),
            timeout=5,
        )

        assert snapshot.result == RoundResult.SEEKER_WIN
        assert snapshot.caught_ids == {p.player_id for p in snapshot.roster if p.is_runner}
        assert snapshot.remaining_seconds > 0

    @pytest.mark.parametrize(("num_players", "num_seekers"), [(2, 0), (2, 2), (1, 1)])
    async def test_needs_a_seeker_and_a_runner(self, num_players, num_seekers):
        with pytest.raises(ValueError, match="at least one seeker and one runner"):
            await run_simulation(GameServerSettings(), num_players=num_players, num_seekers=num_seekers)


class TestRoundEndWaiter:
    async def test_collects_catches_and_end(self):
        waiter = RoundEndWaiter()

        await waiter.send_message({"type": "player_caught", "runner_id": "R1"})
        await waiter.send_message({"type": "round_ended"})

        assert waiter.caught == ["R1"]
        assert waiter.ended.is_set()
