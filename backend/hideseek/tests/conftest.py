from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hideseek.logic.engine import GameSessionEngine
from hideseek.logic.scheduler import VirtualScheduler
from hideseek.logic.settings import GameSettings
from hideseek.session.manager import SessionManager

if TYPE_CHECKING:
    from hideseek.logic.events import GameEvent


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def settings():
    return GameSettings()


@pytest.fixture
def timer_events():
    """Accumulator for events produced by countdown ticks."""
    return []


@pytest.fixture
def engine(scheduler, settings, timer_events):
    def on_timer_events(events: list[GameEvent]) -> None:
        timer_events.extend(events)

    return GameSessionEngine(scheduler, settings, on_timer_events=on_timer_events)


@pytest.fixture
def session_manager(scheduler, settings):
    return SessionManager(scheduler, settings)
