import pytest

from hideseek.logic.enums import RoomAvailability, RoundStatus
from hideseek.logic.events import EventType
from hideseek.logic.exceptions import (
    RoomFullError,
    RoomInProgressError,
    RoomLimitReachedError,
    RoomNotFoundError,
    UnauthorizedRoomActionError,
)
from hideseek.logic.settings import GameSettings
from hideseek.session.room_manager import ROOM_ID_DIGITS, RoomManager
from hideseek.tests.helpers import create_player


@pytest.fixture
def rooms():
    return RoomManager()


class TestCreateRoom:
    def test_host_is_first_member(self, rooms):
        room, event = rooms.create_room(create_player("h"), room_id="123456")

        assert room.host_id == "h"
        assert room.player_ids == ["h"]
        assert room.players["h"].is_host
        assert event.type == EventType.ROOM_UPDATED
        assert event.room.player_count == 1

    def test_generated_id_is_six_digits(self, rooms):
        room, _ = rooms.create_room(create_player("h"))

        assert len(room.room_id) == ROOM_ID_DIGITS
        assert room.room_id.isdigit()

    def test_defaults_come_from_settings(self):
        rooms = RoomManager(GameSettings(max_players=4, default_round_seconds=60))

        room, _ = rooms.create_room(create_player("h"))

        assert room.max_players == 4
        assert room.game_duration == 60
        assert room.status == RoundStatus.WAITING

    def test_duplicate_id_rejected(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        with pytest.raises(ValueError, match="already exists"):
            rooms.create_room(create_player("x"), room_id="1")

    def test_room_limit(self):
        rooms = RoomManager(max_rooms=1)
        rooms.create_room(create_player("h"))

        with pytest.raises(RoomLimitReachedError):
            rooms.create_room(create_player("x"))


class TestJoinRoom:
    def test_join_appends_in_order(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")

        rooms.join_room("1", create_player("a"))
        room, event = rooms.join_room("1", create_player("b"))

        assert room.player_ids == ["h", "a", "b"]
        assert event.room.player_count == 3

    def test_join_is_idempotent(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        rooms.join_room("1", create_player("a"))

        room, _ = rooms.join_room("1", create_player("a"))

        assert room.player_count == 2

    def test_joiner_cannot_claim_host(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")

        room, _ = rooms.join_room("1", create_player("a", is_host=True))

        assert not room.players["a"].is_host
        assert room.host_id == "h"

    def test_unknown_room(self, rooms):
        with pytest.raises(RoomNotFoundError) as exc_info:
            rooms.join_room("missing", create_player("a"))
        assert exc_info.value.room_id == "missing"

    def test_full_room(self, rooms):
        rooms.create_room(create_player("h"), room_id="1", max_players=2)
        rooms.join_room("1", create_player("a"))

        assert rooms.verify_room("1") == RoomAvailability.FULL
        with pytest.raises(RoomFullError):
            rooms.join_room("1", create_player("b"))

    def test_room_in_progress(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        rooms.set_status("1", RoundStatus.PLAYING)

        assert rooms.verify_room("1") == RoomAvailability.IN_PROGRESS
        with pytest.raises(RoomInProgressError):
            rooms.join_room("1", create_player("a"))

    def test_finished_room_accepts_players(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        rooms.set_status("1", RoundStatus.FINISHED)

        assert rooms.verify_room("1") == RoomAvailability.AVAILABLE
        rooms.join_room("1", create_player("a"))


class TestLeaveRoom:
    def test_member_leaves(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        rooms.join_room("1", create_player("a"))

        event = rooms.leave_room("1", "a")

        assert event.room.player_count == 1
        assert rooms.get_room("1").player_ids == ["h"]

    def test_host_leaving_promotes_next_member(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        rooms.join_room("1", create_player("a"))
        rooms.join_room("1", create_player("b"))

        event = rooms.leave_room("1", "h")

        assert event.room.host_id == "a"
        assert rooms.get_room("1").players["a"].is_host

    def test_last_member_leaving_removes_room(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")

        event = rooms.leave_room("1", "h")

        assert event.room is None
        assert rooms.get_room("1") is None
        assert rooms.verify_room("1") == RoomAvailability.NOT_FOUND

    def test_non_member_is_noop(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")

        assert rooms.leave_room("1", "stranger") is None


class TestRoomStatus:
    def test_unchanged_status_produces_no_event(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")

        assert rooms.set_status("1", RoundStatus.WAITING) is None
        assert rooms.set_status("1", RoundStatus.PLAYING).room.status == RoundStatus.PLAYING

    def test_unknown_room_is_ignored(self, rooms):
        assert rooms.set_status("missing", RoundStatus.PLAYING) is None

    def test_remove_room(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")

        assert rooms.remove_room("1").room is None
        assert rooms.remove_room("1") is None
        assert rooms.room_count == 0


class TestRequireHost:
    def test_host_passes(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        assert rooms.require_host("1", "h", "start a round").room_id == "1"

    def test_non_host_rejected(self, rooms):
        rooms.create_room(create_player("h"), room_id="1")
        rooms.join_room("1", create_player("a"))

        with pytest.raises(UnauthorizedRoomActionError) as exc_info:
            rooms.require_host("1", "a", "start a round")

        assert exc_info.value.player_id == "a"
        assert "start a round" in str(exc_info.value)
