import pytest
from pydantic import ValidationError

from hideseek.server.settings import GameServerSettings


class TestGameServerSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HIDESEEK_LOG_DIR", raising=False)
        settings = GameServerSettings()

        assert settings.max_rooms == 100
        assert settings.round_seconds == 300
        assert settings.catch_distance_meters == 5.0
        assert settings.log_dir == "backend/logs/hideseek"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("HIDESEEK_MAX_ROOMS", "3")
        monkeypatch.setenv("HIDESEEK_CATCH_DISTANCE_METERS", "12.5")

        settings = GameServerSettings()

        assert settings.max_rooms == 3
        assert settings.catch_distance_meters == 12.5

    def test_invalid_environment_rejected(self, monkeypatch):
        monkeypatch.setenv("HIDESEEK_ROUND_SECONDS", "0")

        with pytest.raises(ValidationError, match="round_seconds"):
            GameServerSettings()

    def test_to_game_settings(self):
        game_settings = GameServerSettings(
            round_seconds=60,
            catch_distance_meters=10,
            tick_interval_seconds=0.5,
            max_players=4,
        ).to_game_settings()

        assert game_settings.default_round_seconds == 60
        assert game_settings.catch_distance_meters == 10
        assert game_settings.tick_interval_seconds == 0.5
        assert game_settings.max_players == 4
