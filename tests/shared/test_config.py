"""Tests for environment configuration loading."""

from app.shared.config import EnvironConfig, config


class TestEnvironConfig:
    def test_singleton(self):
        assert EnvironConfig() is config

    def test_process_environment_overrides_env_files(self):
        # env.example leaves LIVEKIT_WS_URL empty; conftest sets it in os.environ
        assert config.get("LIVEKIT_WS_URL") == "wss://livekit.test"

    def test_reads_env_example(self):
        assert config.get("ROOM_EMPTY_TIMEOUT") == "300"

    def test_missing_key_returns_default(self):
        assert config.get("NOT_A_REAL_KEY") is None
        assert config.get("NOT_A_REAL_KEY", "fallback") == "fallback"
