"""
Config Tests
"""

from pokeflip.config import GameConfig


def test_defaults_match_game_timings():
    config = GameConfig()
    assert config.resolution_delay_ms == 500
    assert config.reload_delay_ms == 1000
    assert config.resolution_delay == 0.5
    assert config.reload_delay == 1.0
    assert config.page_size == 8
    assert config.max_offset == 50


def test_from_env_overrides(monkeypatch):
    """POKEFLIP_* variables override the defaults with the right types."""
    monkeypatch.setenv("POKEFLIP_RESOLUTION_DELAY_MS", "250")
    monkeypatch.setenv("POKEFLIP_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("POKEFLIP_API_URL", "http://localhost:9000/api/v2")
    monkeypatch.setenv("POKEFLIP_LOG_LEVEL", "debug")

    config = GameConfig.from_env()

    assert config.resolution_delay_ms == 250
    assert config.request_timeout == 2.5
    assert config.api_url == "http://localhost:9000/api/v2"
    assert config.log_level == "debug"
    assert config.reload_delay_ms == 1000


def test_from_env_ignores_unparseable_numbers(monkeypatch):
    monkeypatch.setenv("POKEFLIP_PAGE_SIZE", "lots")
    monkeypatch.setenv("POKEFLIP_MAX_OFFSET", "")

    config = GameConfig.from_env()

    assert config.page_size == 8
    assert config.max_offset == 50
