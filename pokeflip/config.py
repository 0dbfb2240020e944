"""
Game Configuration

Timings, catalog endpoint, and logging settings.
"""

from dataclasses import dataclass, fields
import logging
import os


logger = logging.getLogger(__name__)

ENV_PREFIX = "POKEFLIP_"


@dataclass
class GameConfig:
    """Configuration for the match engine and the creature catalog."""

    # Match engine timings
    resolution_delay_ms: int = 500   # pause before a two-card guess is judged
    reload_delay_ms: int = 1000      # pause before a cleared board is re-dealt

    # PokeAPI settings
    api_url: str = "https://pokeapi.co/api/v2"
    page_size: int = 8               # distinct creatures per round
    max_offset: int = 50             # random page offset is drawn from [0, max_offset)
    request_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"

    @property
    def resolution_delay(self) -> float:
        """Resolution delay in seconds."""
        return self.resolution_delay_ms / 1000.0

    @property
    def reload_delay(self) -> float:
        """Reload delay in seconds."""
        return self.reload_delay_ms / 1000.0

    @classmethod
    def from_env(cls) -> 'GameConfig':
        """
        Create a config from POKEFLIP_* environment variables.

        Unset variables keep their defaults. Values that cannot be parsed
        are ignored with a warning.
        """
        config = cls()
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue

            default = getattr(config, f.name)
            try:
                if isinstance(default, int):
                    value = int(raw)
                elif isinstance(default, float):
                    value = float(raw)
                else:
                    value = raw.strip()
            except ValueError:
                logger.warning(
                    "Ignoring %s%s=%r: expected %s",
                    ENV_PREFIX, f.name.upper(), raw, type(default).__name__
                )
                continue

            setattr(config, f.name, value)
        return config
