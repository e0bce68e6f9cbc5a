"""Environment-level configuration.

Keeps deployment concerns (log level, CORS origins, session lifetime)
apart from the game engine, which takes no configuration at all.
"""

import os
from dataclasses import dataclass, field


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Environment / deployment settings."""

    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    session_ttl_seconds: int = 3600
    max_simulation_turns: int = 500

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            env=os.getenv("COUP_ENV", "development"),
            log_level=os.getenv("COUP_LOG_LEVEL", "INFO").upper(),
            allowed_origins=_split_origins(os.getenv("ALLOWED_ORIGINS", "*")),
            session_ttl_seconds=int(os.getenv("COUP_SESSION_TTL", "3600")),
            max_simulation_turns=int(os.getenv("COUP_MAX_SIMULATION_TURNS", "500")),
        )


def get_settings() -> Settings:
    """Convenience accessor for environment settings."""
    return Settings.from_env()
