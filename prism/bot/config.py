"""
Configuration management for Prism.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_BACKENDS = ("sqlite", "postgres")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_TOKEN: str

    # Database
    DATABASE_BACKEND: str = "sqlite"
    DATABASE_URL: str = ""
    SQLITE_PATH: str = "db/prism.db"

    # Role allowed to run management and topic commands
    COMMANDER_ROLE: str = "Prism Commander"

    # Keep-alive web server
    KEEP_ALIVE: bool = False
    PORT: int = 11186
    HOST: str = "0.0.0.0"

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            DISCORD_TOKEN=os.getenv("DISCORD_TOKEN", ""),
            DATABASE_BACKEND=os.getenv("DATABASE_BACKEND", "sqlite").strip().lower(),
            DATABASE_URL=os.getenv("DATABASE_URL", ""),
            SQLITE_PATH=os.getenv("SQLITE_PATH", "db/prism.db"),
            COMMANDER_ROLE=os.getenv("COMMANDER_ROLE", "Prism Commander"),
            KEEP_ALIVE=_env_bool("KEEP_ALIVE"),
            PORT=int(os.getenv("PORT", "11186")),
            HOST=os.getenv("HOST", "0.0.0.0"),
            DEBUG=_env_bool("DEBUG"),
        )

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")

        if self.DATABASE_BACKEND not in DATABASE_BACKENDS:
            raise ValueError(
                f"DATABASE_BACKEND must be one of: {', '.join(DATABASE_BACKENDS)}"
            )

        if self.DATABASE_BACKEND == "postgres" and not self.DATABASE_URL:
            raise ValueError("DATABASE_URL is required for the postgres backend")

        if self.DATABASE_BACKEND == "sqlite" and not self.SQLITE_PATH:
            raise ValueError("SQLITE_PATH is required for the sqlite backend")

        if not self.COMMANDER_ROLE:
            raise ValueError("COMMANDER_ROLE cannot be empty")


# Global config instance
config = Config.from_env()
