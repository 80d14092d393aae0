from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime config (host side).

    - Loaded from environment variables (`TRACKPAD_RELAY_*`)
    - Also reads `.env` if present (via pydantic-settings + python-dotenv)
    - CLI flags override both
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TRACKPAD_RELAY_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 8080

    # Shared secret. None -> load from `token_path`, generating one if absent.
    auth_token: str | None = None
    token_path: Path | None = None

    # Fixed-window ceiling for pointer commands.
    max_events_per_second: int = 1000
    # "server": one budget shared by every client; "connection": one per client.
    rate_limit_scope: Literal["server", "connection"] = "server"

    # Upper bound on a single pointer call; a slower call drops that command.
    dispatch_timeout_s: float = 0.25

    # Debugging
    verbose: bool = False
    debug_log_msgs: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
