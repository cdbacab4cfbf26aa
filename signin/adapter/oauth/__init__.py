"""OAuth adapter: provider clients, strategies and profile mapping."""

from .profile import (
    discord_profile,
    fetch_profile,
    google_profile,
    microsoft_profile,
)
from .registrar import (
    DoneCallback,
    Strategy,
    StrategyRegistrar,
    get_request_database,
)

__all__ = [
    "DoneCallback",
    "Strategy",
    "StrategyRegistrar",
    "discord_profile",
    "fetch_profile",
    "get_request_database",
    "google_profile",
    "microsoft_profile",
]
