from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# Load env early
load_dotenv()

# Logging configuration
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, log_level, logging.INFO),
)
logger = logging.getLogger(__name__)

# Reduce noisy libraries
logging.getLogger("discord").setLevel(logging.WARNING)
logging.getLogger("discord.gateway").setLevel(logging.WARNING)
logging.getLogger("discord.client").setLevel(logging.WARNING)
logging.getLogger("discord.http").setLevel(logging.WARNING)
logging.getLogger("aiohttp").setLevel(logging.WARNING)
logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)


# Poll cadences
STEAM_POLL_SECS: int = 30
MATCH_POLL_SECS: int = 60

# Public API endpoints
OPENDOTA_API_URL: str = "https://api.opendota.com/api"
STEAM_API_URL: str = "https://api.steampowered.com"

# Offset between a 32-bit Steam account id and its SteamID64
STEAMID64_BASE: int = 76561197960265728


def _require_int(name: str) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        raise ValueError(f"{name} environment variable is required")
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} is not a number: {raw!r}") from None


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} is not a number: {raw!r}") from None


@dataclass(frozen=True)
class Config:
    """Application configuration, built once from the environment and validated."""

    # Discord
    discord_token: str
    target_guild: int
    output_channel: int
    target_user: int

    # Dota / Steam identity (32-bit account id, as used by OpenDota)
    target_steamid32: int

    # Reaction added to the target user's messages
    emoji_id: Optional[int] = None
    emoji_name: Optional[str] = None

    steam_api_key: str = ""
    localization_file: str = "localization.json"

    opendota_api_url: str = OPENDOTA_API_URL
    steam_api_url: str = STEAM_API_URL

    steam_poll_secs: int = STEAM_POLL_SECS
    match_poll_secs: int = MATCH_POLL_SECS

    @classmethod
    def from_env(cls) -> "Config":
        token = os.getenv("DISCORD_TOKEN", "").strip()
        if not token:
            raise ValueError("DISCORD_TOKEN environment variable is required")

        config = cls(
            discord_token=token,
            target_guild=_require_int("TARGET_GUILD"),
            output_channel=_require_int("OUTPUT_CHANNEL"),
            target_user=_require_int("TARGET_USER"),
            target_steamid32=_require_int("TARGET_STEAMID32"),
            emoji_id=_optional_int("EMOJI_ID"),
            emoji_name=os.getenv("EMOJI_NAME", "").strip() or None,
            steam_api_key=os.getenv("STEAM_API_KEY", "").strip(),
            localization_file=os.getenv("LOCALIZATION_FILE", "localization.json").strip(),
            opendota_api_url=os.getenv("OPENDOTA_API_URL", OPENDOTA_API_URL).strip().rstrip("/"),
            steam_api_url=os.getenv("STEAM_API_URL", STEAM_API_URL).strip().rstrip("/"),
        )
        config.validate_config()
        return config

    def validate_config(self) -> None:
        if self.target_steamid32 < 0:
            raise ValueError("TARGET_STEAMID32 must be a positive 32-bit account id")
        if (self.emoji_id is None) != (self.emoji_name is None):
            raise ValueError("EMOJI_ID and EMOJI_NAME must be set together")
        if not self.steam_api_key:
            logger.warning("STEAM_API_KEY not configured - Steam presence polling is disabled")
        if self.emoji_id is None:
            logger.info("EMOJI_ID not configured - message reactions are disabled")

    @property
    def target_steamid64(self) -> int:
        return STEAMID64_BASE + self.target_steamid32

    @property
    def reactions_enabled(self) -> bool:
        return self.emoji_id is not None and self.emoji_name is not None
