"""Presence watcher bot package.

Modules:
- config: environment, logging and constants
- localization: message templates bundle
- http: session and request helpers, typed API errors
- api: OpenDota and Steam Web API surface
- heroes: lazily cached hero catalog
- state: shared player state and enums
- formatting: message building utilities
- notifier: output channel delivery with de-duplication
- watchers: Steam and match polling loops
- presence: gateway presence event handling
- supervisor: poller lifecycle across reconnects
- app: Discord client bootstrap and wiring
"""

from .config import Config, STEAM_POLL_SECS, MATCH_POLL_SECS
from .localization import Localization, load_localization
from .http import ApiError, ApiAuthError, make_session, fetch_json, build_headers
from .api import MatchData, PlayerSummary, OpenDotaClient, SteamClient
from .heroes import HeroCatalog
from .state import PlayerStatus, PlayerState, ChangeKind, SupervisorPhase, SharedPlayerState
from .formatting import (
    status_label,
    device_label,
    is_win,
    duration_minutes,
    fmt_match_result,
    fmt_steam_status,
    fmt_presence,
)
from .notifier import MessageSink, DiscordChannelSink, NotificationDispatcher
from .watchers import Poller, SteamPoller, MatchPoller, status_from_persona_state
from .presence import ActivityInfo, PresenceUpdate, PresenceEventHandler
from .supervisor import WatcherSupervisor
from .app import PresenceBot, main, startup_health_check

__all__ = [
    # Config / HTTP
    "Config", "STEAM_POLL_SECS", "MATCH_POLL_SECS", "Localization", "load_localization",
    "ApiError", "ApiAuthError", "make_session", "fetch_json", "build_headers",
    # API
    "MatchData", "PlayerSummary", "OpenDotaClient", "SteamClient", "HeroCatalog",
    # State / Formatting
    "PlayerStatus", "PlayerState", "ChangeKind", "SupervisorPhase", "SharedPlayerState",
    "status_label", "device_label", "is_win", "duration_minutes",
    "fmt_match_result", "fmt_steam_status", "fmt_presence",
    # Notifications / Watchers
    "MessageSink", "DiscordChannelSink", "NotificationDispatcher",
    "Poller", "SteamPoller", "MatchPoller", "status_from_persona_state",
    "ActivityInfo", "PresenceUpdate", "PresenceEventHandler", "WatcherSupervisor",
    # App
    "PresenceBot", "main", "startup_health_check",
]
