from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import aiohttp

from .config import OPENDOTA_API_URL, STEAM_API_URL
from .http import ApiError, make_session, fetch_json


SessionFactory = Callable[[], aiohttp.ClientSession]


def _parsed(url: str, parser: Callable[[Any], Any], data: Any) -> Any:
    try:
        return parser(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ApiError(url, f"malformed payload: {type(e).__name__}: {e}") from e


@dataclass(frozen=True)
class MatchData:
    match_id: int
    player_slot: int
    radiant_win: bool
    hero_id: int
    duration: int
    kills: int
    deaths: int
    assists: int


@dataclass(frozen=True)
class PlayerSummary:
    persona_state: int
    current_game: Optional[str] = None


def parse_matches(data: Any) -> List[MatchData]:
    """Parse an OpenDota recentMatches payload, newest first."""
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of matches, got {type(data).__name__}")
    return [
        MatchData(
            match_id=int(item["match_id"]),
            player_slot=int(item["player_slot"]),
            radiant_win=bool(item["radiant_win"]),
            hero_id=int(item["hero_id"]),
            duration=int(item["duration"]),
            kills=int(item["kills"]),
            deaths=int(item["deaths"]),
            assists=int(item["assists"]),
        )
        for item in data
    ]


def parse_heroes(data: Any) -> Dict[int, str]:
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of heroes, got {type(data).__name__}")
    return {int(hero["id"]): str(hero["localized_name"]) for hero in data}


def parse_player_summary(data: Any) -> Optional[PlayerSummary]:
    """Parse a GetPlayerSummaries payload. Returns None when the player is not listed."""
    players = (data.get("response") or {}).get("players", [])
    if not players:
        return None
    p = players[0]
    return PlayerSummary(
        persona_state=int(p.get("personastate", 0)),
        current_game=(p.get("gameextrainfo") or "").strip() or None,
    )


class OpenDotaClient:
    """OpenDota surface: hero catalog, recent matches, player profile."""

    def __init__(self, base_url: str = OPENDOTA_API_URL, session_factory: SessionFactory = make_session) -> None:
        self.base_url = base_url.rstrip("/")
        self._session_factory = session_factory

    async def get_heroes(self) -> Dict[int, str]:
        url = f"{self.base_url}/heroes"
        async with self._session_factory() as session:
            data = await fetch_json(session, url)
        return _parsed(url, parse_heroes, data)

    async def get_recent_matches(self, account_id: int) -> List[MatchData]:
        url = f"{self.base_url}/players/{account_id}/recentMatches"
        async with self._session_factory() as session:
            data = await fetch_json(session, url)
        return _parsed(url, parse_matches, data)

    async def get_player_profile(self, account_id: int) -> Dict[str, Any]:
        url = f"{self.base_url}/players/{account_id}"
        async with self._session_factory() as session:
            data = await fetch_json(session, url)
        return _parsed(url, lambda d: d.get("profile") or {}, data)


class SteamClient:
    """Steam Web API player summaries."""

    def __init__(self, api_key: str, base_url: str = STEAM_API_URL, session_factory: SessionFactory = make_session) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._session_factory = session_factory

    async def get_player_summary(self, steamid64: int) -> Optional[PlayerSummary]:
        params = {"key": self.api_key, "steamids": str(steamid64)}
        url = f"{self.base_url}/ISteamUser/GetPlayerSummaries/v2/"
        async with self._session_factory() as session:
            data = await fetch_json(session, url, params=params)
        return _parsed(url, parse_player_summary, data)
